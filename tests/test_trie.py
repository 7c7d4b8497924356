import pytest

from hstratum.trie import ROOT_RANK, NaiveTrie, Trie


def test_create_empty_trie():
    for trie in (Trie(), NaiveTrie()):
        assert len(trie) == 1
        assert trie.rank[0] == ROOT_RANK
        assert trie.parent[0] is None


def test_add_inner_and_leaf():
    for trie in (Trie(), NaiveTrie()):
        inner = trie.add_node(0, 0, 42, False, None)
        assert inner == 1
        assert trie.is_leaf[1] is False

        leaf = trie.add_node(inner, 1, 99, True, 0)
        assert leaf == 2
        assert trie.is_leaf[2] is True
        assert trie.taxon_id[2] == 0
        assert trie.children[inner] == [leaf]
        assert len(trie) == 3


def test_origin_time_defaults_to_rank():
    trie = Trie()
    node = trie.add_node(0, 7, 1, False, None)
    assert trie.origin_time[0] == 0.0
    assert trie.origin_time[node] == 7.0


def test_find_descendant_direct_child():
    for trie in (Trie(), NaiveTrie()):
        inner = trie.add_node(0, 0, 42, False, None)
        assert trie.find_descendant(0, 0, 42) == inner


def test_find_descendant_grandchild():
    for trie in (Trie(), NaiveTrie()):
        a = trie.add_node(0, 0, 10, False, None)
        b = trie.add_node(a, 5, 20, False, None)
        trie.add_node(b, 10, 30, False, None)
        assert trie.find_descendant(0, 10, 30) == 3


def test_find_descendant_not_found():
    for trie in (Trie(), NaiveTrie()):
        trie.add_node(0, 0, 42, False, None)
        assert trie.find_descendant(0, 0, 99) is None
        assert trie.find_descendant(0, 5, 42) is None


def test_find_descendant_skips_leaves():
    for trie in (Trie(), NaiveTrie()):
        trie.add_node(0, 0, 42, True, 0)
        assert trie.find_descendant(0, 0, 42) is None


def test_find_descendant_respects_ancestry():
    for trie in (Trie(), NaiveTrie()):
        a = trie.add_node(0, 0, 1, False, None)
        b = trie.add_node(0, 0, 2, False, None)
        target = trie.add_node(b, 3, 9, False, None)
        assert trie.find_descendant(a, 3, 9) is None
        assert trie.find_descendant(b, 3, 9) == target


def test_collapse_simple_chain():
    for trie in (Trie(), NaiveTrie()):
        a = trie.add_node(0, 0, 10, False, None)
        b = trie.add_node(a, 1, 20, False, None)
        c = trie.add_node(b, 2, 30, False, None)
        trie.add_node(c, 3, 40, True, 0)
        trie.add_node(c, 3, 50, True, 1)

        trie.collapse_unifurcations()

        assert trie.parent[c] == 0
        assert trie.parent[a] is None
        assert trie.parent[b] is None
        assert trie.children[0] == [c]


@pytest.mark.parametrize("trie_cls", [Trie, NaiveTrie])
def test_collapse_preserves_branches(trie_cls):
    trie = trie_cls()
    a = trie.add_node(0, 0, 10, False, None)
    trie.add_node(a, 1, 20, True, 0)
    trie.add_node(a, 1, 30, True, 1)

    trie.collapse_unifurcations()

    assert trie.parent[a] == 0
    assert len(trie.children[a]) == 2


def test_is_reachable_after_collapse():
    trie = Trie()
    a = trie.add_node(0, 0, 10, False, None)
    b = trie.add_node(a, 1, 20, False, None)
    leaf1 = trie.add_node(b, 2, 30, True, 0)
    trie.add_node(b, 2, 40, True, 1)

    assert trie.is_reachable(a) is True
    trie.collapse_unifurcations()
    assert trie.is_reachable(a) is False
    assert trie.is_reachable(b) is True
    assert trie.is_reachable(leaf1) is True