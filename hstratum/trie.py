"""Tries used to reconstruct phylogenies from hereditary stratigraphic columns."""

from __future__ import annotations

from collections import defaultdict
from typing import Optional

ROOT_RANK = 2**64 - 1
"""Rank of the virtual root node, which is excluded from output."""


def _collapse_unifurcations(
    parent: list[Optional[int]], is_leaf: list[bool], children: list[list[int]]
) -> None:
    """Splice out inner nodes with exactly one child, repeating until none remain."""
    did_collapse = True
    while did_collapse:
        did_collapse = False
        for node in range(1, len(parent)):
            par = parent[node]
            if par is None or is_leaf[node] or len(children[node]) != 1:
                continue
            (child,) = children[node]
            parent[child] = par
            siblings = children[par]
            if node in siblings:
                siblings[siblings.index(node)] = child
            children[node].clear()
            parent[node] = None
            did_collapse = True


class Trie:
    """Trie of strata with a search table keyed by ``(rank, differentia)``.

    Node attributes are held in parallel lists indexed by node id. Node 0 is
    a virtual root with rank ``ROOT_RANK``. Collapsed nodes stay in the lists
    with a parent of ``None``.
    """

    def __init__(self) -> None:
        self.parent: list[Optional[int]] = [None]
        self.rank: list[int] = [ROOT_RANK]
        self.differentia: list[int] = [0]
        self.is_leaf: list[bool] = [False]
        self.taxon_id: list[Optional[int]] = [None]
        self.children: list[list[int]] = [[]]
        self.origin_time: list[float] = [0.0]
        self._search_table: defaultdict[int, defaultdict[int, list[int]]] = defaultdict(
            lambda: defaultdict(list)
        )

    def __len__(self) -> int:
        """Number of nodes, including the virtual root and orphaned nodes."""
        return len(self.parent)

    def add_node(
        self,
        parent_idx: int,
        rank: int,
        diff: int,
        is_leaf: bool,
        taxon: Optional[int],
    ) -> int:
        """Add a child of ``parent_idx`` and return its id.

        Only inner nodes are indexed for descendant search.
        """
        idx = len(self.parent)
        self.parent.append(parent_idx)
        self.rank.append(rank)
        self.differentia.append(diff)
        self.is_leaf.append(is_leaf)
        self.taxon_id.append(taxon)
        self.children.append([])
        self.origin_time.append(float(rank))
        self.children[parent_idx].append(idx)
        if not is_leaf:
            self._search_table[rank][diff].append(idx)
        return idx

    def _is_inner_match(self, node: int, rank: int, diff: int) -> bool:
        return (
            not self.is_leaf[node]
            and self.rank[node] == rank
            and self.differentia[node] == diff
        )

    def find_descendant(self, ancestor: int, rank: int, diff: int) -> Optional[int]:
        """Return an inner node with ``(rank, diff)`` descending from ``ancestor``."""
        for child in self.children[ancestor]:
            if self._is_inner_match(child, rank, diff):
                return child

        by_diff = self._search_table.get(rank)
        if by_diff is None:
            return None
        for candidate in by_diff.get(diff, ()):
            if self._is_ancestor(ancestor, candidate):
                return candidate
        return None

    def _is_ancestor(self, ancestor: int, node: int) -> bool:
        current: Optional[int] = node
        while current is not None:
            if current == ancestor:
                return True
            current = self.parent[current]
        return False

    def collapse_unifurcations(self) -> None:
        """Remove inner nodes that have exactly one child."""
        _collapse_unifurcations(self.parent, self.is_leaf, self.children)

    def is_reachable(self, node: int) -> bool:
        """Whether ``node`` can be reached from the root."""
        return self._is_ancestor(0, node)


class NaiveTrie:
    """Trie that finds descendants by walking the subtree, without an index."""

    def __init__(self) -> None:
        self.parent: list[Optional[int]] = [None]
        self.rank: list[int] = [ROOT_RANK]
        self.differentia: list[int] = [0]
        self.is_leaf: list[bool] = [False]
        self.taxon_id: list[Optional[int]] = [None]
        self.children: list[list[int]] = [[]]

    def __len__(self) -> int:
        """Number of nodes, including the virtual root and orphaned nodes."""
        return len(self.parent)

    def add_node(
        self,
        parent_idx: int,
        rank: int,
        diff: int,
        is_leaf: bool,
        taxon: Optional[int],
    ) -> int:
        """Add a child of ``parent_idx`` and return its id."""
        idx = len(self.parent)
        self.parent.append(parent_idx)
        self.rank.append(rank)
        self.differentia.append(diff)
        self.is_leaf.append(is_leaf)
        self.taxon_id.append(taxon)
        self.children.append([])
        self.children[parent_idx].append(idx)
        return idx

    def _is_inner_match(self, node: int, rank: int, diff: int) -> bool:
        return (
            not self.is_leaf[node]
            and self.rank[node] == rank
            and self.differentia[node] == diff
        )

    def find_descendant(self, ancestor: int, rank: int, diff: int) -> Optional[int]:
        """Return an inner node with ``(rank, diff)`` found by depth-first search."""
        for child in self.children[ancestor]:
            if self._is_inner_match(child, rank, diff):
                return child

        stack = list(self.children[ancestor])
        while stack:
            node = stack.pop()
            for child in self.children[node]:
                if self._is_inner_match(child, rank, diff):
                    return child
                stack.append(child)
        return None

    def collapse_unifurcations(self) -> None:
        """Remove inner nodes that have exactly one child."""
        _collapse_unifurcations(self.parent, self.is_leaf, self.children)