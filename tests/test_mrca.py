import random

import pytest

from hstratum.column import HereditaryStratigraphicColumn, Stratum, StratumRetentionPolicy
from hstratum.mrca import (
    _intersect_retained_ranks,
    calc_rank_of_mrca_bounds_among,
    calc_rank_of_mrca_bounds_between,
    calc_rank_of_mrca_uncertainty_among,
    calc_ranks_since_mrca_bounds_between,
    does_have_any_common_ancestor,
    does_share_any_common_ancestor_among,
)


class PerfectPolicy(StratumRetentionPolicy):
    def iter_retained_ranks(self, num_strata_deposited):
        return iter(range(num_strata_deposited))

    def algo_identifier(self):
        return "perfect_resolution"


class FixedPolicy(StratumRetentionPolicy):
    def __init__(self, resolution):
        self.resolution = resolution

    def iter_retained_ranks(self, num_strata_deposited):
        return (
            rank
            for rank in range(num_strata_deposited)
            if rank % self.resolution == 0 or rank == num_strata_deposited - 1
        )

    def algo_identifier(self):
        return "fixed_resolution"


def make_col(strata, num_deposited, bit_width=64, policy=None):
    return HereditaryStratigraphicColumn.from_parts(
        policy or PerfectPolicy(),
        bit_width,
        [Stratum(rank, diff) for rank, diff in strata],
        num_deposited,
    )


def make_parent_child():
    rng = random.Random(42)
    parent_strata = [(rank, rng.getrandbits(64)) for rank in range(10)]
    child_strata = parent_strata + [(rank, rng.getrandbits(64)) for rank in range(10, 15)]
    return make_col(parent_strata, 10), make_col(child_strata, 15)


DIVERGE_A = [(0, 100), (1, 200), (2, 300), (3, 400), (4, 500)]
DIVERGE_B = [(0, 100), (1, 200), (2, 300), (3, 999), (4, 888)]
SPARSE_A = [(0, 10), (5, 20), (10, 30), (15, 40), (20, 50)]
SPARSE_B = [(0, 10), (5, 20), (10, 30), (15, 99), (20, 88)]


def test_common_ancestor_same_lineage():
    parent, child = make_parent_child()
    assert does_have_any_common_ancestor(parent, child) is True


def test_no_common_ancestor_empty_columns():
    assert does_have_any_common_ancestor(make_col([], 0), make_col([], 0)) is False


def test_mrca_bounds_parent_child_perfect():
    parent, child = make_parent_child()
    lower, upper = calc_rank_of_mrca_bounds_between(parent, child)
    assert lower == 9
    assert upper >= 9


def test_mrca_bounds_known_divergence():
    a = make_col(DIVERGE_A, 5)
    b = make_col(DIVERGE_B, 5)
    assert does_have_any_common_ancestor(a, b) is True
    assert calc_rank_of_mrca_bounds_between(a, b) == (2, 2)


def test_mrca_bounds_all_match():
    a = make_col([(0, 100), (1, 200), (2, 300)], 3)
    b = make_col([(0, 100), (1, 200), (2, 300)], 5)
    assert calc_rank_of_mrca_bounds_between(a, b) == (2, 2)


def test_mrca_bounds_sparse_ranks():
    a = make_col(SPARSE_A, 21)
    b = make_col(SPARSE_B, 21)
    assert calc_rank_of_mrca_bounds_between(a, b) == (10, 14)


def test_mrca_bounds_mismatch_at_first_common():
    a = make_col([(0, 111)], 1)
    b = make_col([(0, 222)], 1)
    assert does_have_any_common_ancestor(a, b) is False
    assert calc_rank_of_mrca_bounds_between(a, b) is None


def test_ranks_since_mrca():
    a = make_col(DIVERGE_A, 5)
    b = make_col(DIVERGE_B, 5)
    assert calc_ranks_since_mrca_bounds_between(a, b) == (2, 2)


def test_ranks_since_mrca_asymmetric():
    a = make_col([(0, 100), (1, 200), (2, 300), (3, 400)], 4)
    b = make_col([(0, 100), (1, 200), (2, 300), (3, 999), (4, 888), (5, 777)], 6)
    assert calc_ranks_since_mrca_bounds_between(a, b) == (1, 3)


def test_ranks_since_mrca_no_common_ancestor():
    a = make_col([(0, 1)], 1)
    b = make_col([(0, 2)], 1)
    assert calc_ranks_since_mrca_bounds_between(a, b) is None


def test_intersect_ranks_basic():
    a = make_col([(0, 1), (2, 2), (4, 3), (6, 4)], 7)
    b = make_col([(0, 1), (3, 2), (4, 3), (5, 4), (6, 5)], 7)
    assert _intersect_retained_ranks(a, b) == [0, 4, 6]


def test_common_ancestor_mixed_bit_width_is_symmetric():
    a = make_col([(0, 0xABCD), (1, 0x1234)], 2, bit_width=64)
    b = make_col([(0, 0xCD), (1, 0x99)], 2, bit_width=8)
    assert does_have_any_common_ancestor(a, b) is True
    assert does_have_any_common_ancestor(b, a) is True
    assert calc_rank_of_mrca_bounds_between(a, b) == calc_rank_of_mrca_bounds_between(b, a)
    assert calc_rank_of_mrca_bounds_between(a, b) == (0, 0)


def test_mrca_with_fixed_resolution():
    a = make_col(
        [(0, 42), (5, 100), (10, 200), (15, 300), (20, 400)], 21, policy=FixedPolicy(5)
    )
    b = make_col(
        [(0, 42), (5, 100), (10, 200), (15, 999), (20, 888)], 21, policy=FixedPolicy(5)
    )
    assert calc_rank_of_mrca_bounds_between(a, b) == (10, 14)


def test_bounds_among_needs_two_columns():
    assert calc_rank_of_mrca_bounds_among([make_col(DIVERGE_A, 5)], 0.95) is None
    assert calc_rank_of_mrca_bounds_among([], 0.95) is None


def test_bounds_among_takes_minimum():
    population = [make_col(DIVERGE_A, 5), make_col(DIVERGE_B, 5), make_col(DIVERGE_A, 5)]
    assert calc_rank_of_mrca_bounds_among(population, 0.95) == (2, 2)
    assert calc_rank_of_mrca_uncertainty_among(population, 0.95) == 0


def test_uncertainty_among_sparse():
    population = [make_col(SPARSE_A, 21), make_col(SPARSE_B, 21), make_col(SPARSE_A, 21)]
    assert calc_rank_of_mrca_bounds_among(population, 0.95) == (10, 14)
    assert calc_rank_of_mrca_uncertainty_among(population, 0.95) == 4


@pytest.mark.parametrize(
    "population, expected",
    [
        ([make_col(DIVERGE_A, 5), make_col(DIVERGE_B, 5)], True),
        ([make_col(DIVERGE_A, 5), make_col([(0, 7)], 1)], None),
        ([make_col(DIVERGE_A, 5)], None),
    ],
)
def test_does_share_any_common_ancestor_among(population, expected):
    assert does_share_any_common_ancestor_among(population, 0.95) is expected


def test_uncertainty_among_none_without_common_ancestor():
    population = [make_col(DIVERGE_A, 5), make_col([(0, 7)], 1)]
    assert calc_rank_of_mrca_uncertainty_among(population, 0.95) is None