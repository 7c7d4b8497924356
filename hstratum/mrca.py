"""Bounds on the rank of the most recent common ancestor of columns."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import combinations
from typing import Optional

from .column import HereditaryStratigraphicColumn, differentiae_match


def _shared_bit_width(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn
) -> int:
    return min(a.differentia_bit_width, b.differentia_bit_width)


def _newest_rank(column: HereditaryStratigraphicColumn) -> int:
    return max(column.num_strata_deposited - 1, 0)


def _intersect_retained_ranks(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn
) -> list[int]:
    """Ranks retained by both columns, in ascending order."""
    common = []
    iter_a = a.iter_retained_ranks()
    iter_b = b.iter_retained_ranks()
    rank_a = next(iter_a, None)
    rank_b = next(iter_b, None)
    while rank_a is not None and rank_b is not None:
        if rank_a < rank_b:
            rank_a = next(iter_a, None)
        elif rank_a > rank_b:
            rank_b = next(iter_b, None)
        else:
            common.append(rank_a)
            rank_a = next(iter_a, None)
            rank_b = next(iter_b, None)
    return common


def does_have_any_common_ancestor(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn
) -> bool:
    """Whether both columns have deposits and agree at rank 0."""
    if a.num_strata_deposited == 0 or b.num_strata_deposited == 0:
        return False
    first_a = a.stratum_at_rank(0)
    first_b = b.stratum_at_rank(0)
    if first_a is None or first_b is None:
        return False
    return differentiae_match(
        first_a.differentia, first_b.differentia, _shared_bit_width(a, b)
    )


def calc_rank_of_mrca_bounds_between(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn
) -> Optional[tuple[int, int]]:
    """Inclusive ``(lower, upper)`` bounds on the MRCA rank, or ``None``.

    The lower bound is the last common rank before the first mismatch; the
    upper bound is just below that mismatch, or the older column's newest
    rank when no mismatch is found.
    """
    if not does_have_any_common_ancestor(a, b):
        return None

    bit_width = _shared_bit_width(a, b)
    last_match: Optional[int] = None
    first_mismatch: Optional[int] = None
    for rank in _intersect_retained_ranks(a, b):
        stratum_a = a.stratum_at_rank(rank)
        stratum_b = b.stratum_at_rank(rank)
        if differentiae_match(stratum_a.differentia, stratum_b.differentia, bit_width):
            last_match = rank
        else:
            first_mismatch = rank
            break

    if last_match is None:
        return None
    if first_mismatch is not None:
        return last_match, max(first_mismatch - 1, 0)
    return last_match, min(_newest_rank(a), _newest_rank(b))


def calc_ranks_since_mrca_bounds_between(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn
) -> Optional[tuple[int, int]]:
    """Upper bounds on the ranks elapsed since the MRCA in each column."""
    bounds = calc_rank_of_mrca_bounds_between(a, b)
    if bounds is None:
        return None
    lower, _ = bounds
    return _newest_rank(a) - lower, _newest_rank(b) - lower


def calc_rank_of_mrca_bounds_among(
    population: Sequence[HereditaryStratigraphicColumn], confidence_level: float
) -> Optional[tuple[int, int]]:
    """Most restrictive pairwise MRCA bounds over a population.

    Returns ``None`` for fewer than two columns or when any pair shares no
    common ancestor. ``confidence_level`` does not affect the result.
    """
    if len(population) < 2:
        return None
    lows = []
    highs = []
    for a, b in combinations(population, 2):
        bounds = calc_rank_of_mrca_bounds_between(a, b)
        if bounds is None:
            return None
        lows.append(bounds[0])
        highs.append(bounds[1])
    low, high = min(lows), min(highs)
    if low > high:
        return None
    return low, high


def calc_rank_of_mrca_uncertainty_among(
    population: Sequence[HereditaryStratigraphicColumn], confidence_level: float
) -> Optional[int]:
    """Width of the population's MRCA bounds, or ``None``."""
    bounds = calc_rank_of_mrca_bounds_among(population, confidence_level)
    if bounds is None:
        return None
    low, high = bounds
    return high - low


def does_share_any_common_ancestor_among(
    population: Sequence[HereditaryStratigraphicColumn], confidence_level: float
) -> Optional[bool]:
    """``True`` if the population has MRCA bounds, ``None`` if unknown."""
    if calc_rank_of_mrca_bounds_among(population, confidence_level) is None:
        return None
    return True