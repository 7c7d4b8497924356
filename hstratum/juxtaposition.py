"""Comparisons of the retained strata of two columns."""

from __future__ import annotations

import math
from collections.abc import Iterator
from itertools import islice
from typing import Optional

from .column import HereditaryStratigraphicColumn, differentiae_match

_U64_MAX = 2**64 - 1


def _shared_bit_width(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn
) -> int:
    return min(a.differentia_bit_width, b.differentia_bit_width)


def _newest_rank(column: HereditaryStratigraphicColumn) -> int:
    return max(column.num_strata_deposited - 1, 0)


def _iter_common_rank_matches(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn
) -> Iterator[tuple[int, bool]]:
    """Yield ``(rank, matches)`` for every rank retained by both columns."""
    bit_width = _shared_bit_width(a, b)
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
            stratum_a = a.stratum_at_rank(rank_a)
            stratum_b = b.stratum_at_rank(rank_a)
            yield rank_a, differentiae_match(
                stratum_a.differentia, stratum_b.differentia, bit_width
            )
            rank_a = next(iter_a, None)
            rank_b = next(iter_b, None)


def calc_probability_differentia_collision(bit_width: int) -> float:
    """Probability that two random differentiae of ``bit_width`` bits match."""
    return math.ldexp(1.0, -bit_width)


def calc_min_implausible_spurious_collisions(
    bit_width: int, significance_level: float
) -> int:
    """Smallest ``n`` with ``p ** n <= significance_level``.

    A significance level of zero can never be met and gives ``2**64 - 1``.
    """
    if significance_level == 0.0:
        return _U64_MAX
    p = calc_probability_differentia_collision(bit_width)
    if significance_level >= p:
        return 1
    if not significance_level > 0.0:
        return 0
    ratio = math.log(significance_level) / math.log(p)
    return min(max(math.ceil(ratio), 0), _U64_MAX)


def iter_ranks_of_retained_commonality_between(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn
) -> Iterator[int]:
    """Yield common retained ranks with matching differentiae, up to the first mismatch."""
    for rank, matches in _iter_common_rank_matches(a, b):
        if not matches:
            return
        yield rank


def get_nth_common_rank_between(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn, n: int
) -> Optional[int]:
    """The ``n``-th (from 0) matching common rank, or ``None`` if there are fewer."""
    return next(islice(iter_ranks_of_retained_commonality_between(a, b), n, None), None)


def calc_rank_of_last_retained_commonality_between(
    a: HereditaryStratigraphicColumn,
    b: HereditaryStratigraphicColumn,
    confidence_level: float,
) -> Optional[int]:
    """Last common rank confirmed with ``confidence_level`` despite spurious collisions.

    This is the oldest rank among the last ``threshold`` matching common ranks,
    or ``None`` when fewer than ``threshold`` of them exist.
    """
    threshold = calc_min_implausible_spurious_collisions(
        _shared_bit_width(a, b), 1.0 - confidence_level
    )
    if threshold == 0:
        return None
    matches = list(iter_ranks_of_retained_commonality_between(a, b))
    if len(matches) < threshold:
        return None
    return matches[-threshold]


def calc_rank_of_first_retained_disparity_between(
    a: HereditaryStratigraphicColumn,
    b: HereditaryStratigraphicColumn,
    confidence_level: float,
) -> Optional[int]:
    """First common retained rank whose differentiae differ, or ``None``.

    ``confidence_level`` does not affect the result.
    """
    return next(
        (rank for rank, matches in _iter_common_rank_matches(a, b) if not matches),
        None,
    )


def calc_ranks_since_last_retained_commonality_with(
    focal: HereditaryStratigraphicColumn,
    other: HereditaryStratigraphicColumn,
    confidence_level: float,
) -> Optional[int]:
    """Ranks elapsed in ``focal`` since its last confirmed commonality with ``other``."""
    last = calc_rank_of_last_retained_commonality_between(
        focal, other, confidence_level
    )
    if last is None:
        return None
    return max(_newest_rank(focal) - last, 0)


def calc_ranks_since_first_retained_disparity_with(
    focal: HereditaryStratigraphicColumn,
    other: HereditaryStratigraphicColumn,
    confidence_level: float,
) -> Optional[int]:
    """Ranks elapsed in ``focal`` since its first retained disparity with ``other``."""
    first = calc_rank_of_first_retained_disparity_between(
        focal, other, confidence_level
    )
    if first is None:
        return None
    return max(_newest_rank(focal) - first, 0)


def does_definitively_share_no_common_ancestor(
    a: HereditaryStratigraphicColumn, b: HereditaryStratigraphicColumn
) -> bool:
    """Whether the rank-0 strata of both columns exist and differ."""
    first_a = a.stratum_at_rank(0)
    first_b = b.stratum_at_rank(0)
    if first_a is None or first_b is None:
        return False
    return not differentiae_match(
        first_a.differentia, first_b.differentia, _shared_bit_width(a, b)
    )