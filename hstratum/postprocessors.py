"""Postprocessors that assign origin times to trie nodes before export."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Optional

from .priors import Prior
from .trie import ROOT_RANK, Trie


def _iter_descendants(trie: Trie) -> Iterator[int]:
    """Yield nodes reachable from the root, each after its parent."""
    stack = [0]
    while stack:
        node = stack.pop()
        for child in trie.children[node]:
            yield child
            stack.append(child)


def _min_inner_child_rank(trie: Trie, node: int) -> Optional[int]:
    return min(
        (trie.rank[child] for child in trie.children[node] if not trie.is_leaf[child]),
        default=None,
    )


class TriePostprocessor(ABC):
    """Adjusts a trie after construction, typically its ``origin_time`` values."""

    @abstractmethod
    def process(self, trie: Trie, p_differentia_collision: float) -> None:
        """Update ``trie`` in place."""


class AssignOriginTimeNodeRankPostprocessor(TriePostprocessor):
    """Set every node's origin time to its rank."""

    def process(self, trie: Trie, p_differentia_collision: float) -> None:
        trie.origin_time[:] = [float(rank) for rank in trie.rank]


class AssignOriginTimeNaivePostprocessor(TriePostprocessor):
    """Assign origin times from the prior's conditioned mean.

    The virtual root gets 0, leaves keep their rank, and an inner node gets
    the prior's mean over the interval up to its lowest-ranked inner child,
    or its own rank when it has no inner children.
    """

    def __init__(self, prior: Prior) -> None:
        self.prior = prior

    def process(self, trie: Trie, p_differentia_collision: float) -> None:
        for node in (0, *_iter_descendants(trie)):
            rank = trie.rank[node]
            if rank == ROOT_RANK:
                trie.origin_time[node] = 0.0
                continue
            if trie.is_leaf[node]:
                trie.origin_time[node] = float(rank)
                continue
            child_rank = _min_inner_child_rank(trie, node)
            trie.origin_time[node] = (
                float(rank)
                if child_rank is None
                else self.prior.calc_interval_conditioned_mean(rank, child_rank)
            )


class AssignOriginTimeExpectedValuePostprocessor(TriePostprocessor):
    """Blend each inner node's naive origin time with its parent's.

    The parent is weighted by the collision probability and the naive
    estimate by the prior's probability proxy for the node's interval.
    """

    def __init__(self, prior: Prior) -> None:
        self.prior = prior

    def process(self, trie: Trie, p_differentia_collision: float) -> None:
        AssignOriginTimeNaivePostprocessor(self.prior).process(
            trie, p_differentia_collision
        )

        for node in _iter_descendants(trie):
            rank = trie.rank[node]
            if rank == ROOT_RANK or trie.is_leaf[node]:
                continue
            parent = trie.parent[node]
            if parent is None or parent >= len(trie):
                continue

            child_rank = _min_inner_child_rank(trie, node)
            w_naive = (
                1.0
                if child_rank is None
                else self.prior.calc_interval_probability_proxy(rank, child_rank)
            )
            w_parent = p_differentia_collision
            total = w_parent + w_naive
            if total > 0.0:
                trie.origin_time[node] = (
                    w_parent * trie.origin_time[parent]
                    + w_naive * trie.origin_time[node]
                ) / total


class CompoundPostprocessor(TriePostprocessor):
    """Apply a sequence of postprocessors in order."""

    def __init__(self, steps: Iterable[TriePostprocessor]) -> None:
        self.steps = list(steps)

    def process(self, trie: Trie, p_differentia_collision: float) -> None:
        for step in self.steps:
            step.process(trie, p_differentia_collision)