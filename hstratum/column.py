"""Hereditary stratigraphic columns and the retention-policy interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Optional

MAX_BIT_WIDTH = 64


def differentia_mask(bit_width: int) -> int:
    """Mask selecting the low ``bit_width`` bits of a differentia."""
    if not 1 <= bit_width <= MAX_BIT_WIDTH:
        raise ValueError(f"bit width must be in 1..={MAX_BIT_WIDTH}, got {bit_width}")
    return (1 << bit_width) - 1


def differentiae_match(a: int, b: int, bit_width: int) -> bool:
    """Whether two differentiae agree in their low ``bit_width`` bits."""
    return (a ^ b) & differentia_mask(bit_width) == 0


class StratumRetentionPolicy(ABC):
    """Decides which strata a column keeps as strata are deposited."""

    @abstractmethod
    def iter_retained_ranks(self, num_strata_deposited: int) -> Iterator[int]:
        """Yield retained ranks in ascending order."""

    @abstractmethod
    def algo_identifier(self) -> str:
        """Name identifying the policy's algorithm."""

    def calc_num_strata_retained_exact(self, num_strata_deposited: int) -> int:
        """Number of strata retained after ``num_strata_deposited`` deposits."""
        return sum(1 for _ in self.iter_retained_ranks(num_strata_deposited))


@dataclass(frozen=True)
class Stratum:
    """A retained stratum: its rank and differentia value."""

    rank: int
    differentia: int


@dataclass
class HereditaryStratigraphicColumn:
    """A column of retained strata, held in ascending rank order."""

    policy: StratumRetentionPolicy
    differentia_bit_width: int
    strata: list[Stratum]
    num_strata_deposited: int
    _by_rank: dict[int, Stratum] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        differentia_mask(self.differentia_bit_width)
        self.strata = list(self.strata)
        self._by_rank = {stratum.rank: stratum for stratum in self.strata}

    @classmethod
    def from_parts(
        cls,
        policy: StratumRetentionPolicy,
        differentia_bit_width: int,
        strata: Iterable[Stratum],
        num_strata_deposited: int,
    ) -> "HereditaryStratigraphicColumn":
        return cls(policy, differentia_bit_width, list(strata), num_strata_deposited)

    def iter_retained_ranks(self) -> Iterator[int]:
        return (stratum.rank for stratum in self.strata)

    def iter_retained_differentia(self) -> Iterator[int]:
        return (stratum.differentia for stratum in self.strata)

    def iter_retained_strata(self) -> Iterator[Stratum]:
        return iter(self.strata)

    def stratum_at_rank(self, rank: int) -> Optional[Stratum]:
        """The retained stratum at ``rank``, or ``None`` if it is not retained."""
        return self._by_rank.get(rank)

    def num_strata_retained(self) -> int:
        return len(self.strata)