"""Prior distributions over the rank of a most recent common ancestor."""

from __future__ import annotations

import math
import sys
from abc import ABC, abstractmethod

_EPSILON = sys.float_info.epsilon


def _midpoint(begin: int, end: int) -> float:
    return (float(begin) + float(end) - 1.0) / 2.0


class Prior(ABC):
    """Belief about where an MRCA falls within a rank interval ``[begin, end)``."""

    @abstractmethod
    def calc_interval_probability_proxy(self, begin: int, end: int) -> float:
        """Unnormalized weight proportional to the probability of ``[begin, end)``."""

    @abstractmethod
    def calc_interval_conditioned_mean(self, begin: int, end: int) -> float:
        """Expected MRCA rank given that it falls in ``[begin, end)``."""


class ArbitraryPrior(Prior):
    """Non-informative prior giving every interval the same weight."""

    def calc_interval_probability_proxy(self, begin: int, end: int) -> float:
        return 1.0

    def calc_interval_conditioned_mean(self, begin: int, end: int) -> float:
        return _midpoint(begin, end)


class UniformPrior(Prior):
    """Prior weighting each rank equally, so intervals weigh by their width."""

    def calc_interval_probability_proxy(self, begin: int, end: int) -> float:
        return float(end - begin)

    def calc_interval_conditioned_mean(self, begin: int, end: int) -> float:
        return _midpoint(begin, end)


class ExponentialPrior(Prior):
    """Prior for a population growing as ``growth_factor ** rank``."""

    def __init__(self, growth_factor: float) -> None:
        if not growth_factor > 0.0:
            raise ValueError(f"growth_factor must be positive, got {growth_factor}")
        self.growth_factor = float(growth_factor)

    def __repr__(self) -> str:
        return f"ExponentialPrior(growth_factor={self.growth_factor!r})"

    def _is_uniform(self) -> bool:
        return abs(self.growth_factor - 1.0) < _EPSILON

    def calc_interval_probability_proxy(self, begin: int, end: int) -> float:
        if self._is_uniform():
            return float(end - begin)
        g = self.growth_factor
        return g ** float(end) - g ** float(begin)

    def calc_interval_conditioned_mean(self, begin: int, end: int) -> float:
        if self._is_uniform():
            return _midpoint(begin, end)

        # Mean of x weighted by g**x over [begin, end], by closed-form integrals.
        g = self.growth_factor
        b = float(begin)
        e = float(end)
        ln_g = math.log(g)
        g_b = g**b
        g_e = g**e

        numerator = (g_e * (e * ln_g - 1.0) - g_b * (b * ln_g - 1.0)) / (ln_g * ln_g)
        denominator = (g_e - g_b) / ln_g

        if abs(denominator) < _EPSILON:
            return (b + e - 1.0) / 2.0
        return numerator / denominator