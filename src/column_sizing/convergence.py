"""Convergence primitives for the iterative dimensioning routines.

``convergence_factor`` gives a damped multiplicative correction that moves a
trial dimension towards the value at which ``current`` equals ``target``;
``convergence_conditions`` checks whether ``current`` sits inside an
(asymmetric) band around ``target``.  ``AdaptiveDivisor`` widens the damping
divisor whenever a correction factor exceeds the extremes seen so far.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

# Initial high/low-water marks; no real factor ever crosses them.
_HISTORY_HIGH: float = 1e12
_HISTORY_LOW: float = -1e12


def convergence_factor(current: float, target: float, divisor: float = 3) -> float:
    """Multiplicative correction ``(target / current - 1) / divisor + 1``.

    A larger ``divisor`` gives a smaller step.  For positive ``current`` and
    ``target`` and ``divisor > 1`` the factor is always positive.  A zero
    ``current`` yields ``inf`` so that callers see the divergence.
    """
    if current == 0:
        return math.inf
    return (target / current - 1.0) / divisor + 1.0


def convergence_conditions(
    current: float,
    target: float,
    high: float = 1.01,
    low: float = 0.99,
) -> bool:
    """True if ``low * target <= current <= high * target``."""
    return low * target <= current <= high * target


@dataclass
class AdaptiveDivisor:
    """Step divisor that grows when the correction factor overshoots.

    A factor above 1 that exceeds the previous above-1 factor, or a factor
    at or below 1 that falls under the previous one, increments the
    divisor.  The relevant mark is then set to the new factor.
    """

    divisor: int = 3
    high_mark: float = _HISTORY_HIGH
    low_mark: float = _HISTORY_LOW

    def update(self, factor: float) -> int:
        if factor > 1:
            if factor > self.high_mark:
                self.divisor += 1
            self.high_mark = factor
        else:
            if factor < self.low_mark:
                self.divisor += 1
            self.low_mark = factor
        return self.divisor
