"""Rectangular cross-section geometry for column sizing.

Dimensions are in **mm**.  The section is bent about the axis parallel to
``width``; ``height`` is the dimension in the plane of bending.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class RectangularSection:
    """Solid rectangular concrete section."""

    width: float    # mm -- perpendicular to the plane of bending
    height: float   # mm -- in the plane of bending

    def __post_init__(self) -> None:
        if not (math.isfinite(self.width) and math.isfinite(self.height)):
            raise ValueError(
                f"Section dimensions must be finite, got {self.width} x {self.height}"
            )
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Section dimensions must be positive, got {self.width} x {self.height}"
            )

    @property
    def area(self) -> float:
        """Gross area, mm2."""
        return self.width * self.height

    @property
    def inertia(self) -> float:
        """Second moment of area about the bending axis, mm4.

        ``I = b * h^3 / 12``
        """
        return self.width * self.height**3 / 12.0

    @property
    def radius_of_gyration(self) -> float:
        """Exact radius of gyration ``sqrt(I / A) = h / sqrt(12)``, mm."""
        return math.sqrt(self.inertia / self.area)

    def approx_radius_of_gyration(self, factor: float = 3.46) -> float:
        """Code approximation ``i = h / 3.46`` used in the slenderness check."""
        return self.height / factor


def rectangle(width: float, height: float) -> RectangularSection:
    """Build a :class:`RectangularSection`."""
    return RectangularSection(width=float(width), height=float(height))
