"""Ultimate moment capacity of a rectangular RC section for a given axial force.

Finds the neutral-axis depth at which the internal axial force of a
strain-compatible section equals the applied axial force, with the extreme
compression fibre at the ultimate concrete strain, and reports the resulting
moment and curvature.

Method
------
The strain profile is linear over the height, with the top fibre at the
ultimate strain of the concrete diagram (``epsilon_cu3``) and zero strain at
the neutral-axis depth ``x`` measured from the top:

.. math::

    \\varepsilon(y) = \\varepsilon_{cu3} \\frac{x - y}{x}

The internal axial force ``N(x)`` grows monotonically with ``x``, so ``x``
is bisected (geometrically) between a near-zero depth, where the whole steel
area yields in tension, and a depth of many section heights, where the
section is uniformly compressed.  When the applied force lies outside that
range, or the bisection runs out of iterations, no equilibrium exists and
:meth:`MNKappa.validity` reports ``False``; the evaluator never raises for a
failed search.  An applied compression above the squash load leaves a
moment capacity of exactly zero.

Concrete is integrated over horizontal strips; reinforcement is lumped into
discrete layers.  Moments are taken about mid-height and are positive when
the top fibre is in compression.

Units: **mm**, **MPa**, **N**, **N.mm**.  Strains in **permille**.
Axial force ``n_ed`` follows the design convention: negative in compression.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .geometry import RectangularSection
from .materials import StressStrainDiagram


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_N_STRIPS: int = 200          # strips for the concrete integration
_X_MIN_FACTOR: float = 1e-6   # lower bracket of x as a fraction of h
_X_MAX_FACTOR: float = 1e3    # upper bracket of x as a fraction of h
_MAX_ITERATIONS: int = 200


class MNKappa:
    """Moment-axial force-curvature evaluation at the ultimate limit state.

    Construct with the section and materials, then call :meth:`hookup` to
    run the equilibrium search.  Each instance holds the result of one
    search; build a new instance for a new geometry.

    Attributes (after :meth:`hookup`)
    ---------------------------------
    moment : float
        Ultimate moment, N.mm.
    kappa : float
        Curvature at the ultimate state, 1/mm.
    x : float
        Neutral-axis depth from the top fibre, mm.
    n_internal : float
        Internal axial force at ``x``, N (compression positive).
    iterations : int
        Bisection steps used.
    """

    def __init__(
        self,
        section: RectangularSection,
        concrete: StressStrainDiagram,
        tension: StressStrainDiagram,
        steel: StressStrainDiagram,
        as_layers: Sequence[float],
        layer_depths: Sequence[float],
        n_ed: float,
    ) -> None:
        if len(as_layers) != len(layer_depths):
            raise ValueError(
                f"{len(as_layers)} reinforcement areas given for "
                f"{len(layer_depths)} layer positions"
            )
        self.section = section
        self.concrete = concrete
        self.tension = tension
        self.steel = steel
        self.as_layers = np.asarray(as_layers, dtype=float)
        self.layer_depths = np.asarray(layer_depths, dtype=float)
        self.n_ext = -float(n_ed)
        self.epsilon_cu = concrete.ultimate_strain

        h = section.height
        self._dy = h / _N_STRIPS
        self._y = (np.arange(_N_STRIPS) + 0.5) * self._dy
        self._centroid = h / 2.0

        self.moment = 0.0
        self.kappa = 0.0
        self.x = math.nan
        self.n_internal = math.nan
        self.iterations = 0
        self._valid = False

    def validity(self) -> bool:
        """True when an equilibrium was found within the strain limits."""
        return self._valid

    def strain_at(self, x: float, y: np.ndarray) -> np.ndarray:
        """Strain in permille at depth ``y`` for neutral-axis depth ``x``."""
        return self.epsilon_cu * (x - y) / x

    def internal_forces(self, x: float) -> tuple[float, float]:
        """Internal (N, M) for neutral-axis depth ``x``.

        N is compression positive, in N; M about mid-height, in N.mm.
        """
        b = self.section.width

        eps_c = self.strain_at(x, self._y)
        sigma_c = self.concrete.stresses_at(eps_c) - self.tension.stresses_at(-eps_c)
        dF = sigma_c * b * self._dy
        n_concrete = float(np.sum(dF))
        m_concrete = float(np.sum(dF * (self._centroid - self._y)))

        eps_s = self.strain_at(x, self.layer_depths)
        f_steel = self.steel.stresses_at(eps_s) * self.as_layers
        n_steel = float(np.sum(f_steel))
        m_steel = float(np.sum(f_steel * (self._centroid - self.layer_depths)))

        return n_concrete + n_steel, m_concrete + m_steel

    def _store(self, x: float, n_int: float, m_int: float) -> None:
        self.x = x
        self.n_internal = n_int
        self.moment = m_int
        self.kappa = self.epsilon_cu / 1_000.0 / x

    def _steel_within_limit(self, x: float) -> bool:
        eps_s = self.strain_at(x, self.layer_depths)
        return bool(np.all(np.abs(eps_s) <= self.steel.ultimate_strain))

    def hookup(self, tolerance: float = 1e-4) -> "MNKappa":
        """Search the neutral-axis depth that balances the applied force.

        Parameters
        ----------
        tolerance : float
            Accepted axial force mismatch as a fraction of the larger of the
            two bracket forces (roughly the squash load).

        Returns
        -------
        MNKappa
            ``self``, for chaining.
        """
        h = self.section.height
        x_lo = _X_MIN_FACTOR * h
        x_hi = _X_MAX_FACTOR * h
        n_lo, m_lo = self.internal_forces(x_lo)
        n_hi, _ = self.internal_forces(x_hi)
        n_ref = max(abs(n_lo), abs(n_hi))
        self.iterations = 0

        if self.n_ext > n_hi:
            # beyond the squash load: no moment capacity left
            self._store(x_hi, n_hi, 0.0)
            self._valid = False
            return self
        if self.n_ext < n_lo:
            self._store(x_lo, n_lo, m_lo)
            self._valid = False
            return self

        for it in range(1, _MAX_ITERATIONS + 1):
            x_mid = math.sqrt(x_lo * x_hi)
            n_mid, m_mid = self.internal_forces(x_mid)
            self.iterations = it
            if abs(n_mid - self.n_ext) <= tolerance * n_ref:
                self._store(x_mid, n_mid, m_mid)
                self._valid = self._steel_within_limit(x_mid)
                return self
            if n_mid < self.n_ext:
                x_lo = x_mid
            else:
                x_hi = x_mid

        self._store(x_mid, n_mid, m_mid)
        self._valid = False
        return self


def evaluate_moment_capacity(
    section: RectangularSection,
    concrete: StressStrainDiagram,
    tension: StressStrainDiagram,
    steel: StressStrainDiagram,
    as_layers: Sequence[float],
    layer_depths: Sequence[float],
    n_ed: float,
    tolerance: float = 1e-4,
) -> MNKappa:
    """Build an :class:`MNKappa` for the given section and run the search."""
    return MNKappa(
        section, concrete, tension, steel, as_layers, layer_depths, n_ed,
    ).hookup(tolerance)
