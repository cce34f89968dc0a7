"""Column design problem per NEN-EN 1992-1-1.

Holds the applied loads, material and geometry parameters of a column and
exposes the code formulas the dimensioning solver needs: the equivalent
first-order moment, the second-order moment by the nominal curvature method,
the design moment and the axial force resistance.

Key references
--------------
* NEN-EN 1992-1-1, Cl. 5.8.8.2(2) -- Equivalent first-order end moment M0e
* NEN-EN 1992-1-1, Cl. 5.8.8.3    -- Curvature, Kr and Kphi
* NEN-EN 1992-1-1, Cl. 5.8.8.2(1) -- Second-order eccentricity e2 = (1/r) l0^2 / c

Units: **N**, **mm**, **MPa**, **N.mm**.  ``NEd`` is negative in compression.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from .materials import StressStrainDiagram, b500
from .utils import kn_to_n, knm_to_nmm, load_code_tables, m_to_mm, percent_to_ratio


def det_m0e(m1: float, m2: float) -> float:
    """Equivalent first-order moment per NEN-EN 1992-1-1 Cl. 5.8.8.2(2).

    ``M0e = 0.6 M02 + 0.4 M01``, returned when it exceeds ``0.4 M02``;
    otherwise ``0.4 M0e`` is returned.

    Parameters
    ----------
    m1, m2 : float
        Bending moments at the two ends of the column.
    """
    m02 = max(m1, m2)
    m01 = min(m1, m2)
    m0e = 0.6 * m02 + 0.4 * m01
    return m0e if m0e > 0.4 * m02 else 0.4 * m0e


def code_constants() -> dict[str, float]:
    """Column constants from ``nen_en_tables.yaml`` as constructor kwargs."""
    tables = load_code_tables()
    steel = tables["steel_grades"]["B500"]
    so = tables["second_order"]
    col = tables["column"]
    return {
        "a": float(col["a"]),
        "bh": float(col["bh"]),
        "fyd": float(steel["fyd"]),
        "Es": float(steel["Es"]),
        "gamma_c": float(tables["partial_safety_factors"]["gamma_c"]),
        "n_bal": float(so["n_bal"]),
        "curvature_lever": float(so["curvature_lever"]),
        "axial_steel_strain": float(so["axial_steel_strain"]),
    }


@dataclass
class ColumnDesignProblem:
    """Inputs and results of one column dimensioning.

    Attributes
    ----------
    m1, m2 : float
        Signed end moments, N.mm.
    NEd : float
        Design axial force, N (negative = compression).
    fck : float
        Characteristic concrete strength, MPa.
    rho : float
        Total reinforcement ratio ``As,tot / Ac``.
    l0 : float
        Effective buckling length, mm.
    phi_eff : float
        Effective creep ratio.
    a : float
        Reinforcement centroid distance from the face as a fraction of h.
    bh : float
        Width / height ratio of the trial section.

    Result attributes (``validity``, ``width``, ``height``, ``As``, ``MRd``,
    ``NRd``, ``M0Ed_M2``) are written by the solver and are only meaningful
    when ``validity`` is True.  ``As`` is the area of one of the two
    symmetric reinforcement layers.
    """

    m1: float
    m2: float
    NEd: float
    fck: float
    rho: float
    l0: float
    phi_eff: float
    a: float = 0.2
    bh: float = 1.0
    fyd: float = 435.0
    Es: float = 200_000.0
    gamma_c: float = 1.5
    n_bal: float = 0.4
    curvature_lever: float = 0.45
    axial_steel_strain: float = 1.75     # permille
    steel: StressStrainDiagram = field(default_factory=b500, repr=False)
    label: str = ""

    M0Ed: float = field(init=False)

    # results
    validity: bool = field(default=False, init=False)
    width: float | None = field(default=None, init=False)
    height: float | None = field(default=None, init=False)
    As: float | None = field(default=None, init=False)
    MRd: float | None = field(default=None, init=False)
    NRd: float | None = field(default=None, init=False)
    M0Ed_M2: float | None = field(default=None, init=False)
    phase: str | None = field(default=None, init=False)
    iterations: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self._check_inputs()
        self.M0Ed = det_m0e(self.m1, self.m2)

    def _check_inputs(self) -> None:
        for name in ("m1", "m2", "NEd", "fck", "rho", "l0", "phi_eff", "a", "bh"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value}")
        if self.fck <= 0:
            raise ValueError(f"fck must be positive, got {self.fck}")
        if self.rho <= 0:
            raise ValueError(f"rho must be positive, got {self.rho}")
        if self.l0 <= 0:
            raise ValueError(f"l0 must be positive, got {self.l0}")
        if self.phi_eff < 0:
            raise ValueError(f"phi_eff cannot be negative, got {self.phi_eff}")
        if self.NEd >= 0:
            raise ValueError(
                f"NEd must be a compressive (negative) force, got {self.NEd}"
            )
        if not 0 < self.a < 0.5:
            raise ValueError(f"a must lie between 0 and 0.5, got {self.a}")
        if self.bh <= 0:
            raise ValueError(f"bh must be positive, got {self.bh}")

    @classmethod
    def from_engineering_units(
        cls,
        M1: float,
        M2: float,
        NEd: float,
        fck: float,
        rho: float,
        l0: float,
        phi_eff: float,
        **kwargs: Any,
    ) -> "ColumnDesignProblem":
        """Build a problem from kN.m, kN, MPa, percent and metres.

        Code constants are taken from ``nen_en_tables.yaml`` unless given
        in ``kwargs``.
        """
        params = code_constants()
        params.update(kwargs)
        return cls(
            m1=knm_to_nmm(M1),
            m2=knm_to_nmm(M2),
            NEd=kn_to_n(NEd),
            fck=fck,
            rho=percent_to_ratio(rho),
            l0=m_to_mm(l0),
            phi_eff=phi_eff,
            **params,
        )

    # ------------------------------------------------------------------
    # Code formulas
    # ------------------------------------------------------------------

    @property
    def fcd(self) -> float:
        return self.fck / self.gamma_c

    @property
    def epsilon_yd(self) -> float:
        return self.fyd / self.Es

    def governing_first_order_moment(self) -> float:
        """Equivalent first-order moment M0Ed, N.mm (see :func:`det_m0e`)."""
        return self.M0Ed

    def second_order_moment(self, area: float, h: float, i: float) -> float:
        """Second-order moment M2 by the nominal curvature method.

        Parameters
        ----------
        area : float
            Gross concrete area of the trial section, mm2.
        h : float
            Height of the trial section, mm.
        i : float
            Radius of gyration of the trial section, mm.

        Returns
        -------
        float
            M2 in N.mm.
        """
        fcd = self.fcd

        # Kr
        n = self.NEd / (area * fcd)
        omega = (area * self.rho) * self.fyd / (area * fcd)
        n_u = 1.0 + omega
        kr = min(1.0, (n_u - n) / (n_u - self.n_bal))

        # Kphi
        lambda_ = self.l0 / i
        beta = 0.35 + self.fck / 200.0 - lambda_ / 150.0
        k_phi = max(1.0, 1.0 + beta * self.phi_eff)

        d = h - self.a * h
        one_over_r0 = self.epsilon_yd / (self.curvature_lever * d)
        one_over_r = kr * k_phi * one_over_r0
        e2 = one_over_r * self.l0**2 / math.pi**2
        return -self.NEd * e2

    def design_moment(self, area: float, h: float, i: float) -> float:
        """Governing design moment ``max(M0Ed + M2, M02, M01 + 0.5 M2)``."""
        M2 = self.second_order_moment(area, h, i)
        return max(self.governing_first_order_moment() + M2, self.m2, self.m1 + 0.5 * M2)

    def axial_force_resistance(self, area: float) -> float:
        """Axial resistance ``Ac fcd + As sigma_s(1.75 permille)``, N."""
        return area * self.fcd + area * self.rho * self.steel.stress_at(
            self.axial_steel_strain
        )

    def reinforcement_per_layer(self, area: float) -> float:
        """Area of each of the two symmetric reinforcement layers, mm2."""
        return self.rho * area / 2.0

    def reinforcement_layers(self, h: float) -> list[float]:
        """Depths of the two reinforcement layers from the top fibre, mm."""
        return [self.a * h, (1.0 - self.a) * h]

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def assign(
        self,
        *,
        validity: bool,
        width: float,
        height: float,
        As: float,
        MRd: float,
        NRd: float,
        M0Ed_M2: float,
        phase: str,
        iterations: int,
    ) -> None:
        self.validity = validity
        self.width = width
        self.height = height
        self.As = As
        self.MRd = MRd
        self.NRd = NRd
        self.M0Ed_M2 = M0Ed_M2
        self.phase = phase
        self.iterations = iterations

    @property
    def is_assigned(self) -> bool:
        return self.width is not None
