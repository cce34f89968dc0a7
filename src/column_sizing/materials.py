"""Material properties and stress-strain laws per NEN-EN 1992-1-1.

Provides dataclasses and factory functions for concrete and reinforcing steel
properties, reading base values from ``nen_en_tables.yaml``, and the
piecewise-linear stress-strain diagrams consumed by the moment capacity
evaluator.

Key references
--------------
* NEN-EN 1992-1-1, Cl. 3.1.6 -- Design compressive strength
* NEN-EN 1992-1-1, Cl. 3.1.7 / Fig. 3.4 -- Bi-linear stress-strain relation
* NEN-EN 1992-1-1, Cl. 3.2.7 / Fig. 3.8 -- Idealised reinforcing steel

Strains are given in **permille** (1.75 means 0.00175) and stresses in
**MPa**.  Compressive concrete strain is positive.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .utils import load_code_tables


# ---------------------------------------------------------------------------
# Stress-strain diagrams
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StressStrainDiagram:
    """Piecewise-linear stress-strain law.

    Attributes
    ----------
    strains : tuple[float, ...]
        Strictly increasing strain breakpoints in permille, starting at 0.
    stresses : tuple[float, ...]
        Stress at each breakpoint, MPa.
    symmetric : bool
        If True the diagram is mirrored for negative strains
        (``stress(-e) == -stress(e)``), as for reinforcing steel.  Otherwise
        negative strains carry no stress.
    name : str
        Label used in reports.
    """

    strains: tuple[float, ...]
    stresses: tuple[float, ...]
    symmetric: bool = False
    name: str = ""

    def __post_init__(self) -> None:
        if len(self.strains) != len(self.stresses):
            raise ValueError("strains and stresses must have the same length")
        if len(self.strains) < 2:
            raise ValueError("a diagram needs at least two points")
        if any(b <= a for a, b in zip(self.strains, self.strains[1:])):
            raise ValueError("strain breakpoints must be strictly increasing")

    def stresses_at(self, strain_permille: np.ndarray) -> np.ndarray:
        """Vectorised stress look-up.  Beyond the last point the final
        stress is held."""
        eps = np.asarray(strain_permille, dtype=float)
        magnitude = np.interp(np.abs(eps), self.strains, self.stresses)
        if self.symmetric:
            return np.sign(eps) * magnitude
        return np.where(eps > 0.0, magnitude, 0.0)

    def stress_at(self, strain_permille: float) -> float:
        """Stress in MPa at a single strain in permille."""
        return float(self.stresses_at(np.array([strain_permille]))[0])

    @property
    def ultimate_strain(self) -> float:
        return self.strains[-1]


def concrete_bilinear_uls(
    fcd: float,
    epsilon_c3: float = 1.75,
    epsilon_cu3: float = 3.5,
) -> StressStrainDiagram:
    """Bi-linear design diagram for concrete in compression.

    Linear from zero to ``fcd`` at ``epsilon_c3``, constant up to
    ``epsilon_cu3``.
    """
    return StressStrainDiagram(
        strains=(0.0, epsilon_c3, epsilon_cu3),
        stresses=(0.0, fcd, fcd),
        name=f"Concrete bi-linear ULS (fcd={fcd:.2f})",
    )


def no_concrete_tension() -> StressStrainDiagram:
    """Tension branch for cracked concrete: no stress at any strain."""
    return StressStrainDiagram(
        strains=(0.0, 1.0),
        stresses=(0.0, 0.0),
        name="No concrete tension",
    )


def steel_bilinear(
    fyd: float,
    Es: float = 200_000.0,
    epsilon_ud: float = 45.0,
) -> StressStrainDiagram:
    """Elastic-perfectly-plastic design diagram for reinforcing steel.

    ``Es`` is in MPa; the yield strain in permille is ``1000 * fyd / Es``.
    """
    epsilon_yd = 1_000.0 * fyd / Es
    return StressStrainDiagram(
        strains=(0.0, epsilon_yd, epsilon_ud),
        stresses=(0.0, fyd, fyd),
        symmetric=True,
        name=f"Steel bi-linear (fyd={fyd:.0f})",
    )


# ---------------------------------------------------------------------------
# Concrete
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConcreteProperties:
    """Design properties for a concrete grade per NEN-EN 1992-1-1.

    Attributes
    ----------
    fck : float
        Characteristic compressive strength (cylinder), MPa.
    gamma_c : float
        Partial safety factor for concrete at ULS.
    fcd : float
        Design compressive strength, MPa.  ``fcd = fck / gamma_c``
    epsilon_c3 : float
        Strain at the end of the linear branch, permille.
    epsilon_cu3 : float
        Ultimate compressive strain, permille.
    """

    fck: float
    gamma_c: float
    fcd: float
    epsilon_c3: float
    epsilon_cu3: float

    def diagram(self) -> StressStrainDiagram:
        return concrete_bilinear_uls(self.fcd, self.epsilon_c3, self.epsilon_cu3)


def get_concrete_properties(fck: float) -> ConcreteProperties:
    """Build :class:`ConcreteProperties` for a given characteristic strength.

    Raises
    ------
    ValueError
        If ``fck`` is not positive.
    """
    if fck <= 0:
        raise ValueError(f"fck must be positive, got {fck}")
    tables = load_code_tables()
    gamma_c = float(tables["partial_safety_factors"]["gamma_c"])
    conc = tables["concrete"]
    return ConcreteProperties(
        fck=float(fck),
        gamma_c=gamma_c,
        fcd=float(fck) / gamma_c,
        epsilon_c3=float(conc["epsilon_c3"]),
        epsilon_cu3=float(conc["epsilon_cu3"]),
    )


# ---------------------------------------------------------------------------
# Reinforcing steel
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SteelProperties:
    """Design properties for a reinforcing steel grade.

    Attributes
    ----------
    grade : str
        Grade label, e.g. ``"B500"``.
    fyk : float
        Characteristic yield strength, MPa.
    fyd : float
        Design yield strength, MPa.
    Es : float
        Modulus of elasticity, **MPa**.
    epsilon_yd : float
        Design yield strain, permille.
    epsilon_ud : float
        Design ultimate strain, permille.
    """

    grade: str
    fyk: float
    fyd: float
    Es: float
    epsilon_yd: float
    epsilon_ud: float

    def diagram(self) -> StressStrainDiagram:
        return steel_bilinear(self.fyd, self.Es, self.epsilon_ud)


def get_steel_properties(grade: str = "B500") -> SteelProperties:
    """Build :class:`SteelProperties` for a tabulated steel grade.

    Raises
    ------
    KeyError
        If ``grade`` is not found in the tables.
    """
    tables = load_code_tables()
    grades = tables["steel_grades"]
    if grade not in grades:
        raise KeyError(
            f"Steel grade '{grade}' not found.  Available: {sorted(grades)}"
        )
    row = grades[grade]
    fyd = float(row["fyd"])
    Es = float(row["Es"])
    return SteelProperties(
        grade=grade,
        fyk=float(row["fyk"]),
        fyd=fyd,
        Es=Es,
        epsilon_yd=1_000.0 * fyd / Es,
        epsilon_ud=float(row["epsilon_ud"]),
    )


def b500() -> StressStrainDiagram:
    """Design diagram for B500 reinforcing steel."""
    return get_steel_properties("B500").diagram()
