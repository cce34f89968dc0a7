"""Minimum column dimensions by adaptive iteration.

The solver first iterates the square section whose axial resistance matches
the design axial force.  If that section cannot carry the design moment
including second-order effects, it iterates again on moment and axial force
together until the moment capacity converges on the design moment.

Each phase damps its corrections with an :class:`AdaptiveDivisor` and is
capped at a fixed number of iterations.  The axial phase falls through
silently at its cap; the joint phase marks the result invalid at its cap and
when the trial width diverges.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from loguru import logger

from .column import ColumnDesignProblem
from .convergence import AdaptiveDivisor, convergence_conditions, convergence_factor
from .geometry import RectangularSection, rectangle
from .materials import concrete_bilinear_uls, get_concrete_properties, no_concrete_tension
from .mn_kappa import evaluate_moment_capacity
from .utils import load_code_tables

# evaluator(section, concrete, tension, steel, as_layers, layer_depths, n_ed, tolerance=...)
# -> object with ``.moment`` and ``.validity()``
Evaluator = Callable[..., Any]


@dataclass(frozen=True)
class SolverSettings:
    """Iteration constants of the dimensioning solver."""

    seed_width: float = 1000.0
    axial_divisor: int = 3
    joint_divisor: int = 5
    joint_axial_divisor: int = 3
    axial_max_iterations: int = 50
    joint_max_iterations: int = 30
    axial_band: tuple[float, float] = (1.01, 0.975)
    joint_band: tuple[float, float] = (0.99, 0.95)
    absolute_moment_tolerance: float = 0.25e6
    evaluator_tolerance: float = 1e-4
    gyration_factor: float = 3.46

    @classmethod
    def from_tables(cls) -> "SolverSettings":
        """Settings from the ``solver`` table of ``nen_en_tables.yaml``."""
        tables = load_code_tables()
        cfg = tables["solver"]
        return cls(
            seed_width=float(cfg["seed_width"]),
            axial_divisor=int(cfg["axial_divisor"]),
            joint_divisor=int(cfg["joint_divisor"]),
            joint_axial_divisor=int(cfg["joint_axial_divisor"]),
            axial_max_iterations=int(cfg["axial_max_iterations"]),
            joint_max_iterations=int(cfg["joint_max_iterations"]),
            axial_band=tuple(float(v) for v in cfg["axial_band"]),
            joint_band=tuple(float(v) for v in cfg["joint_band"]),
            absolute_moment_tolerance=float(cfg["absolute_moment_tolerance"]),
            evaluator_tolerance=float(cfg["evaluator_tolerance"]),
            gyration_factor=float(tables["second_order"]["gyration_factor"]),
        )


@dataclass
class IterationRecord:
    """One solver iteration, kept for plots and reports."""

    phase: str                  # "axial" or "joint"
    count: int
    width: float                # mm, width evaluated in this iteration
    height: float               # mm
    NRd: float                  # N
    factor: float               # correction applied to the width
    divisor: int
    moment: Optional[float] = None    # N.mm, evaluator moment
    target: Optional[float] = None    # N.mm, M0Ed + M2 governing moment


@dataclass
class DimensionConvergenceSolver:
    """Two-phase search for the minimum square column section.

    Parameters
    ----------
    evaluator : callable, optional
        Moment capacity evaluator; defaults to
        :func:`~column_sizing.mn_kappa.evaluate_moment_capacity`.
    settings : SolverSettings, optional
        Iteration constants; defaults to the values in the code tables.
    """

    evaluator: Optional[Evaluator] = None
    settings: Optional[SolverSettings] = None
    history: list[IterationRecord] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        if self.evaluator is None:
            self.evaluator = evaluate_moment_capacity
        if self.settings is None:
            self.settings = SolverSettings.from_tables()

    def solve(self, problem: ColumnDesignProblem) -> ColumnDesignProblem:
        """Determine the minimum section for ``problem``.

        Writes the result fields of ``problem`` and returns it.  Divergence
        and non-convergence are reported through ``problem.validity``, never
        by raising.
        """
        self.history = []
        s = self.settings
        props = get_concrete_properties(problem.fck)
        concrete = concrete_bilinear_uls(problem.fcd, props.epsilon_c3, props.epsilon_cu3)
        tension = no_concrete_tension()
        target_n = -problem.NEd

        def capacity(section: RectangularSection, as_: float) -> Any:
            return self.evaluator(
                section,
                concrete,
                tension,
                problem.steel,
                [as_, as_],
                problem.reinforcement_layers(section.height),
                problem.NEd,
                tolerance=s.evaluator_tolerance,
            )

        logger.debug(
            "Solving column {!r}: NEd={:.0f} N, M0Ed={:.0f} N.mm, fck={}, rho={}",
            problem.label, problem.NEd, problem.M0Ed, problem.fck, problem.rho,
        )

        # ------------------------------------------------------------------
        # Phase 1: minimum dimension for the axial force
        # ------------------------------------------------------------------
        b = s.seed_width
        divisor = AdaptiveDivisor(s.axial_divisor)
        c = 0
        m = None
        while True:
            h = b / problem.bh
            area = b * h
            nrd = problem.axial_force_resistance(area)
            if convergence_conditions(nrd, target_n, *s.axial_band):
                as_ = problem.reinforcement_per_layer(area)
                m = capacity(rectangle(b, h), as_)
                self.history.append(IterationRecord(
                    "axial", c, b, h, nrd, 1.0, divisor.divisor, moment=m.moment,
                ))
                logger.debug("Axial force convergence: count {}, width {:.1f} mm", c, b)
                break

            factor = convergence_factor(nrd, target_n, divisor.divisor)
            self.history.append(IterationRecord("axial", c, b, h, nrd, factor, divisor.divisor))
            b *= factor
            c += 1

            if c > s.axial_max_iterations:
                logger.debug("Axial force iteration cap reached at width {:.1f} mm", b)
                break

            divisor.update(factor)

        if m is None:
            # Cap reached: carry on with the last trial width.
            if not _usable_width(b):
                logger.warning("Axial force iteration diverged (width {})", b)
                return problem
            h = b / problem.bh
            area = b * h
            nrd = problem.axial_force_resistance(area)
            as_ = problem.reinforcement_per_layer(area)
            m = capacity(rectangle(b, h), as_)

        axial_iterations = c

        # Validate if the minimum section for the axial force bears the total moment.
        i = rectangle(b, h).approx_radius_of_gyration(s.gyration_factor)
        M0Ed_M2 = problem.design_moment(area, h, i)
        if m.moment > M0Ed_M2:
            logger.info("Minimal axial force is sufficient")
            problem.assign(
                validity=True, width=b, height=h, As=as_, MRd=m.moment, NRd=nrd,
                M0Ed_M2=M0Ed_M2, phase="axial", iterations=axial_iterations,
            )
            return problem

        logger.info("Axial force dimensions not sufficient")

        # ------------------------------------------------------------------
        # Phase 2: iterate on moment and axial force together
        # ------------------------------------------------------------------
        c = 0
        divisor = AdaptiveDivisor(s.joint_divisor)
        high, low = s.joint_band
        while True:
            h = b / problem.bh
            area = b * h
            section = rectangle(b, h)
            i = section.approx_radius_of_gyration(s.gyration_factor)
            as_ = problem.reinforcement_per_layer(area)

            # moment validation
            m = capacity(section, as_)
            M0Ed_M2 = problem.design_moment(area, h, i)
            moment = abs(m.moment)
            factor_moment = convergence_factor(moment, M0Ed_M2, divisor.divisor)

            # axial force validation
            nrd = problem.axial_force_resistance(area)
            factor_axial = convergence_factor(nrd, target_n, s.joint_axial_divisor)
            if factor_axial > 1 and factor_axial > factor_moment:
                # area too small for the axial force
                factor = factor_axial
            else:
                factor = factor_moment

            trial = dict(width=b, height=h, As=as_, MRd=m.moment, NRd=nrd, M0Ed_M2=M0Ed_M2)
            self.history.append(IterationRecord(
                "joint", c, b, h, nrd, factor, divisor.divisor, moment=m.moment, target=M0Ed_M2,
            ))
            logger.debug(
                "factor_axial {:.4f}, factor_moment {:.4f}, div {}, count {}, width {:.1f}",
                factor_axial, factor_moment, divisor.divisor, c, b,
            )

            b *= factor
            if not _usable_width(b):
                problem.validity = False
                logger.warning("Width diverged after {} joint iterations", c)
                return problem

            c += 1
            if c > s.joint_max_iterations:
                logger.warning("Maximum joint iterations reached, result marked invalid")
                problem.assign(validity=False, phase="joint", iterations=axial_iterations + c, **trial)
                return problem

            if (
                convergence_conditions(moment, M0Ed_M2, high, low) and m.validity()
                or convergence_conditions(nrd, target_n, high, low) and moment > M0Ed_M2
            ):
                logger.info("Moment convergence, count {}", c)
                problem.assign(validity=True, phase="joint", iterations=axial_iterations + c, **trial)
                return problem

            dm = moment - M0Ed_M2
            if 0 < dm < s.absolute_moment_tolerance:
                logger.info("Absolute value convergence, count {}", c)
                problem.assign(validity=True, phase="joint", iterations=axial_iterations + c, **trial)
                return problem

            divisor.update(factor_moment)


def _usable_width(b: float) -> bool:
    return math.isfinite(b) and b > 0


def solve(
    problem: ColumnDesignProblem,
    evaluator: Optional[Evaluator] = None,
    settings: Optional[SolverSettings] = None,
) -> ColumnDesignProblem:
    """Solve ``problem`` with a fresh :class:`DimensionConvergenceSolver`."""
    return DimensionConvergenceSolver(evaluator=evaluator, settings=settings).solve(problem)
