"""Minimum rectangular concrete column dimensions per NEN-EN 1992-1-1."""

from loguru import logger

from .column import ColumnDesignProblem, det_m0e
from .solver import DimensionConvergenceSolver, SolverSettings, solve

__version__ = "0.1.0"

__all__ = [
    "ColumnDesignProblem",
    "DimensionConvergenceSolver",
    "SolverSettings",
    "det_m0e",
    "solve",
]

logger.disable("column_sizing")
