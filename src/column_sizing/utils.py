"""Shared utilities for column sizing.

Provides:
- NEN-EN table loading from YAML configuration
- Unit conversion helpers between engineering units and N / mm
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


# ---------------------------------------------------------------------------
# NEN-EN table loading
# ---------------------------------------------------------------------------

_code_tables_cache: dict[str, Any] | None = None

_TABLES_FILENAME = "nen_en_tables.yaml"


def load_code_tables() -> dict[str, Any]:
    """Load the NEN-EN tables from the YAML config file.

    Searches for ``nen_en_tables.yaml`` in the package ``config`` directory
    first and in a project-level ``config`` directory second.  The result is
    cached so that repeated calls do not re-read from disk.

    Returns
    -------
    dict
        Parsed YAML content keyed by table name (e.g. ``concrete``,
        ``steel_grades``, ``solver``, etc.).

    Raises
    ------
    FileNotFoundError
        If the YAML file cannot be located in any of the expected paths.
    """
    global _code_tables_cache
    if _code_tables_cache is not None:
        return _code_tables_cache

    config_paths = [
        # src/column_sizing/config  (shipped with the package)
        Path(__file__).resolve().parent / "config" / _TABLES_FILENAME,
        # <project>/config  (local override in a source checkout)
        Path(__file__).resolve().parent.parent.parent / "config" / _TABLES_FILENAME,
    ]
    for path in config_paths:
        if path.exists():
            with open(path, encoding="utf-8") as fh:
                _code_tables_cache = yaml.safe_load(fh)
            return _code_tables_cache

    searched = "\n  ".join(str(p) for p in config_paths)
    raise FileNotFoundError(
        f"{_TABLES_FILENAME} not found.  Searched:\n  {searched}"
    )


def _clear_code_tables_cache() -> None:
    """Reset the internal cache (useful in tests)."""
    global _code_tables_cache
    _code_tables_cache = None


# ---------------------------------------------------------------------------
# Unit conversions
# ---------------------------------------------------------------------------

def kn_to_n(kn: float) -> float:
    """Convert kilonewtons to newtons."""
    return kn * 1_000.0


def n_to_kn(n: float) -> float:
    """Convert newtons to kilonewtons."""
    return n / 1_000.0


def knm_to_nmm(knm: float) -> float:
    """Convert kN.m to N.mm."""
    return knm * 1e6


def nmm_to_knm(nmm: float) -> float:
    """Convert N.mm to kN.m."""
    return nmm / 1e6


def m_to_mm(m: float) -> float:
    """Convert metres to millimetres."""
    return m * 1_000.0


def mm_to_m(mm: float) -> float:
    """Convert millimetres to metres."""
    return mm / 1_000.0


def percent_to_ratio(pct: float) -> float:
    """Convert a percentage to a plain ratio."""
    return pct / 100.0
