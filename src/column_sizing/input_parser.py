"""Parse and validate YAML input for column sizing.

Reads a project YAML file, validates it against the pydantic models in
:mod:`column_sizing.models` and reports every problem found in one
:class:`InputError`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import ColumnInput


class InputError(Exception):
    """Raised when the YAML input is invalid or incomplete."""


def _format_errors(exc: ValidationError) -> list[str]:
    """Flatten pydantic errors into ``section.field: message`` strings."""
    errors: list[str] = []
    for err in exc.errors():
        path_str = ".".join(str(p) for p in err["loc"]) or "<root>"
        errors.append(f"{path_str}: {err['msg']}")
    return errors


def validate_data(data: Any) -> list[str]:
    """Return a list of validation error strings (empty means valid)."""
    if not isinstance(data, dict):
        return ["Input file does not contain a valid YAML mapping."]
    try:
        ColumnInput.model_validate(data)
    except ValidationError as exc:
        return _format_errors(exc)
    return []


def parse_data(data: Any) -> ColumnInput:
    """Validate an already-loaded mapping.

    Raises
    ------
    InputError
        If validation fails (the message lists every problem found).
    """
    errors = validate_data(data)
    if errors:
        bullet_list = "\n  - ".join(errors)
        raise InputError(
            f"Input validation failed with {len(errors)} error(s):\n"
            f"  - {bullet_list}"
        )
    return ColumnInput.model_validate(data)


def parse_input(yaml_path: str | Path) -> ColumnInput:
    """Read and validate a project YAML file.

    Parameters
    ----------
    yaml_path:
        Filesystem path to the YAML input file.

    Returns
    -------
    ColumnInput
        The validated input with defaults applied.

    Raises
    ------
    FileNotFoundError
        If *yaml_path* does not exist.
    InputError
        If the file is not valid YAML or validation fails.
    """
    path = Path(yaml_path)
    if not path.is_file():
        raise FileNotFoundError(f"Input file not found: {yaml_path}")

    with open(path, "r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise InputError(f"YAML syntax error: {exc}") from exc

    return parse_data(raw)


# ---------------------------------------------------------------------------
# Template generator
# ---------------------------------------------------------------------------

_TEMPLATE_YAML = """\
# Column Sizing Input File
# ========================
# Fill in all values below. Comments show units and valid options.

project:
  name: "PROJECT_NAME"
  column_id: "C1"
  designer: "Designer Name"
  checker: "Checker Name"
  date: "2024-01-01"

loads:
  M1: 75.0                      # kN.m - End moment at one end
  M2: 2.0                       # kN.m - End moment at the other end
  NEd: -9000.0                  # kN - Design axial force (negative = compression)

materials:
  fck: 20                       # MPa (12-90)
  rho: 2.0                      # % - Total reinforcement ratio
  steel_grade: "B500"

column:
  l0: 3.0                       # m - Effective length
  # Alternatively give the system length and the end condition:
  # length: 3.0                 # m
  # end_condition: "fixed-free" # Options: fixed-free | fixed-guided | fixed-fixed
  phi_eff: 1.0                  # Effective creep ratio
"""


def generate_template() -> str:
    """Return a complete sample YAML input template as a string."""
    return _TEMPLATE_YAML
