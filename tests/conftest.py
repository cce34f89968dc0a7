"""Shared fixtures for the column sizing tests."""

from pathlib import Path

import pytest
import yaml
from loguru import logger

from column_sizing.column import ColumnDesignProblem


@pytest.fixture(autouse=True)
def _silence_logging():
    """Drop sinks the CLI adds so they do not outlive the test's streams."""
    yield
    logger.remove()
    logger.disable("column_sizing")


class FakeCapacity:
    """Stand-in for an evaluator result: a moment and a validity flag."""

    def __init__(self, moment, valid=True):
        self.moment = moment
        self._valid = valid

    def validity(self):
        return self._valid


@pytest.fixture
def example_problem():
    """NEd = -9000 kN, C20, 1 % steel, l0 = 3 m, no end moments."""
    return ColumnDesignProblem(
        m1=0.0, m2=0.0, NEd=-9e6, fck=20.0, rho=0.01, l0=3000.0, phi_eff=1.0,
    )


@pytest.fixture
def input_data():
    """A valid project mapping as read from YAML."""
    return {
        "project": {"name": "demo", "column_id": "K12", "designer": "AB"},
        "loads": {"M1": 20.0, "M2": 2.0, "NEd": -9000.0},
        "materials": {"fck": 20, "rho": 2.0},
        "column": {"l0": 3.0, "phi_eff": 1.0},
    }


@pytest.fixture
def input_file(tmp_path: Path, input_data) -> Path:
    path = tmp_path / "column.yaml"
    path.write_text(yaml.safe_dump(input_data), encoding="utf-8")
    return path
