"""Tests for result export, PDF report and diagrams."""

import math

import pytest

from column_sizing import DimensionConvergenceSolver
from column_sizing.diagrams import bar_arrangement, plot_convergence, plot_cross_section
from column_sizing.input_parser import parse_data
from column_sizing.report import generate_report, results_to_dict
from column_sizing.solver import IterationRecord
from conftest import FakeCapacity


@pytest.fixture
def solved(input_data):
    config = parse_data(input_data)
    problem = config.to_problem()
    solver = DimensionConvergenceSolver(evaluator=lambda *a, **kw: FakeCapacity(1e15))
    solver.solve(problem)
    return config, problem, solver.history


class TestResultsToDict:

    def test_engineering_units(self, solved):
        _, problem, history = solved
        data = results_to_dict(problem, history)
        assert data["column_id"] == "K12"
        assert data["input"]["NEd_kN"] == pytest.approx(-9000.0)
        assert data["result"]["NRd_kN"] == pytest.approx(problem.NRd / 1000.0)
        assert data["result"]["phase"] == "axial"
        assert len(data["history"]) == len(history)

    def test_unsolved_problem(self, example_problem):
        data = results_to_dict(example_problem)
        assert data["result"]["validity"] is False
        assert data["result"]["MRd_kNm"] is None
        assert data["history"] == []


class TestPdf:

    def test_report_written(self, solved, tmp_path):
        config, problem, history = solved
        path = tmp_path / "report.pdf"
        generate_report(str(path), config, problem, history)
        assert path.read_bytes().startswith(b"%PDF")

    def test_report_for_diverged_problem(self, input_data, tmp_path):
        config = parse_data(input_data)
        problem = config.to_problem()
        path = tmp_path / "diverged.pdf"
        generate_report(str(path), config, problem)
        assert path.exists()


class TestDiagrams:

    def test_bar_arrangement_covers_area(self):
        n, dia = bar_arrangement(2000.0, 500.0, 100.0)
        assert n >= 2
        assert n * math.pi * dia**2 / 4 >= 2000.0

    def test_cross_section_png(self, solved):
        _, problem, _ = solved
        png = plot_cross_section(problem, return_figure=False)
        assert png.startswith(b"\x89PNG")

    def test_cross_section_needs_result(self, example_problem):
        with pytest.raises(ValueError):
            plot_cross_section(example_problem)

    def test_convergence_png(self, solved):
        _, _, history = solved
        assert plot_convergence(history, return_figure=False).startswith(b"\x89PNG")

    @pytest.mark.parametrize("width", [math.inf, 150.0, -500.0])
    def test_bar_arrangement_rejects_unusable_layer(self, width):
        with pytest.raises(ValueError):
            bar_arrangement(2000.0, width, 100.0)

    def test_convergence_png_with_zero_target(self):
        history = [
            IterationRecord("axial", 0, 1000.0, 1000.0, 1.3e7, 0.9, 3),
            IterationRecord("joint", 0, 900.0, 900.0, 1.1e7, 1.1, 5, moment=1e8, target=0.0),
            IterationRecord("joint", 1, 950.0, 950.0, 1.2e7, 1.0, 5, moment=1e8, target=1e8),
        ]
        assert plot_convergence(history, return_figure=False).startswith(b"\x89PNG")
