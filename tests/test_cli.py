"""Tests for the command-line interface."""

import json

import pytest
import yaml
from click.testing import CliRunner

from column_sizing import DimensionConvergenceSolver, cli
from column_sizing.cli import main
from column_sizing.input_parser import parse_input
from conftest import FakeCapacity


@pytest.fixture
def runner():
    return CliRunner()


class TestCommands:

    def test_template(self, runner):
        result = runner.invoke(main, ["template"])
        assert result.exit_code == 0
        assert "NEd" in yaml.safe_load(result.stdout)["loads"]

    def test_validate_ok(self, runner, input_file):
        result = runner.invoke(main, ["validate", str(input_file)])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_validate_reports_errors(self, runner, tmp_path, input_data):
        input_data["loads"]["NEd"] = 100.0
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(input_data), encoding="utf-8")
        result = runner.invoke(main, ["validate", str(path)])
        assert result.exit_code == 1
        assert "loads.NEd" in result.output

    def test_solve_json(self, runner):
        result = runner.invoke(main, [
            "solve", "--m1", "20", "--m2", "2", "--ned", "-9000",
            "--fck", "20", "--rho", "2", "--l0", "3", "--json",
        ])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["validity"] is True
        assert payload["width_mm"] == payload["height_mm"]

    def test_solve_rejects_tension(self, runner):
        result = runner.invoke(main, [
            "solve", "--ned", "100", "--fck", "20", "--rho", "2", "--l0", "3",
        ])
        assert result.exit_code == 1

    def test_run_writes_results(self, runner, input_file, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(main, ["run", str(input_file), "-o", str(out), "--no-pdf"])
        assert result.exit_code == 0, result.output
        data = json.loads((out / "results.json").read_text(encoding="utf-8"))
        assert data["column_id"] == "K12"
        assert data["result"]["validity"] is True
        assert data["history"]
        assert not list(out.glob("*.pdf"))

    def test_run_pdf_and_plots(self, runner, input_file, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(main, ["run", str(input_file), "-o", str(out), "--plots"])
        assert result.exit_code == 0, result.output
        assert (out / "demo_K12.pdf").stat().st_size > 0
        assert (out / "cross_section.png").exists()
        assert (out / "convergence.png").exists()

    def test_run_plots_for_capped_result(self, runner, input_file, tmp_path, monkeypatch):
        reference = parse_input(input_file).to_problem()

        def just_short(section, *args, **kwargs):
            h = section.height
            target = reference.design_moment(section.area, h, h / 3.46)
            return FakeCapacity(0.97 * target, valid=False)

        monkeypatch.setattr(
            cli, "DimensionConvergenceSolver",
            lambda: DimensionConvergenceSolver(evaluator=just_short),
        )
        out = tmp_path / "out"
        result = runner.invoke(main, ["run", str(input_file), "-o", str(out), "--no-pdf", "--plots"])
        assert result.exit_code == 2, result.output
        data = json.loads((out / "results.json").read_text(encoding="utf-8"))
        assert data["result"]["validity"] is False
        assert data["result"]["phase"] == "joint"
        assert (out / "convergence.png").exists()
        assert not (out / "cross_section.png").exists()

    def test_run_plots_for_diverged_load(self, runner, tmp_path, input_data):
        input_data["loads"].update(M1=75.0, M2=2.0, NEd=-6000.0)
        path = tmp_path / "k6000.yaml"
        path.write_text(yaml.safe_dump(input_data), encoding="utf-8")
        out = tmp_path / "out"
        result = runner.invoke(main, ["run", str(path), "-o", str(out), "--no-pdf", "--plots"])
        assert result.exit_code == 2, result.output
        data = json.loads((out / "results.json").read_text(encoding="utf-8"))
        assert data["result"]["validity"] is False
        assert data["result"]["width_mm"] is None or data["result"]["width_mm"] < 1e4
        assert (out / "convergence.png").exists()
        assert not (out / "cross_section.png").exists()
