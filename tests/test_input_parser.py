"""Tests for YAML input parsing and validation."""

import pytest
import yaml

from column_sizing.input_parser import (
    InputError,
    generate_template,
    parse_data,
    parse_input,
    validate_data,
)
from column_sizing.models import ColumnInput


class TestParse:

    def test_valid_file(self, input_file):
        cfg = parse_input(input_file)
        assert isinstance(cfg, ColumnInput)
        assert cfg.project.column_id == "K12"
        assert cfg.loads.NEd == -9000.0
        assert cfg.materials.steel_grade == "B500"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_input(tmp_path / "missing.yaml")

    def test_yaml_syntax_error(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("loads: [unclosed\n", encoding="utf-8")
        with pytest.raises(InputError, match="YAML syntax error"):
            parse_input(path)

    def test_template_is_valid(self):
        data = yaml.safe_load(generate_template())
        assert validate_data(data) == []


class TestValidation:

    def test_not_a_mapping(self):
        assert validate_data(["a", "b"])

    def test_all_errors_reported(self, input_data):
        input_data["loads"]["NEd"] = 500.0
        input_data["materials"]["fck"] = 5
        errors = validate_data(input_data)
        assert len(errors) == 2
        assert any(e.startswith("loads.NEd") for e in errors)
        assert any(e.startswith("materials.fck") for e in errors)

    def test_unknown_steel_grade(self, input_data):
        input_data["materials"]["steel_grade"] = "S235"
        with pytest.raises(InputError, match="steel_grade"):
            parse_data(input_data)

    def test_length_required(self, input_data):
        del input_data["column"]["l0"]
        with pytest.raises(InputError):
            parse_data(input_data)


class TestToProblem:

    def test_units_converted(self, input_data):
        p = parse_data(input_data).to_problem()
        assert p.NEd == pytest.approx(-9e6)
        assert p.m1 == pytest.approx(20e6)
        assert p.rho == pytest.approx(0.02)
        assert p.l0 == pytest.approx(3000.0)
        assert p.label == "K12"

    @pytest.mark.parametrize(
        "end_condition, factor",
        [("fixed-free", 2.0), ("fixed-guided", 1.0), ("fixed-fixed", 0.7)],
    )
    def test_effective_length_from_end_condition(self, input_data, end_condition, factor):
        input_data["column"] = {"length": 4.0, "end_condition": end_condition}
        p = parse_data(input_data).to_problem()
        assert p.l0 == pytest.approx(4000.0 * factor)

    def test_explicit_l0_wins(self, input_data):
        input_data["column"] = {"l0": 2.5, "length": 4.0, "end_condition": "fixed-free"}
        assert parse_data(input_data).to_problem().l0 == pytest.approx(2500.0)
