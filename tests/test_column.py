"""Tests for the column design problem and its code formulas."""

import math

import pytest

from column_sizing.column import ColumnDesignProblem, code_constants, det_m0e
from column_sizing.geometry import rectangle
from column_sizing.materials import b500, get_concrete_properties, get_steel_properties


class TestDetM0e:

    def test_governing_combination(self):
        """0.6 * 75 + 0.4 * 2 = 45.8 > 0.4 * 75."""
        assert det_m0e(75.0, 2.0) == pytest.approx(45.8)

    def test_argument_order_irrelevant(self):
        assert det_m0e(2.0, 75.0) == det_m0e(75.0, 2.0)

    def test_double_curvature_branch(self):
        """M0e = 20 is not above 0.4 * 100, so 0.4 * M0e is returned."""
        assert det_m0e(100.0, -100.0) == pytest.approx(8.0)

    def test_zero_moments(self):
        assert det_m0e(0.0, 0.0) == 0.0

    def test_problem_governing_moment(self):
        p = ColumnDesignProblem.from_engineering_units(
            M1=75, M2=2, NEd=-9000, fck=20, rho=2, l0=3, phi_eff=1,
        )
        assert p.governing_first_order_moment() == pytest.approx(45.8e6)
        assert p.governing_first_order_moment() == p.M0Ed


class TestPreconditions:

    @pytest.mark.parametrize(
        "override",
        [
            {"NEd": 0.0},
            {"NEd": 1e5},
            {"fck": 0.0},
            {"rho": 0.0},
            {"l0": -1.0},
            {"phi_eff": -0.5},
            {"a": 0.6},
            {"bh": 0.0},
            {"l0": math.nan},
            {"m1": math.inf},
        ],
    )
    def test_invalid_input_raises(self, override):
        kwargs = dict(m1=0.0, m2=0.0, NEd=-9e6, fck=20.0, rho=0.01, l0=3000.0, phi_eff=1.0)
        kwargs.update(override)
        with pytest.raises(ValueError):
            ColumnDesignProblem(**kwargs)

    def test_results_unassigned_on_construction(self, example_problem):
        assert example_problem.validity is False
        assert example_problem.width is None
        assert not example_problem.is_assigned


class TestEngineeringUnits:

    def test_conversion(self):
        p = ColumnDesignProblem.from_engineering_units(
            M1=75, M2=2, NEd=-9000, fck=20, rho=2, l0=3, phi_eff=1,
        )
        assert p.m1 == pytest.approx(75e6)
        assert p.m2 == pytest.approx(2e6)
        assert p.NEd == pytest.approx(-9e6)
        assert p.rho == pytest.approx(0.02)
        assert p.l0 == pytest.approx(3000.0)
        assert p.M0Ed == pytest.approx(45.8e6)

    def test_constants_from_tables(self):
        consts = code_constants()
        assert consts["a"] == 0.2
        assert consts["fyd"] == 435.0
        assert consts["gamma_c"] == 1.5

    def test_kwargs_override_tables(self):
        p = ColumnDesignProblem.from_engineering_units(
            M1=0, M2=0, NEd=-1000, fck=30, rho=1, l0=4, phi_eff=0, a=0.1, label="C7",
        )
        assert p.a == 0.1
        assert p.label == "C7"


class TestCodeFormulas:

    def test_fcd(self, example_problem):
        assert example_problem.fcd == pytest.approx(20.0 / 1.5)

    def test_axial_force_resistance(self, example_problem):
        """Ac fcd + As * 350 MPa (B500 at 1.75 permille)."""
        area = 1e6
        expected = area * 20.0 / 1.5 + 0.01 * area * 350.0
        assert example_problem.axial_force_resistance(area) == pytest.approx(expected)

    def test_second_order_moment(self, example_problem):
        """500 x 500 section, Kr capped at 1, Kphi = 1.3116."""
        h = 500.0
        m2 = example_problem.second_order_moment(h * h, h, h / 3.46)
        assert m2 == pytest.approx(1.3007e8, rel=1e-3)

    def test_second_order_moment_without_creep(self, example_problem):
        h = 500.0
        with_creep = example_problem.second_order_moment(h * h, h, h / 3.46)
        example_problem.phi_eff = 0.0
        without = example_problem.second_order_moment(h * h, h, h / 3.46)
        assert without == pytest.approx(with_creep / 1.3116, rel=1e-3)

    def test_design_moment_takes_maximum(self):
        p = ColumnDesignProblem(
            m1=75e6, m2=2e6, NEd=-9e6, fck=20.0, rho=0.01, l0=3000.0, phi_eff=1.0,
        )
        h = 500.0
        m2 = p.second_order_moment(h * h, h, h / 3.46)
        expected = max(p.M0Ed + m2, p.m2, p.m1 + 0.5 * m2)
        assert p.design_moment(h * h, h, h / 3.46) == pytest.approx(expected)

    def test_reinforcement(self, example_problem):
        assert example_problem.reinforcement_per_layer(250_000.0) == pytest.approx(1250.0)
        assert example_problem.reinforcement_layers(500.0) == pytest.approx([100.0, 400.0])

    def test_assign(self, example_problem):
        example_problem.assign(
            validity=True, width=500.0, height=500.0, As=1250.0, MRd=1e8,
            NRd=9e6, M0Ed_M2=8e7, phase="axial", iterations=4,
        )
        assert example_problem.is_assigned
        assert example_problem.phase == "axial"


class TestMaterialsAndGeometry:

    def test_b500_stress_at_squash_strain(self):
        assert b500().stress_at(1.75) == pytest.approx(350.0)

    def test_b500_yields(self):
        steel = b500()
        assert steel.stress_at(10.0) == pytest.approx(435.0)
        assert steel.stress_at(-10.0) == pytest.approx(-435.0)

    def test_concrete_has_no_tension(self):
        conc = get_concrete_properties(20.0).diagram()
        assert conc.stress_at(-1.0) == 0.0
        assert conc.stress_at(3.0) == pytest.approx(20.0 / 1.5)
        assert conc.ultimate_strain == 3.5

    def test_invalid_material_inputs(self):
        with pytest.raises(ValueError):
            get_concrete_properties(0.0)
        with pytest.raises(KeyError):
            get_steel_properties("S235")

    def test_rectangle(self):
        sec = rectangle(300, 600)
        assert sec.area == pytest.approx(180_000.0)
        assert sec.radius_of_gyration == pytest.approx(600 / math.sqrt(12))
        assert sec.approx_radius_of_gyration() == pytest.approx(600 / 3.46)

    def test_rectangle_rejects_bad_dimensions(self):
        with pytest.raises(ValueError):
            rectangle(0, 100)
        with pytest.raises(ValueError):
            rectangle(math.inf, 100)
