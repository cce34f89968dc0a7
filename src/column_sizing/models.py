"""
Input data models for column sizing using Pydantic for validation.

Values are in engineering units (kN, kN.m, MPa, %, m) as an engineer
writes them in a project file; :meth:`ColumnInput.to_problem` converts them
to the N / mm units of :class:`~column_sizing.column.ColumnDesignProblem`.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .column import ColumnDesignProblem
from .materials import get_steel_properties
from .utils import load_code_tables


class EndCondition(str, Enum):
    """Column end restraint used to derive the effective length."""
    FIXED_FREE = "fixed-free"
    FIXED_GUIDED = "fixed-guided"
    FIXED_FIXED = "fixed-fixed"


class ProjectInfo(BaseModel):
    """Project identification carried into reports."""
    name: str = "column"
    column_id: str = "C1"
    designer: str = ""
    checker: str = ""
    date: str = ""


class LoadsInput(BaseModel):
    """Design forces at ULS."""
    M1: float = Field(0.0, description="End moment at one end in kN.m")
    M2: float = Field(0.0, description="End moment at the other end in kN.m")
    NEd: float = Field(
        ...,
        lt=0,
        description="Design axial force in kN, negative in compression"
    )


class MaterialsInput(BaseModel):
    """Concrete grade and reinforcement ratio."""
    fck: float = Field(
        ...,
        ge=12,
        le=90,
        description="Characteristic cylinder strength in MPa"
    )
    rho: float = Field(
        ...,
        gt=0,
        le=8,
        description="Total reinforcement ratio in percent of the gross area"
    )
    steel_grade: str = "B500"

    @field_validator("steel_grade")
    @classmethod
    def _known_steel_grade(cls, v: str) -> str:
        grades = load_code_tables()["steel_grades"]
        if v not in grades:
            raise ValueError(f"unknown steel grade {v!r}, available: {sorted(grades)}")
        return v


class ColumnGeometryInput(BaseModel):
    """Buckling length and creep data.

    Either ``l0`` is given directly, or ``length`` together with
    ``end_condition``.
    """
    model_config = ConfigDict(use_enum_values=True)

    l0: Optional[float] = Field(None, gt=0, description="Effective length in m")
    length: Optional[float] = Field(None, gt=0, description="System length in m")
    end_condition: EndCondition = EndCondition.FIXED_FREE
    phi_eff: float = Field(
        1.0,
        ge=0,
        le=5,
        description="Effective creep ratio"
    )

    @model_validator(mode="after")
    def _length_given(self) -> "ColumnGeometryInput":
        if self.l0 is None and self.length is None:
            raise ValueError("either 'l0' or 'length' must be given")
        return self

    @property
    def effective_length(self) -> float:
        """Effective length in m."""
        if self.l0 is not None:
            return self.l0
        factors = load_code_tables()["effective_length_factors"]
        return factors[EndCondition(self.end_condition).value] * self.length


class ColumnInput(BaseModel):
    """Complete column sizing input."""
    project: ProjectInfo = Field(default_factory=ProjectInfo)
    loads: LoadsInput
    materials: MaterialsInput
    column: ColumnGeometryInput

    def to_problem(self) -> ColumnDesignProblem:
        """Build the N / mm design problem."""
        steel = get_steel_properties(self.materials.steel_grade)
        return ColumnDesignProblem.from_engineering_units(
            M1=self.loads.M1,
            M2=self.loads.M2,
            NEd=self.loads.NEd,
            fck=self.materials.fck,
            rho=self.materials.rho,
            l0=self.column.effective_length,
            phi_eff=self.column.phi_eff,
            fyd=steel.fyd,
            Es=steel.Es,
            steel=steel.diagram(),
            label=self.project.column_id,
        )
