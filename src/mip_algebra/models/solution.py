"""Data models for optimization solutions."""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class SolutionStatus(str, Enum):
    """Standardized solve outcome."""

    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    ERROR = "error"
    UNKNOWN = "unknown"


class ValidationViolation(BaseModel):
    """Represents a constraint or bound violation in solution validation."""

    type: str = Field(description="Type of violation (constraint, bound, integer)")
    description: str = Field(description="Human-readable description of the violation")
    severity: str = Field(description="Severity level (error, warning)")
    details: dict[str, Any] = Field(
        default_factory=dict, description="Additional violation details"
    )


class SolutionValidation(BaseModel):
    """Represents the validation results for an optimization solution."""

    is_valid: bool = Field(description="Whether the solution satisfies all constraints")
    tolerance_used: float = Field(description="Numerical tolerance used for validation")
    constraint_violations: list[ValidationViolation] = Field(
        default_factory=list, description="Linear constraint violations"
    )
    bound_violations: list[ValidationViolation] = Field(
        default_factory=list, description="Variable bound violations"
    )
    integer_violations: list[ValidationViolation] = Field(
        default_factory=list, description="Integer constraint violations"
    )
    summary: dict[str, int] = Field(
        default_factory=dict, description="Validation summary statistics"
    )
    error: str | None = Field(
        None, description="Validation error message if validation failed"
    )


class Solution(BaseModel):
    """Result of one solve call, keyed by variable identity."""

    model_config = ConfigDict(frozen=True)

    status: SolutionStatus = Field(description="Standardized solution status")
    objective_value: float | None = Field(
        None, description="Objective function value of the reported point"
    )
    values: Mapping[int, float] = Field(
        default_factory=dict,
        validate_default=True,
        description="Variable values by variable identity",
    )
    row_duals: list[float] | None = Field(
        None, description="Constraint duals in insertion order, if reported"
    )
    column_duals: list[float] | None = Field(
        None, description="Reduced costs in variable order, if reported"
    )
    solver: str | None = Field(None, description="Name of the solver backend")
    solver_status: str | None = Field(
        None, description="Status as reported verbatim by the solver"
    )
    solve_time: float | None = Field(None, description="Time taken to solve in seconds")
    message: str | None = Field(None, description="Additional solver message")
    validation: SolutionValidation | None = Field(
        None, description="Solution validation results"
    )

    @field_validator("values")
    @classmethod
    def freeze_values(cls, v: Mapping[int, float]) -> Mapping[int, float]:
        """Store values behind a read-only view of a private copy."""
        return MappingProxyType(dict(v))

    @field_serializer("values")
    def serialize_values(self, values: Mapping[int, float]) -> dict[int, float]:
        return dict(values)

    @property
    def is_optimal(self) -> bool:
        """Check if the solution is optimal."""
        return self.status is SolutionStatus.OPTIMAL

    @property
    def is_feasible(self) -> bool:
        """Check if the solution carries a feasible point."""
        return self.status in (SolutionStatus.OPTIMAL, SolutionStatus.FEASIBLE)

    def value(self, variable_id: int) -> float:
        """Value of a variable by identity.

        Raises:
            KeyError: If the solution holds no value for ``variable_id``
        """
        try:
            return self.values[variable_id]
        except KeyError:
            raise KeyError(
                f"No value for variable {variable_id} (status: {self.status.value})"
            ) from None


class SolutionRecord(BaseModel):
    """One indexed value returned when querying a solution."""

    model_config = ConfigDict(frozen=True)

    variable: str
    dimensions: tuple[str, ...] = ()
    indices: tuple[Any, ...] = ()
    value: float

    @property
    def index(self) -> dict[str, Any]:
        """Indices keyed by dimension name."""
        return dict(zip(self.dimensions, self.indices))

    def as_row(self) -> dict[str, Any]:
        """Flat row ``{"variable": ..., <dimension>: ..., "value": ...}``."""
        return {"variable": self.variable, **self.index, "value": self.value}
