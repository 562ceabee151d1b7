"""Frozen, solver-facing view of a model."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

import numpy as np

from .algebra.expression import ConstraintSense, LinearExpression, ObjectiveSense
from .algebra.variables import VariableKind
from .models.solution import Solution, SolutionStatus


@dataclass(frozen=True, slots=True)
class VariableColumn:
    """Copy of a registry variable taken when the snapshot was made."""

    id: int
    label: str
    kind: VariableKind
    lower_bound: float
    upper_bound: float

    @property
    def is_integer(self) -> bool:
        return self.kind.is_integer


@dataclass(frozen=True, slots=True)
class ConstraintRow:
    """``sum(coefficients[id] * x[id]) <sense> rhs``."""

    name: str
    coefficients: Mapping[int, float]
    sense: ConstraintSense
    rhs: float

    def dense(self, size: int) -> np.ndarray:
        vector = np.zeros(size, dtype=float)
        for variable_id, coefficient in self.coefficients.items():
            vector[variable_id] = coefficient
        return vector

    def activity(self, values: Mapping[int, float]) -> float:
        return sum(c * values[variable_id] for variable_id, c in self.coefficients.items())


@dataclass(frozen=True, slots=True)
class ObjectiveRow:
    coefficients: Mapping[int, float]
    constant: float
    sense: ObjectiveSense

    def evaluate(self, values: Mapping[int, float]) -> float:
        return self.constant + sum(
            c * values[variable_id] for variable_id, c in self.coefficients.items()
        )


@dataclass(frozen=True)
class ModelSnapshot:
    """Immutable export of a model for solver adapters.

    Columns follow registry identity order and rows follow constraint
    insertion order. Later changes to the originating model are not
    visible through a snapshot.
    """

    name: str
    variables: tuple[VariableColumn, ...]
    constraints: tuple[ConstraintRow, ...]
    objective: ObjectiveRow

    @classmethod
    def build(
        cls,
        name: str,
        variables: Iterable,
        constraints: Iterable,
        objective_expression: LinearExpression,
        objective_sense: ObjectiveSense,
    ) -> "ModelSnapshot":
        columns = tuple(
            VariableColumn(v.id, v.label, v.kind, v.lower_bound, v.upper_bound)
            for v in variables
        )
        rows = []
        for position, constraint in enumerate(constraints):
            expression, rhs = constraint.normalized()
            rows.append(
                ConstraintRow(
                    f"c{position}",
                    MappingProxyType(expression.terms),
                    constraint.sense,
                    rhs,
                )
            )
        objective = ObjectiveRow(
            MappingProxyType(objective_expression.terms),
            objective_expression.constant,
            objective_sense,
        )
        return cls(name, columns, tuple(rows), objective)

    @property
    def num_variables(self) -> int:
        return len(self.variables)

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def has_integers(self) -> bool:
        return any(column.is_integer for column in self.variables)

    def constraint_matrix(self) -> np.ndarray:
        """Dense ``(rows, columns)`` coefficient matrix."""
        matrix = np.zeros((self.num_constraints, self.num_variables), dtype=float)
        for row_index, row in enumerate(self.constraints):
            for variable_id, coefficient in row.coefficients.items():
                matrix[row_index, variable_id] = coefficient
        return matrix

    def rhs_vector(self) -> np.ndarray:
        return np.array([row.rhs for row in self.constraints], dtype=float)

    def senses(self) -> list[ConstraintSense]:
        return [row.sense for row in self.constraints]

    def objective_vector(self) -> np.ndarray:
        vector = np.zeros(self.num_variables, dtype=float)
        for variable_id, coefficient in self.objective.coefficients.items():
            vector[variable_id] = coefficient
        return vector

    def lower_bounds(self) -> np.ndarray:
        return np.array([column.lower_bound for column in self.variables], dtype=float)

    def upper_bounds(self) -> np.ndarray:
        return np.array([column.upper_bound for column in self.variables], dtype=float)

    def integrality(self) -> np.ndarray:
        return np.array([column.is_integer for column in self.variables], dtype=bool)

    def solution_from_vector(
        self,
        status: SolutionStatus | str,
        vector: Sequence[float] | np.ndarray | None,
        objective_value: float | None = None,
        **details,
    ) -> Solution:
        """Wrap a raw result vector aligned with the column order.

        Args:
            status: Standardized solve status
            vector: One value per column, or ``None`` when the solver
                produced no point
            objective_value: Reported objective; computed from ``vector``
                when omitted
            **details: Extra ``Solution`` fields (solver, solve_time, ...)

        Raises:
            ValueError: If the vector length differs from the column count
        """
        values: dict[int, float] = {}
        if vector is not None:
            vector = np.asarray(vector, dtype=float).ravel()
            if vector.shape[0] != self.num_variables:
                raise ValueError(
                    f"Solution vector has {vector.shape[0]} entries, "
                    f"model has {self.num_variables} variables"
                )
            values = {column.id: float(value) for column, value in zip(self.variables, vector)}
            if objective_value is None:
                objective_value = self.objective.evaluate(values)
        return Solution(
            status=SolutionStatus(status),
            objective_value=objective_value,
            values=values,
            **details,
        )
