"""Solution validation against a model snapshot."""

from collections.abc import Mapping
from typing import List, Optional

from ..algebra.expression import ConstraintSense
from ..models.solution import Solution, SolutionValidation, ValidationViolation
from ..snapshot import ConstraintRow, ModelSnapshot, VariableColumn
from ..utils.logger import get_logger

logger = get_logger(__name__)


class SolutionValidator:
    """Validates solver results against the constraints they were solved for."""

    def __init__(self, tolerance: float = 1e-6):
        """Initialize the validator.

        Args:
            tolerance: Numerical tolerance for constraint checking
        """
        self.tolerance = tolerance

    def validate_solution(
        self, snapshot: ModelSnapshot, solution: Solution
    ) -> SolutionValidation:
        """Validate solution against rows, bounds and integrality.

        Args:
            snapshot: The snapshot the solution was produced for
            solution: Solution carrying one value per variable

        Returns:
            Validation result
        """
        values = solution.values
        missing = [column.label for column in snapshot.variables if column.id not in values]
        if missing:
            logger.warning(f"Solution validation skipped: {len(missing)} values missing")
            return SolutionValidation(
                is_valid=False,
                tolerance_used=self.tolerance,
                error=f"Solution has no value for: {', '.join(missing[:10])}",
            )

        constraint_violations = [
            violation
            for row in snapshot.constraints
            if (violation := self._check_constraint(snapshot, row, values)) is not None
        ]

        bound_violations: List[ValidationViolation] = []
        integer_violations: List[ValidationViolation] = []
        for column in snapshot.variables:
            value = values[column.id]
            bound_violations.extend(self._check_bounds(column, value))
            violation = self._check_integrality(column, value)
            if violation is not None:
                integer_violations.append(violation)

        total_violations = (
            len(constraint_violations) + len(bound_violations) + len(integer_violations)
        )
        logger.info(f"Solution validation completed: {total_violations} violations found")

        return SolutionValidation(
            is_valid=total_violations == 0,
            tolerance_used=self.tolerance,
            constraint_violations=constraint_violations,
            bound_violations=bound_violations,
            integer_violations=integer_violations,
            summary={
                "total_constraints_checked": snapshot.num_constraints,
                "total_variables_checked": snapshot.num_variables,
                "violations_found": total_violations,
            },
        )

    def _check_constraint(
        self, snapshot: ModelSnapshot, row: ConstraintRow, values: Mapping[int, float]
    ) -> Optional[ValidationViolation]:
        """Check if a single row is satisfied."""
        activity = row.activity(values)

        if row.sense is ConstraintSense.LE:
            violation = activity - row.rhs
        elif row.sense is ConstraintSense.GE:
            violation = row.rhs - activity
        else:
            violation = abs(activity - row.rhs)

        if violation <= self.tolerance:
            return None

        terms = " + ".join(
            f"{coefficient:g}*{snapshot.variables[variable_id].label}"
            for variable_id, coefficient in row.coefficients.items()
        )
        return ValidationViolation(
            type="constraint",
            description=f"{row.name}: {terms} {row.sense.value} {row.rhs:g} "
            f"violated by {violation:g}",
            severity="error",
            details={
                "constraint_name": row.name,
                "lhs_value": activity,
                "sense": row.sense.value,
                "rhs_value": row.rhs,
                "violation": violation,
            },
        )

    def _check_bounds(self, column: VariableColumn, value: float) -> List[ValidationViolation]:
        """Check variable bound constraints."""
        violations = []
        if value < column.lower_bound - self.tolerance:
            violations.append(
                ValidationViolation(
                    type="bound",
                    description=f"{column.label} = {value:g} below lower bound "
                    f"{column.lower_bound:g}",
                    severity="error",
                    details={
                        "variable": column.label,
                        "value": value,
                        "bound_type": "lower",
                        "bound_value": column.lower_bound,
                        "violation": column.lower_bound - value,
                    },
                )
            )
        if value > column.upper_bound + self.tolerance:
            violations.append(
                ValidationViolation(
                    type="bound",
                    description=f"{column.label} = {value:g} above upper bound "
                    f"{column.upper_bound:g}",
                    severity="error",
                    details={
                        "variable": column.label,
                        "value": value,
                        "bound_type": "upper",
                        "bound_value": column.upper_bound,
                        "violation": value - column.upper_bound,
                    },
                )
            )
        return violations

    def _check_integrality(
        self, column: VariableColumn, value: float
    ) -> Optional[ValidationViolation]:
        """Check integer and binary restrictions."""
        if not column.is_integer:
            return None

        deviation = abs(value - round(value))
        if deviation <= self.tolerance:
            return None

        return ValidationViolation(
            type="integer",
            description=f"{column.label} = {value:g} is not integral",
            severity="error",
            details={
                "variable": column.label,
                "value": value,
                "expected_type": column.kind.value,
                "deviation": deviation,
                "rounded_value": round(value),
            },
        )
