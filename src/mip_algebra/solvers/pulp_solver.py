"""PuLP solver implementation using the bundled CBC backend."""

import math
import re
import time
from typing import Dict, Any, Optional

import pulp

from .base import BaseSolver, SolverError
from ..algebra.expression import ConstraintSense, ObjectiveSense
from ..models.solution import Solution, SolutionStatus
from ..snapshot import ModelSnapshot
from ..utils.logger import get_logger

logger = get_logger(__name__)

_SENSES = {
    ConstraintSense.LE: pulp.LpConstraintLE,
    ConstraintSense.GE: pulp.LpConstraintGE,
    ConstraintSense.EQ: pulp.LpConstraintEQ,
}


def _bound(value: float) -> Optional[float]:
    return None if math.isinf(value) else value


class PulpSolver(BaseSolver):
    """CBC through PuLP.

    Variables and rows are named by position (``v0``, ``c0``) so that
    arbitrary index values never collide after PuLP's name mangling.
    """

    name = "cbc"

    def _make_command(self) -> pulp.LpSolver:
        kwargs = dict(self.parameters)
        kwargs.setdefault("msg", False)
        if self.timeout and self.timeout > 0:
            kwargs.setdefault("timeLimit", self.timeout)
        return pulp.PULP_CBC_CMD(**kwargs)

    def _build_problem(self, snapshot: ModelSnapshot):
        """Translate a snapshot into a PuLP problem."""
        sense = (
            pulp.LpMaximize
            if snapshot.objective.sense is ObjectiveSense.MAXIMIZE
            else pulp.LpMinimize
        )
        problem_name = re.sub(r"\W", "_", snapshot.name) or "model"
        problem = pulp.LpProblem(problem_name, sense)

        variables = [
            pulp.LpVariable(
                f"v{column.id}",
                lowBound=_bound(column.lower_bound),
                upBound=_bound(column.upper_bound),
                cat=pulp.LpInteger if column.is_integer else pulp.LpContinuous,
            )
            for column in snapshot.variables
        ]

        # Every column gets an objective entry, even a zero one, otherwise the
        # MPS writer drops columns that appear in no row.
        objective = snapshot.objective.coefficients
        problem.setObjective(
            pulp.LpAffineExpression(
                [(var, objective.get(i, 0.0)) for i, var in enumerate(variables)],
                constant=snapshot.objective.constant,
            )
        )

        constraints = []
        for row in snapshot.constraints:
            constraint = pulp.LpConstraint(
                pulp.LpAffineExpression(
                    [(variables[i], c) for i, c in row.coefficients.items()]
                ),
                sense=_SENSES[row.sense],
                rhs=row.rhs,
                name=row.name,
            )
            problem.addConstraint(constraint, row.name)
            constraints.append(constraint)

        return problem, variables, constraints

    def solve(self, snapshot: ModelSnapshot) -> Solution:
        """Solve a snapshot with CBC.

        Args:
            snapshot: Model snapshot

        Returns:
            Solution; duals are included for pure LPs
        """
        if snapshot.num_variables == 0:
            return snapshot.solution_from_vector(
                SolutionStatus.OPTIMAL, [], solver=self.name, solve_time=0.0
            )

        command = self._make_command()
        if not command.available():
            raise SolverError("CBC solver is not available")

        try:
            problem, variables, constraints = self._build_problem(snapshot)
            logger.info(
                f"Problem loaded: {len(variables)} variables, {len(constraints)} constraints"
            )

            start = time.time()
            problem.solve(command)
            solve_time = time.time() - start
        except Exception as e:
            logger.error(f"CBC solver failed: {e}")
            raise SolverError(f"CBC solving failed: {e}") from e

        status = self._extract_solution_status(problem.sol_status)
        raw_status = pulp.LpStatus.get(problem.status, str(problem.status))

        vector = None
        row_duals = None
        column_duals = None
        if self._has_point(status):
            vector = [var.varValue for var in variables]
            missing = [var.name for var in variables if var.varValue is None]
            if missing:
                raise SolverError(
                    f"CBC reported {raw_status} but returned no value for: "
                    f"{', '.join(missing[:10])}"
                )
            if not snapshot.has_integers:
                row_duals = self._collect(c.pi for c in constraints)
                column_duals = self._collect(v.dj for v in variables)

        solution = snapshot.solution_from_vector(
            status,
            vector,
            solver=self.name,
            solver_status=raw_status,
            solve_time=solve_time,
            row_duals=row_duals,
            column_duals=column_duals,
        )
        logger.info(f"Optimization completed with status: {solution.status.value}")
        return solution

    @staticmethod
    def _collect(values) -> Optional[list[float]]:
        values = list(values)
        if any(value is None for value in values):
            return None
        return [float(value) for value in values]

    def _extract_solution_status(self, sol_status: int) -> SolutionStatus:
        """Convert PuLP's solution status to a standardized status."""
        status_map = {
            pulp.LpSolutionOptimal: SolutionStatus.OPTIMAL,
            pulp.LpSolutionIntegerFeasible: SolutionStatus.FEASIBLE,
            pulp.LpSolutionInfeasible: SolutionStatus.INFEASIBLE,
            pulp.LpSolutionUnbounded: SolutionStatus.UNBOUNDED,
            pulp.LpSolutionNoSolutionFound: SolutionStatus.UNKNOWN,
        }
        return status_map.get(sol_status, SolutionStatus.UNKNOWN)

    def get_solver_info(self) -> Dict[str, Any]:
        """Get CBC solver information."""
        command = pulp.PULP_CBC_CMD(msg=False)
        return {
            "name": "CBC",
            "available": bool(command.available()),
            "version": pulp.__version__,
            "description": "COIN-OR Branch and Cut through PuLP",
            "capabilities": ["LP", "MIP"],
        }
