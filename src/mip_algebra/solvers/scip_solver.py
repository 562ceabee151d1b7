"""SCIP solver implementation using pyscipopt."""

import math
from typing import Dict, Any, Optional

try:
    import pyscipopt
except ImportError:
    pyscipopt = None

from .base import BaseSolver, SolverError
from ..algebra.expression import ConstraintSense, ObjectiveSense
from ..models.solution import Solution, SolutionStatus
from ..snapshot import ModelSnapshot
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _bound(value: float) -> Optional[float]:
    return None if math.isinf(value) else value


class SCIPSolver(BaseSolver):
    """SCIP solver implementation using pyscipopt."""

    name = "scip"

    def __init__(self, config: Dict[str, Any]):
        """Initialize SCIP solver.

        Args:
            config: Solver configuration
        """
        super().__init__(config)

        if pyscipopt is None:
            raise SolverError("pyscipopt is not available")

        self.model = None

    def _build_model(self, snapshot: ModelSnapshot) -> list:
        """Translate a snapshot into a fresh SCIP model.

        Returns:
            SCIP variables in column order
        """
        self.model = pyscipopt.Model(snapshot.name)
        self.model.hideOutput()
        self._apply_parameters()

        variables = []
        for column in snapshot.variables:
            vtype = "I" if column.is_integer else "C"
            variables.append(
                self.model.addVar(
                    name=f"v{column.id}",
                    vtype=vtype,
                    lb=_bound(column.lower_bound),
                    ub=_bound(column.upper_bound),
                )
            )

        for row in snapshot.constraints:
            activity = pyscipopt.quicksum(
                c * variables[i] for i, c in row.coefficients.items()
            )
            if row.sense is ConstraintSense.LE:
                self.model.addCons(activity <= row.rhs, name=row.name)
            elif row.sense is ConstraintSense.GE:
                self.model.addCons(activity >= row.rhs, name=row.name)
            else:
                self.model.addCons(activity == row.rhs, name=row.name)

        objective = pyscipopt.quicksum(
            c * variables[i] for i, c in snapshot.objective.coefficients.items()
        )
        sense = (
            "maximize"
            if snapshot.objective.sense is ObjectiveSense.MAXIMIZE
            else "minimize"
        )
        self.model.setObjective(objective, sense)
        if snapshot.objective.constant:
            self.model.addObjoffset(snapshot.objective.constant)

        return variables

    def solve(self, snapshot: ModelSnapshot) -> Solution:
        """Solve a snapshot with SCIP.

        Args:
            snapshot: Model snapshot

        Returns:
            Optimization solution
        """
        if snapshot.num_variables == 0:
            return snapshot.solution_from_vector(
                SolutionStatus.OPTIMAL, [], solver=self.name, solve_time=0.0
            )

        try:
            variables = self._build_model(snapshot)
            logger.info(
                f"Problem loaded: {self.model.getNVars()} variables, "
                f"{self.model.getNConss()} constraints"
            )

            self.model.optimize()

            return self._extract_solution(snapshot, variables)

        except Exception as e:
            logger.error(f"SCIP solver failed: {e}")
            raise SolverError(f"SCIP solving failed: {e}") from e

        finally:
            self.model = None

    def _apply_parameters(self) -> None:
        """Apply solver parameters to SCIP model."""
        for param_name, param_value in self.parameters.items():
            try:
                self.model.setParam(param_name, param_value)
                logger.debug(f"Set SCIP parameter {param_name} = {param_value}")
            except Exception as e:
                logger.warning(f"Failed to set SCIP parameter {param_name}: {e}")

        if self.timeout and self.timeout > 0:
            self.model.setParam("limits/time", self.timeout)

    def _extract_solution(self, snapshot: ModelSnapshot, variables: list) -> Solution:
        """Extract solution from the solved SCIP model."""
        raw_status = str(self.model.getStatus())
        status = self._extract_solution_status(raw_status)

        # Limits may stop SCIP with an incumbent
        if status is SolutionStatus.UNKNOWN and self.model.getNSols() > 0:
            status = SolutionStatus.FEASIBLE

        vector = None
        objective_value = None
        if self._has_point(status):
            best = self.model.getBestSol()
            vector = [self.model.getSolVal(best, var) for var in variables]
            objective_value = self.model.getSolObjVal(best)

        solution = snapshot.solution_from_vector(
            status,
            vector,
            objective_value=objective_value,
            solver=self.name,
            solver_status=raw_status,
            solve_time=self.model.getSolvingTime(),
        )
        logger.info(f"Optimization completed with status: {solution.status.value}")
        return solution

    def _extract_solution_status(self, scip_status: Any) -> SolutionStatus:
        """Convert SCIP status to standardized status.

        Args:
            scip_status: SCIP status string

        Returns:
            Standardized status
        """
        status_map = {
            "optimal": SolutionStatus.OPTIMAL,
            "infeasible": SolutionStatus.INFEASIBLE,
            "unbounded": SolutionStatus.UNBOUNDED,
        }
        return status_map.get(str(scip_status).lower(), SolutionStatus.UNKNOWN)

    def get_solver_info(self) -> Dict[str, Any]:
        """Get SCIP solver information.

        Returns:
            Solver information dictionary
        """
        try:
            temp_model = pyscipopt.Model("temp")
            version = temp_model.version()

            return {
                "name": "SCIP",
                "available": True,
                "version": version,
                "description": "Solving Constraint Integer Programs",
                "capabilities": ["LP", "MIP"],
            }
        except Exception as e:
            return {
                "name": "SCIP",
                "available": False,
                "error": str(e)
            }
