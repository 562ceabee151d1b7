"""Base solver abstraction layer."""

from abc import ABC, abstractmethod
from typing import Dict, Any

from ..models.solution import Solution, SolutionStatus
from ..snapshot import ModelSnapshot


class SolverError(Exception):
    """Base class for solver-related errors."""
    pass


class BaseSolver(ABC):
    """Abstract base class for solver adapters.

    An adapter translates a ``ModelSnapshot`` into its backend, blocks
    until the backend finishes and reports the outcome as a ``Solution``.
    Infeasible or unbounded models are ordinary results; ``SolverError``
    is reserved for adapter faults.
    """

    name: str = "base"

    def __init__(self, config: Dict[str, Any]):
        """Initialize the solver.

        Args:
            config: Solver configuration dictionary
        """
        self.config = config
        self.timeout = config.get("timeout", 3600)
        self.parameters = dict(config.get("parameters", {}))

    @abstractmethod
    def solve(self, snapshot: ModelSnapshot) -> Solution:
        """Solve a frozen model.

        Args:
            snapshot: Model snapshot to solve

        Returns:
            Solution with one value per variable when a point is available

        Raises:
            SolverError: If the backend fails
        """
        pass

    @abstractmethod
    def get_solver_info(self) -> Dict[str, Any]:
        """Get solver information.

        Returns:
            Dictionary with solver name, version, capabilities
        """
        pass

    def set_parameters(self, params: Dict[str, Any]) -> None:
        """Set solver parameters.

        Args:
            params: Parameter dictionary
        """
        self.parameters.update(params)

    def _extract_solution_status(self, solver_status: Any) -> SolutionStatus:
        """Extract standardized status from solver-specific status.

        Args:
            solver_status: Solver-specific status object

        Returns:
            Standardized status
        """
        return SolutionStatus.UNKNOWN

    def _has_point(self, status: SolutionStatus) -> bool:
        """Check if status comes with variable values."""
        return status in (SolutionStatus.OPTIMAL, SolutionStatus.FEASIBLE)
