"""Solver factory for creating solver adapters by name."""

from typing import Any, ClassVar

from .base import BaseSolver
from .pulp_solver import PulpSolver
from .scip_solver import SCIPSolver
from ..models.config import SolverConfig


class SolverFactory:
    """Registry of solver adapters keyed by lower-case name."""

    _SOLVER_REGISTRY: ClassVar[dict[str, type[BaseSolver]]] = {
        "cbc": PulpSolver,
        "pulp": PulpSolver,
        "scip": SCIPSolver,
    }

    @classmethod
    def register(cls, solver_name: str, solver_class: type[BaseSolver]) -> None:
        """Make an external adapter available under ``solver_name``.

        Raises:
            TypeError: If ``solver_class`` is not a ``BaseSolver`` subclass
        """
        if not (isinstance(solver_class, type) and issubclass(solver_class, BaseSolver)):
            raise TypeError(f"{solver_class!r} is not a BaseSolver subclass")
        cls._SOLVER_REGISTRY[solver_name.lower()] = solver_class

    @classmethod
    def get_available_solvers(cls) -> list[str]:
        """Names of all registered adapters."""
        return list(cls._SOLVER_REGISTRY.keys())

    @classmethod
    def create_solver(cls, solver_name: str, config: dict[str, Any]) -> BaseSolver:
        """Create a solver instance.

        Args:
            solver_name: Name of the solver to create, case-insensitive
            config: Configuration dictionary for the solver

        Returns:
            Solver instance

        Raises:
            ValueError: If solver is not supported
        """
        solver_name = solver_name.lower()

        if solver_name not in cls._SOLVER_REGISTRY:
            available = ", ".join(cls.get_available_solvers())
            raise ValueError(
                f"Unsupported solver: {solver_name}. Available solvers: {available}"
            )

        return cls._SOLVER_REGISTRY[solver_name](config)

    @classmethod
    def from_config(cls, config: SolverConfig, solver_name: str | None = None) -> BaseSolver:
        """Create the configured (or named) solver with configured limits."""
        return cls.create_solver(
            solver_name or config.default,
            {"timeout": config.timeout, "parameters": dict(config.parameters)},
        )

    @classmethod
    def is_solver_available(cls, solver_name: str) -> bool:
        """Check if a solver name is registered."""
        return solver_name.lower() in cls._SOLVER_REGISTRY
