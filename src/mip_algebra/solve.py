"""Solving a model through a solver adapter."""

from .model import Model
from .models.solution import Solution
from .solvers.base import BaseSolver
from .solvers.factory import SolverFactory
from .utils.config_manager import ConfigManager
from .utils.logger import get_logger
from .utils.solution_validator import SolutionValidator

logger = get_logger(__name__)


def solve_model(
    model: Model,
    solver: BaseSolver | str | None = None,
    config_manager: ConfigManager | None = None,
    validate: bool | None = None,
) -> Solution:
    """Freeze ``model``, hand it to a solver and wait for the result.

    Args:
        model: Model to solve
        solver: Adapter instance, registered adapter name, or None for the
            configured default
        config_manager: Configuration source. If None, creates default.
        validate: Check the returned point against the model; defaults to
            the ``validation.enabled`` setting

    Returns:
        The solution. Infeasible or unbounded outcomes are reported through
        ``Solution.status``.

    Raises:
        SolverError: If the adapter fails
    """
    if config_manager is None:
        config_manager = ConfigManager()
    config = config_manager.get_config()

    if not isinstance(solver, BaseSolver):
        solver = SolverFactory.from_config(config.solvers, solver)

    snapshot = model.freeze()
    logger.info(
        f"Solving model '{snapshot.name}' with {solver.name}: "
        f"{snapshot.num_variables} variables, {snapshot.num_constraints} constraints"
    )
    solution = solver.solve(snapshot)

    if validate is None:
        validate = config.validation.enabled
    if validate and solution.is_feasible:
        validation = SolutionValidator(config.validation.tolerance).validate_solution(
            snapshot, solution
        )
        if not validation.is_valid:
            logger.warning(
                f"Solver returned a point violating {validation.summary.get('violations_found', 0)} "
                "model condition(s)"
            )
        solution = solution.model_copy(update={"validation": validation})

    return solution
