"""Tests for the CBC adapter through PuLP."""

import pulp
import pytest
from unittest.mock import patch

from mip_algebra import Model, SolutionStatus
from mip_algebra.solvers.base import SolverError
from mip_algebra.solvers.pulp_solver import PulpSolver
from mip_algebra.utils.solution_validator import SolutionValidator
from tests.fixtures.sample_problems import (
    TRANSPORTATION_OPTIMUM,
    build_assignment_model,
    build_infeasible_model,
    build_transportation_model,
    build_unbounded_model,
)

requires_cbc = pytest.mark.skipif(
    not pulp.PULP_CBC_CMD(msg=False).available(), reason="CBC binary not available"
)


@pytest.fixture
def solver():
    """CBC adapter with a short time limit."""
    return PulpSolver({"timeout": 60, "parameters": {}})


@requires_cbc
class TestPulpSolver:
    """Test cases for PulpSolver against small known problems."""

    def test_knapsack(self, solver, knapsack_model):
        """Binary knapsack picks items 1 and 2."""
        solution = solver.solve(knapsack_model.freeze())

        assert solution.status is SolutionStatus.OPTIMAL
        assert solution.solver == "cbc"
        assert solution.solver_status == "Optimal"
        assert solution.objective_value == pytest.approx(220.0)
        values = [r.value for r in knapsack_model.get_solution(solution, "x")]
        assert values == pytest.approx([0.0, 1.0, 1.0])
        assert solution.row_duals is None

    def test_transportation(self, solver):
        """LP transportation problem reaches its optimum."""
        model = build_transportation_model()
        solution = solver.solve(model.freeze())

        assert solution.is_optimal
        assert solution.objective_value == pytest.approx(TRANSPORTATION_OPTIMUM)
        shipped = sum(r.value for r in model.get_solution(solution, "x"))
        assert shipped == pytest.approx(75.0)

    def test_assignment(self, solver):
        """Assignment picks the diagonal."""
        model = build_assignment_model(4)
        solution = solver.solve(model.freeze())

        assert solution.is_optimal
        assert solution.objective_value == pytest.approx(4.0)
        chosen = [r.indices for r in model.get_solution(solution, "y") if r.value > 0.5]
        assert chosen == [(0, 0), (1, 1), (2, 2), (3, 3)]

    def test_lp_duals(self, solver):
        """Pure LPs report row duals and reduced costs."""
        model = Model("lp")
        x = model.add_variable("x", lb=0)
        y = model.add_variable("y", lb=0)
        model.add_constraint(x() + y() <= 4)
        model.add_constraint(x() + 3 * y() <= 6)
        model.set_objective(3 * x() + 2 * y(), "max")

        solution = solver.solve(model.freeze())

        assert solution.objective_value == pytest.approx(12.0)
        assert model.get_value(solution, "x") == pytest.approx(4.0)
        assert model.get_value(solution, "y") == pytest.approx(0.0)
        assert len(solution.row_duals) == 2
        assert len(solution.column_duals) == 2

    def test_objective_constant(self, solver):
        """The objective constant is part of the reported value."""
        model = Model()
        x = model.add_variable("x", lb=1, ub=3)
        model.add_constraint(x() >= 0)
        model.set_objective(2 * x() + 10, "min")

        solution = solver.solve(model.freeze())

        assert solution.objective_value == pytest.approx(12.0)

    def test_string_indices(self, solver):
        """Index values that are not valid names do not leak into PuLP."""
        model = Model("names with spaces")
        cities = ["new york", "são paulo", "a-b"]
        z = model.add_variable("z", c=cities, lb=0, ub=1)
        model.add_constraint(z["new york"] + z["a-b"] <= 2)
        model.set_objective(model.sum_expr(lambda c: z[c], c=cities), "max")

        solution = solver.solve(model.freeze())

        assert solution.objective_value == pytest.approx(3.0)
        assert [r.index["c"] for r in model.get_solution(solution, "z")] == cities

    def test_infeasible(self, solver):
        """Infeasible models are reported, not raised."""
        solution = solver.solve(build_infeasible_model().freeze())

        assert solution.status is SolutionStatus.INFEASIBLE
        assert solution.values == {}
        assert solution.objective_value is None

    def test_unbounded(self, solver):
        """Unbounded models carry no point."""
        solution = solver.solve(build_unbounded_model().freeze())

        assert not solution.is_feasible
        assert solution.values == {}

    def test_column_outside_rows_and_objective(self, solver):
        """A variable used nowhere still gets a value inside its bounds."""
        model = Model("loose_column")
        x = model.add_variable("x", i=range(2), lb=0)
        model.add_variable("y", lb=2, ub=5)
        model.add_constraint(x[0] + x[1] <= 3)
        model.set_objective(x[0] + x[1], "max")

        solution = solver.solve(model.freeze())

        assert solution.is_optimal
        assert solution.objective_value == pytest.approx(3.0)
        assert 2.0 <= model.get_value(solution, "y") <= 5.0
        assert SolutionValidator().validate_solution(model.freeze(), solution).is_valid


class TestPulpSolverWithoutBackend:
    """Test cases that do not need the CBC binary."""

    def test_empty_model(self, solver):
        """A model without variables is trivially optimal."""
        model = Model("empty")
        model.set_objective(7)

        solution = solver.solve(model.freeze())

        assert solution.status is SolutionStatus.OPTIMAL
        assert solution.objective_value == 7.0
        assert solution.values == {}

    def test_cbc_unavailable(self, solver, knapsack_model):
        """A missing CBC binary is an adapter error."""
        with patch.object(pulp.PULP_CBC_CMD, "available", return_value=False):
            with pytest.raises(SolverError, match="CBC solver is not available"):
                solver.solve(knapsack_model.freeze())

    def test_backend_failure_is_wrapped(self, solver, knapsack_model):
        """Backend exceptions surface as SolverError."""
        with (
            patch.object(pulp.PULP_CBC_CMD, "available", return_value=True),
            patch.object(pulp.LpProblem, "solve", side_effect=RuntimeError("boom")),
        ):
            with pytest.raises(SolverError, match="boom"):
                solver.solve(knapsack_model.freeze())

    def test_status_mapping(self, solver):
        """PuLP solution statuses map onto SolutionStatus."""
        assert solver._extract_solution_status(pulp.LpSolutionOptimal) is SolutionStatus.OPTIMAL
        assert (
            solver._extract_solution_status(pulp.LpSolutionIntegerFeasible)
            is SolutionStatus.FEASIBLE
        )
        assert (
            solver._extract_solution_status(pulp.LpSolutionInfeasible)
            is SolutionStatus.INFEASIBLE
        )
        assert (
            solver._extract_solution_status(pulp.LpSolutionUnbounded)
            is SolutionStatus.UNBOUNDED
        )
        assert solver._extract_solution_status(99) is SolutionStatus.UNKNOWN

    def test_command_options(self):
        """Timeout and parameters reach the CBC command."""
        solver = PulpSolver({"timeout": 15, "parameters": {"gapRel": 0.05}})
        command = solver._make_command()

        assert command.timeLimit == 15
        assert command.optionsDict.get("gapRel") == 0.05
        assert command.msg is False

    def test_solver_info(self, solver):
        """Solver info names the backend."""
        info = solver.get_solver_info()
        assert info["name"] == "CBC"
        assert "MIP" in info["capabilities"]

    def test_every_column_reaches_the_objective(self, solver):
        """Columns outside every row are still written to the problem."""
        model = Model()
        x = model.add_variable("x", i=range(2), lb=0)
        model.add_variable("y", lb=2, ub=5)
        model.add_constraint(x[0] + x[1] <= 3)
        model.set_objective(x[0], "max")

        problem, variables, _ = solver._build_problem(model.freeze())

        assert [v.name for v in problem.variables()] == ["v0", "v1", "v2"]
        assert dict(problem.objective) == {
            variables[0]: 1.0,
            variables[1]: 0.0,
            variables[2]: 0.0,
        }

    def test_missing_value_is_an_error(self, solver, knapsack_model):
        """An optimal status without a value for every column is rejected."""

        def optimal_without_values(problem, *args, **kwargs):
            problem.status = pulp.LpStatusOptimal
            problem.sol_status = pulp.LpSolutionOptimal
            return problem.status

        with (
            patch.object(pulp.PULP_CBC_CMD, "available", return_value=True),
            patch.object(
                pulp.LpProblem, "solve", autospec=True, side_effect=optimal_without_values
            ),
        ):
            with pytest.raises(SolverError, match="no value for: v0, v1, v2"):
                solver.solve(knapsack_model.freeze())
