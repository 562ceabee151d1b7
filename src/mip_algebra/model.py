"""Model container: variables, constraints and the objective."""

from collections import Counter
from dataclasses import dataclass
from typing import Any

from .algebra.domain import IndexDomain
from .algebra.expression import (
    Constraint,
    LinearExpression,
    ObjectiveSense,
    as_expression,
    format_constraint,
    format_expression,
)
from .algebra.quantifiers import expand_constraints, sum_expr
from .algebra.variables import VariableFamily, VariableKind, VariableRegistry
from .mapper import get_solution
from .models.solution import Solution, SolutionRecord
from .snapshot import ModelSnapshot
from .utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Objective:
    expression: LinearExpression
    sense: ObjectiveSense


class Model:
    """A mixed-integer linear program under construction.

    The model is mutated only through ``add_variable``, ``set_bounds``,
    ``add_constraint`` and ``set_objective``. Each call either succeeds
    completely or raises and leaves the model unchanged. Solver adapters
    receive an immutable ``ModelSnapshot`` from ``freeze()``.

    Index domains are passed as keyword ranges plus positional filter
    callables, whose parameter names pick the indices they see::

        model = Model("assignment")
        x = model.add_variable("x", i=range(3), j=range(3), kind="binary")
        model.add_constraint(lambda i: sum_expr(lambda j: x[i, j], j=range(3)) == 1, i=range(3))
        model.set_objective(sum_expr(lambda i, j: (i + j) * x[i, j], i=range(3), j=range(3)))

    A model is not safe for concurrent mutation.
    """

    def __init__(self, name: str = "model"):
        self.name = name
        self._registry = VariableRegistry()
        self._constraints: list[Constraint] = []
        self._objective: Objective | None = None

    @property
    def registry(self) -> VariableRegistry:
        return self._registry

    @property
    def constraints(self) -> tuple[Constraint, ...]:
        return tuple(self._constraints)

    @property
    def objective(self) -> Objective | None:
        return self._objective

    @property
    def num_variables(self) -> int:
        return len(self._registry)

    @property
    def num_constraints(self) -> int:
        return len(self._constraints)

    # Builder verbs

    def add_variable(
        self,
        name: str,
        /,
        *filters: Any,
        kind: VariableKind | str = VariableKind.CONTINUOUS,
        lb: float | None = None,
        ub: float | None = None,
        **dimensions: Any,
    ) -> VariableFamily:
        """Declare one variable per accepted tuple of the index domain.

        Args:
            name: Family name
            *filters: Filter callables (or an ``IndexDomain``)
            kind: continuous, integer or binary
            lb: Lower bound, default ``-inf`` (``0`` for binary)
            ub: Upper bound, default ``inf`` (``1`` for binary)
            **dimensions: Index ranges in declaration order

        Returns:
            Handle used to reference the variables in expressions

        Raises:
            DuplicateVariableError: If any key is already declared
            UnboundIndexError: If a filter names an unknown index
        """
        domain = IndexDomain.from_arguments(filters, dimensions)
        self._registry.declare(name, domain, kind, lb, ub)
        return VariableFamily(self._registry, name)

    def variable(self, name: str) -> VariableFamily:
        """Handle of an already declared family.

        Raises:
            UnknownVariableError: If ``name`` was never declared
        """
        self._registry.family(name)
        return VariableFamily(self._registry, name)

    def set_bounds(
        self,
        name: str,
        /,
        *filters: Any,
        lb: float | None = None,
        ub: float | None = None,
        **dimensions: Any,
    ) -> None:
        """Replace bounds of declared variables over an index domain.

        Raises:
            UnknownVariableError: If a resolved tuple was never declared
        """
        domain = IndexDomain.from_arguments(filters, dimensions)
        self._registry.set_bounds(name, domain, lb, ub)

    def add_constraint(
        self, template: Any, /, *filters: Any, **dimensions: Any
    ) -> tuple[Constraint, ...]:
        """Add one constraint per accepted tuple of the index domain.

        Args:
            template: A ``Constraint`` or a callable building one from the
                bound indices, e.g. ``lambda i, j: x[i] + x[j] <= 1``
            *filters: Filter callables (or an ``IndexDomain``)
            **dimensions: Index ranges in declaration order

        Returns:
            The constraints appended, in resolver order

        Raises:
            InvalidConstraintError: If an instance is a false constant comparison
        """
        domain = IndexDomain.from_arguments(filters, dimensions)
        added = expand_constraints(template, domain)
        self._constraints.extend(added)
        logger.debug(f"Added {len(added)} constraint(s) to model '{self.name}'")
        return tuple(added)

    def set_objective(
        self, expression: Any, sense: ObjectiveSense | str = ObjectiveSense.MINIMIZE
    ) -> None:
        """Set the objective, replacing any previous one."""
        self._objective = Objective(as_expression(expression), ObjectiveSense.parse(sense))

    def sum_expr(self, template: Any, /, *filters: Any, **dimensions: Any) -> LinearExpression:
        """Shortcut for :func:`mip_algebra.algebra.sum_expr`."""
        return sum_expr(template, *filters, **dimensions)

    # Export and results

    def freeze(self) -> ModelSnapshot:
        """Take an immutable snapshot for a solver adapter."""
        objective = self._objective or Objective(
            LinearExpression.zero(), ObjectiveSense.MINIMIZE
        )
        return ModelSnapshot.build(
            self.name,
            self._registry,
            self._constraints,
            objective.expression,
            objective.sense,
        )

    def get_solution(
        self, solution: Solution, name: str, /, *filters: Any, **narrowing: Any
    ) -> list[SolutionRecord]:
        """Indexed values of a variable family, in declaration index order.

        ``narrowing`` fixes dimensions to a value or a set of values, e.g.
        ``model.get_solution(solution, "x", k=1)``.
        """
        return get_solution(self._registry, solution, name, *filters, **narrowing)

    def get_value(self, solution: Solution, name: str, /, *indices: Any) -> float:
        """Value of a single variable ``name[indices]``."""
        return solution.value(self._registry.resolve(name, tuple(indices)).id)

    # Display

    def _label(self, variable_id: int) -> str:
        return self._registry.get(variable_id).label

    def format_expression(self, expression: LinearExpression) -> str:
        return format_expression(expression, self._label)

    def format_constraint(self, constraint: Constraint) -> str:
        return format_constraint(constraint, self._label)

    def summary(self) -> str:
        """Short description of the model's size and objective."""
        kinds = Counter(variable.kind for variable in self._registry)
        integer = any(kind.is_integer for kind in kinds)
        if self._objective is None:
            objective = "none"
        else:
            objective = {
                ObjectiveSense.MINIMIZE: "minimize",
                ObjectiveSense.MAXIMIZE: "maximize",
            }[self._objective.sense]
        lines = [
            f"{'Mixed integer' if integer else 'Linear'} optimization model '{self.name}'",
            "  Variables:",
            f"    Continuous: {kinds[VariableKind.CONTINUOUS]}",
            f"    Integer: {kinds[VariableKind.INTEGER]}",
            f"    Binary: {kinds[VariableKind.BINARY]}",
            f"  Constraints: {len(self._constraints)}",
            f"  Objective: {objective}",
        ]
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        return (
            f"Model({self.name!r}, variables={self.num_variables}, "
            f"constraints={self.num_constraints})"
        )
