"""Map solver results back onto indexed variable names."""

from typing import Any

from .algebra.variables import VariableRegistry
from .models.solution import Solution, SolutionRecord


def get_solution(
    registry: VariableRegistry,
    solution: Solution,
    name: str,
    *filters: Any,
    **narrowing: Any,
) -> list[SolutionRecord]:
    """Query the values of a variable family.

    The family's declared domain is expanded again, optionally narrowed
    per dimension and filtered, so records come back in the same
    lexicographic index order as declaration.

    Args:
        registry: Registry the solution's identities refer to
        solution: Solver result
        name: Variable family name
        *filters: Extra filter callables over the family's dimensions
        **narrowing: Per-dimension value or iterable of values to keep

    Returns:
        One record per matching variable

    Raises:
        UnknownVariableError: If ``name`` is not a declared family
        UnboundIndexError: If narrowing or filters name an unknown dimension
        KeyError: If the solution carries no value for a matching variable
    """
    family = registry.family(name)
    domain = registry.declared_domain(name).narrow(**narrowing).where(*filters)

    records = []
    for indices in domain.resolve():
        variable = registry.resolve(name, indices)
        records.append(
            SolutionRecord(
                variable=name,
                dimensions=family.dimensions,
                indices=indices,
                value=solution.value(variable.id),
            )
        )
    return records
