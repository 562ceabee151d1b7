"""Variable registry: stable identities for (name, index tuple) keys."""

import math
from collections.abc import Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from ..exceptions import DuplicateVariableError, ModelingError, UnknownVariableError
from ..utils.logger import get_logger
from .domain import IndexDomain
from .expression import LinearExpression

logger = get_logger(__name__)

VariableKey = tuple[str, tuple[Any, ...]]


class VariableKind(str, Enum):
    """Domain of a decision variable."""

    CONTINUOUS = "continuous"
    INTEGER = "integer"
    BINARY = "binary"

    @property
    def is_integer(self) -> bool:
        return self is not VariableKind.CONTINUOUS


def format_label(name: str, indices: tuple[Any, ...]) -> str:
    """Human readable variable label such as ``x[1,2]``."""
    if not indices:
        return name
    return f"{name}[{','.join(str(index) for index in indices)}]"


@dataclass(frozen=True, slots=True)
class Variable:
    """A single decision variable owned by a ``VariableRegistry``.

    Immutable; the registry replaces the record when bounds change.
    """

    id: int
    name: str
    indices: tuple[Any, ...]
    kind: VariableKind
    lower_bound: float
    upper_bound: float

    @property
    def key(self) -> VariableKey:
        return (self.name, self.indices)

    @property
    def label(self) -> str:
        return format_label(self.name, self.indices)

    @property
    def is_integer(self) -> bool:
        return self.kind.is_integer

    def to_expression(self) -> LinearExpression:
        return LinearExpression.from_variable(self.id)


@dataclass(frozen=True, slots=True)
class VariableFamilyInfo:
    """Bookkeeping shared by all variables declared under one name."""

    name: str
    dimensions: tuple[str, ...]

    @property
    def arity(self) -> int:
        return len(self.dimensions)


def _normalize_indices(indices: Any) -> tuple[Any, ...]:
    if isinstance(indices, tuple):
        return indices
    return (indices,)


def _resolve_bounds(
    kind: VariableKind, lower: float | None, upper: float | None
) -> tuple[float, float]:
    if kind is VariableKind.BINARY:
        lower = 0.0 if lower is None else float(lower)
        upper = 1.0 if upper is None else float(upper)
        if lower < 0.0 or upper > 1.0:
            raise ModelingError(
                f"Binary variable bounds must lie within [0, 1], got [{lower}, {upper}]"
            )
    else:
        lower = -math.inf if lower is None else float(lower)
        upper = math.inf if upper is None else float(upper)
    if math.isnan(lower) or math.isnan(upper):
        raise ModelingError("Variable bounds must not be NaN")
    if lower > upper:
        raise ModelingError(f"Lower bound {lower} exceeds upper bound {upper}")
    return lower, upper


class VariableRegistry:
    """Assigns dense, monotonically increasing identities to variables.

    Identity order is declaration order, which is also the canonical
    column order handed to solver adapters.
    """

    def __init__(self):
        self._variables: list[Variable] = []
        self._ids: dict[VariableKey, int] = {}
        self._families: dict[str, VariableFamilyInfo] = {}
        self._members: dict[str, list[int]] = {}

    def __len__(self) -> int:
        return len(self._variables)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._variables)

    def __contains__(self, key: VariableKey) -> bool:
        name, indices = key
        return (name, _normalize_indices(indices)) in self._ids

    def declare(
        self,
        name: str,
        domain: IndexDomain,
        kind: VariableKind | str = VariableKind.CONTINUOUS,
        lower_bound: float | None = None,
        upper_bound: float | None = None,
    ) -> list[Variable]:
        """Create one variable per accepted tuple of ``domain``.

        Nothing is registered unless every tuple can be declared.

        Args:
            name: Variable family name
            domain: Index domain to expand
            kind: continuous, integer or binary
            lower_bound: Lower bound, ``None`` for the kind's default
            upper_bound: Upper bound, ``None`` for the kind's default

        Returns:
            The newly created variables in identity order

        Raises:
            DuplicateVariableError: If a (name, tuple) key already exists
            ModelingError: On invalid bounds or an arity mismatch
        """
        if not isinstance(name, str) or not name:
            raise ModelingError(f"Invalid variable name: {name!r}")
        kind = VariableKind(kind)
        lower, upper = _resolve_bounds(kind, lower_bound, upper_bound)

        family = self._families.get(name)
        if family is not None and family.arity != len(domain.names):
            raise ModelingError(
                f"Variable {name} was declared with {family.arity} indices, "
                f"got {len(domain.names)}"
            )

        keys = []
        for indices in domain.resolve():
            if (name, indices) in self._ids:
                raise DuplicateVariableError(name, indices)
            keys.append(indices)

        if family is None:
            self._families[name] = VariableFamilyInfo(name, domain.names)
            self._members[name] = []

        created = []
        for indices in keys:
            variable = Variable(len(self._variables), name, indices, kind, lower, upper)
            self._variables.append(variable)
            self._ids[(name, indices)] = variable.id
            self._members[name].append(variable.id)
            created.append(variable)

        logger.debug(f"Declared {len(created)} {kind.value} variable(s) '{name}'")
        return created

    def resolve(self, name: str, indices: Any = ()) -> Variable:
        """Look up a variable by its key.

        Raises:
            UnknownVariableError: If the key was never declared
        """
        indices = _normalize_indices(indices)
        try:
            return self._variables[self._ids[(name, indices)]]
        except KeyError:
            raise UnknownVariableError(name, indices) from None

    def get(self, variable_id: int) -> Variable:
        return self._variables[variable_id]

    def set_bounds(
        self,
        name: str,
        domain: IndexDomain,
        lower_bound: float | None = None,
        upper_bound: float | None = None,
    ) -> list[Variable]:
        """Replace the bounds of every declared variable matching ``domain``.

        ``None`` keeps the existing bound. All tuples are resolved and the
        new bounds validated before any variable is modified.

        Raises:
            UnknownVariableError: If a tuple has no declared variable
            ModelingError: If the resulting bounds are invalid
        """
        self.family(name)
        targets = [self.resolve(name, indices) for indices in domain.resolve()]

        updates = []
        for variable in targets:
            lower = variable.lower_bound if lower_bound is None else lower_bound
            upper = variable.upper_bound if upper_bound is None else upper_bound
            updates.append((variable, _resolve_bounds(variable.kind, lower, upper)))

        updated = []
        for variable, (lower, upper) in updates:
            variable = replace(variable, lower_bound=lower, upper_bound=upper)
            self._variables[variable.id] = variable
            updated.append(variable)

        logger.debug(f"Updated bounds of {len(updated)} variable(s) '{name}'")
        return updated

    def family(self, name: str) -> VariableFamilyInfo:
        """Metadata of a variable family.

        Raises:
            UnknownVariableError: If no variable was declared under ``name``
        """
        try:
            return self._families[name]
        except KeyError:
            raise UnknownVariableError(name) from None

    def families(self) -> list[VariableFamilyInfo]:
        return list(self._families.values())

    def members(self, name: str) -> list[Variable]:
        """Variables of a family in identity order."""
        self.family(name)
        return [self._variables[variable_id] for variable_id in self._members[name]]

    def declared_domain(self, name: str) -> IndexDomain:
        """Index domain spanning the values each dimension was declared with.

        The domain carries a filter that accepts only declared tuples, so
        expanding it yields exactly the family's keys in lexicographic order.
        """
        family = self.family(name)
        columns: list[dict[Any, None]] = [{} for _ in family.dimensions]
        for variable in self.members(name):
            for column, value in zip(columns, variable.indices):
                column.setdefault(value, None)

        def declared(**binding):
            indices = tuple(binding[dim] for dim in family.dimensions)
            return (name, indices) in self._ids

        return IndexDomain.build(
            declared,
            **{dim: tuple(column) for dim, column in zip(family.dimensions, columns)},
        )


class VariableFamily:
    """Handle returned when declaring variables.

    Indexing (or calling) the handle yields the ``LinearExpression`` of a
    single declared variable::

        x = model.add_variable("x", i=range(3))
        x[1] + x[2] <= 1
    """

    def __init__(self, registry: VariableRegistry, name: str):
        self._registry = registry
        self.name = name

    @property
    def dimensions(self) -> tuple[str, ...]:
        return self._registry.family(self.name).dimensions

    def variable(self, *indices: Any) -> Variable:
        return self._registry.resolve(self.name, tuple(indices))

    def __getitem__(self, indices: Any) -> LinearExpression:
        return self._registry.resolve(self.name, indices).to_expression()

    def __call__(self, *indices: Any) -> LinearExpression:
        return self._registry.resolve(self.name, tuple(indices)).to_expression()

    def __iter__(self) -> Iterator[Variable]:
        return iter(self._registry.members(self.name))

    def __len__(self) -> int:
        return len(self._registry.members(self.name))

    def __repr__(self) -> str:
        return f"VariableFamily({self.name!r}, dimensions={self.dimensions})"
