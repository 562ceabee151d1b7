"""Index domains: named dimensions, filter predicates and tuple expansion."""

import inspect
import itertools
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from types import CodeType
from typing import Any

import numpy as np

from ..exceptions import ModelingError, UnboundIndexError

Filter = Callable[..., bool]


def _parameters(func: Callable[..., Any]) -> tuple[tuple[str, ...], bool, frozenset[str]]:
    """Inspect the parameters of a template or filter.

    Plain functions and lambdas are cached by code object and default
    layout; the cache never holds the callable or its closure.

    Returns:
        Names of the parameters that receive index values, whether the
        callable takes ``**kwargs``, and the names that have defaults.
    """
    if inspect.isfunction(func) and not (
        hasattr(func, "__wrapped__") or hasattr(func, "__signature__")
    ):
        positional_defaults = len(func.__defaults__ or ())
        keyword_defaults = frozenset(func.__kwdefaults__ or ())
        return _code_parameters(func.__code__, positional_defaults, keyword_defaults)
    return _signature_parameters(func)


@lru_cache(maxsize=1024)
def _code_parameters(
    code: CodeType, positional_defaults: int, keyword_defaults: frozenset[str]
) -> tuple[tuple[str, ...], bool, frozenset[str]]:
    positional = code.co_varnames[: code.co_argcount]
    keyword_only = code.co_varnames[
        code.co_argcount : code.co_argcount + code.co_kwonlyargcount
    ]
    optional = set(keyword_defaults)
    if positional_defaults:
        optional.update(positional[-positional_defaults:])
    takes_all = bool(code.co_flags & inspect.CO_VARKEYWORDS)
    return positional + keyword_only, takes_all, frozenset(optional)


def _signature_parameters(
    func: Callable[..., Any],
) -> tuple[tuple[str, ...], bool, frozenset[str]]:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError) as e:
        raise TypeError(f"Cannot inspect the parameters of {func!r}: {e}") from e

    names = []
    optional = set()
    takes_all = False
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_KEYWORD:
            takes_all = True
        elif parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            continue
        else:
            names.append(parameter.name)
            if parameter.default is not inspect.Parameter.empty:
                optional.add(parameter.name)
    return tuple(names), takes_all, frozenset(optional)


def referenced_indices(func: Callable[..., Any]) -> tuple[str, ...]:
    """Return the index names a template or filter asks for by parameter name."""
    names, _, _ = _parameters(func)
    return names


def check_bindable(func: Callable[..., Any], available: Iterable[str]) -> None:
    """Fail fast if ``func`` asks for an index that will never be bound.

    Raises:
        UnboundIndexError: If a required parameter names no available index
    """
    available = tuple(available)
    names, _, optional = _parameters(func)
    for name in names:
        if name not in available and name not in optional:
            raise UnboundIndexError(name, available)


def call_with_indices(func: Callable[..., Any], binding: Mapping[str, Any]) -> Any:
    """Call ``func`` with the bound index values its parameters name."""
    names, takes_all, optional = _parameters(func)
    if takes_all:
        return func(**binding)

    kwargs = {}
    for name in names:
        if name in binding:
            kwargs[name] = binding[name]
        elif name not in optional:
            raise UnboundIndexError(name, tuple(binding))
    return func(**kwargs)


def _normalize_value(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value


def _normalize_values(values: Any) -> tuple[Any, ...]:
    """Materialize a dimension range into an ordered tuple of unique values."""
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        return (_normalize_value(values),)
    if isinstance(values, np.ndarray):
        values = values.ravel().tolist()

    seen = set()
    ordered = []
    for value in values:
        value = _normalize_value(value)
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return tuple(ordered)


@dataclass(frozen=True, slots=True)
class Dimension:
    """A named index dimension with an enumerable, finite value range."""

    name: str
    values: tuple[Any, ...]

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.isidentifier():
            raise ModelingError(f"Invalid index name: {self.name!r}")

    @classmethod
    def of(cls, name: str, values: Any) -> "Dimension":
        return cls(name, _normalize_values(values))

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class IndexDomain:
    """Ordered index dimensions plus filter predicates.

    Expansion yields the cross product of the dimension values in
    lexicographic order of the declared dimensions (the first dimension
    varies slowest). Every filter is evaluated once per full tuple and a
    tuple is accepted only if all filters return true.

    Filters are callables whose parameter names select the index values
    they receive::

        IndexDomain.build(lambda i, j: i != j, i=range(3), j=range(3))
    """

    dimensions: tuple[Dimension, ...] = ()
    filters: tuple[Filter, ...] = field(default=())

    def __post_init__(self):
        names = self.names
        if len(set(names)) != len(names):
            raise ModelingError(f"Duplicate index names in domain: {list(names)}")
        for predicate in self.filters:
            if not callable(predicate):
                raise TypeError(f"Filter must be callable, got {predicate!r}")
            check_bindable(predicate, names)

    @classmethod
    def build(cls, *filters: Filter, **dimensions: Any) -> "IndexDomain":
        """Create a domain from keyword ranges and positional filters."""
        return cls(
            tuple(Dimension.of(name, values) for name, values in dimensions.items()),
            tuple(filters),
        )

    @classmethod
    def from_arguments(
        cls, args: Iterable[Any], dimensions: Mapping[str, Any]
    ) -> "IndexDomain":
        """Create a domain from builder-call arguments.

        Args:
            args: Filter callables, optionally mixed with at most one
                ``IndexDomain`` whose dimensions come first
            dimensions: Additional keyword dimensions, in order

        Returns:
            The combined index domain
        """
        base = None
        filters = []
        for arg in args:
            if isinstance(arg, IndexDomain):
                if base is not None:
                    raise ModelingError("At most one IndexDomain may be passed")
                base = arg
            else:
                filters.append(arg)

        extra = cls.build(**dimensions)
        if base is None:
            return cls(extra.dimensions, tuple(filters))
        return cls(base.dimensions + extra.dimensions, base.filters + tuple(filters))

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(dimension.name for dimension in self.dimensions)

    @property
    def is_scalar(self) -> bool:
        """True for the zero-dimensional domain."""
        return not self.dimensions

    def where(self, *filters: Filter) -> "IndexDomain":
        """Return a copy with additional filters."""
        return IndexDomain(self.dimensions, self.filters + tuple(filters))

    def narrow(self, **dimensions: Any) -> "IndexDomain":
        """Return a copy whose named dimensions take the given values instead.

        Raises:
            UnboundIndexError: If a name is not a dimension of this domain
        """
        for name in dimensions:
            if name not in self.names:
                raise UnboundIndexError(name, self.names)
        narrowed = tuple(
            Dimension.of(dim.name, dimensions[dim.name]) if dim.name in dimensions else dim
            for dim in self.dimensions
        )
        return IndexDomain(narrowed, self.filters)

    def _accepts(self, binding: Mapping[str, Any]) -> bool:
        return all(call_with_indices(predicate, binding) for predicate in self.filters)

    def resolve(self) -> Iterator[tuple[Any, ...]]:
        """Lazily yield every accepted index tuple in lexicographic order."""
        names = self.names
        for values in itertools.product(*(dim.values for dim in self.dimensions)):
            if self._accepts(dict(zip(names, values))):
                yield values

    def bindings(self) -> Iterator[dict[str, Any]]:
        """Lazily yield every accepted tuple as a ``{name: value}`` mapping."""
        names = self.names
        for values in self.resolve():
            yield dict(zip(names, values))

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return self.resolve()

    def size(self) -> int:
        """Number of accepted tuples (expands the domain)."""
        return sum(1 for _ in self.resolve())

    def __repr__(self) -> str:
        dims = ", ".join(f"{d.name}={list(d.values)}" for d in self.dimensions)
        return f"IndexDomain({dims}, filters={len(self.filters)})"
