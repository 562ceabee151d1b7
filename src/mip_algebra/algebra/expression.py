"""Symbolic linear expressions and the constraints built from them."""

import math
import numbers
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np


class ConstraintSense(str, Enum):
    """Relational operator of a constraint."""

    LE = "<="
    GE = ">="
    EQ = "=="

    def holds(self, lhs: float, rhs: float) -> bool:
        """Evaluate ``lhs <op> rhs`` exactly."""
        if self is ConstraintSense.LE:
            return lhs <= rhs
        if self is ConstraintSense.GE:
            return lhs >= rhs
        return lhs == rhs

    @property
    def mirrored(self) -> "ConstraintSense":
        """The operator after swapping both sides."""
        if self is ConstraintSense.LE:
            return ConstraintSense.GE
        if self is ConstraintSense.GE:
            return ConstraintSense.LE
        return self


class ObjectiveSense(str, Enum):
    """Optimization direction."""

    MINIMIZE = "min"
    MAXIMIZE = "max"

    @classmethod
    def parse(cls, value: "ObjectiveSense | str") -> "ObjectiveSense":
        """Accept an enum member or one of min/minimize/max/maximize."""
        if isinstance(value, cls):
            return value
        aliases = {
            "min": cls.MINIMIZE,
            "minimize": cls.MINIMIZE,
            "max": cls.MAXIMIZE,
            "maximize": cls.MAXIMIZE,
        }
        try:
            return aliases[str(value).lower()]
        except KeyError:
            raise ValueError(
                f"Unsupported objective sense: {value!r}. Use 'min' or 'max'"
            ) from None


def _is_scalar(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class LinearExpression:
    """``constant + sum(coefficient * variable)`` over variable identities.

    Instances are immutable; every operator returns a new expression.
    Terms keep the order in which variables were first referenced and
    coefficients of the same variable are summed. Coefficients that sum
    to exactly zero are pruned; no tolerance is applied.
    """

    __slots__ = ("_terms", "_constant")

    # Make numpy scalars defer to our reflected operators
    __array_ufunc__ = None

    def __init__(self, terms: Mapping[int, float] | None = None, constant: float = 0.0):
        self._terms: dict[int, float] = {}
        if terms:
            for variable_id, coefficient in terms.items():
                coefficient = float(coefficient)
                if coefficient != 0.0:
                    self._terms[int(variable_id)] = coefficient
        self._constant = float(constant)

    @classmethod
    def from_variable(cls, variable_id: int, coefficient: float = 1.0) -> "LinearExpression":
        return cls({variable_id: coefficient})

    @classmethod
    def from_constant(cls, value: float) -> "LinearExpression":
        return cls(None, value)

    @classmethod
    def zero(cls) -> "LinearExpression":
        return cls()

    @classmethod
    def sum(cls, items: Iterable[Any]) -> "LinearExpression":
        """Fold expression-like items with ``+`` in iteration order.

        Accumulates into a single mapping instead of building an
        intermediate expression per item.
        """
        terms: dict[int, float] = {}
        constant = 0.0
        for item in items:
            expression = as_expression(item)
            constant += expression._constant
            for variable_id, coefficient in expression._terms.items():
                terms[variable_id] = terms.get(variable_id, 0.0) + coefficient
        return cls(terms, constant)

    @property
    def constant(self) -> float:
        return self._constant

    @property
    def terms(self) -> dict[int, float]:
        """A copy of the ``{variable id: coefficient}`` mapping."""
        return dict(self._terms)

    @property
    def variable_ids(self) -> tuple[int, ...]:
        return tuple(self._terms)

    @property
    def is_constant(self) -> bool:
        return not self._terms

    def coefficient(self, variable_id: int) -> float:
        return self._terms.get(variable_id, 0.0)

    def evaluate(self, values: Mapping[int, float]) -> float:
        """Value of the expression for a ``{variable id: value}`` assignment."""
        return self._constant + math.fsum(
            coefficient * values[variable_id]
            for variable_id, coefficient in self._terms.items()
        )

    def dense(self, size: int) -> np.ndarray:
        """Coefficients as a dense vector over variable ids ``0..size-1``."""
        vector = np.zeros(size, dtype=float)
        for variable_id, coefficient in self._terms.items():
            vector[variable_id] = coefficient
        return vector

    def equals(self, other: Any) -> bool:
        """Structural equality (``==`` builds a constraint instead)."""
        try:
            other = as_expression(other)
        except TypeError:
            return False
        return self._constant == other._constant and self._terms == other._terms

    # Algebra

    def add(self, other: Any) -> "LinearExpression":
        return LinearExpression.sum((self, other))

    def scale(self, factor: float) -> "LinearExpression":
        factor = float(factor)
        return LinearExpression(
            {variable_id: c * factor for variable_id, c in self._terms.items()},
            self._constant * factor,
        )

    def negate(self) -> "LinearExpression":
        return self.scale(-1.0)

    def __add__(self, other):
        if not _is_expression_like(other):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        if not _is_expression_like(other):
            return NotImplemented
        return LinearExpression.sum((other, self))

    def __sub__(self, other):
        if not _is_expression_like(other):
            return NotImplemented
        return self.add(as_expression(other).negate())

    def __rsub__(self, other):
        if not _is_expression_like(other):
            return NotImplemented
        return self.negate().add(other)

    def __mul__(self, other):
        if _is_scalar(other):
            return self.scale(other)
        if isinstance(other, LinearExpression):
            if other.is_constant:
                return self.scale(other._constant)
            if self.is_constant:
                return other.scale(self._constant)
            raise TypeError("Product of two non-constant expressions is not linear")
        return NotImplemented

    def __rmul__(self, other):
        if _is_scalar(other):
            return self.scale(other)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, LinearExpression):
            if not other.is_constant:
                raise TypeError("Division by a non-constant expression is not linear")
            other = other._constant
        if not _is_scalar(other):
            return NotImplemented
        return self.scale(1.0 / float(other))

    def __neg__(self):
        return self.negate()

    def __pos__(self):
        return self

    # Comparisons build constraints

    def __le__(self, other):
        if not _is_expression_like(other):
            return NotImplemented
        return Constraint(self, ConstraintSense.LE, as_expression(other))

    def __ge__(self, other):
        if not _is_expression_like(other):
            return NotImplemented
        return Constraint(self, ConstraintSense.GE, as_expression(other))

    def __eq__(self, other):
        if not _is_expression_like(other):
            return NotImplemented
        return Constraint(self, ConstraintSense.EQ, as_expression(other))

    __hash__ = None

    def __repr__(self) -> str:
        return f"LinearExpression({format_expression(self)})"


def _is_expression_like(value: Any) -> bool:
    return isinstance(value, LinearExpression) or _is_scalar(value)


def as_expression(value: Any) -> LinearExpression:
    """Coerce a number or expression into a ``LinearExpression``."""
    if isinstance(value, LinearExpression):
        return value
    if _is_scalar(value):
        return LinearExpression.from_constant(value)
    raise TypeError(f"Cannot use {type(value).__name__} as a linear expression")


def _format_number(value: float) -> str:
    return f"{value:g}"


def format_expression(expression: LinearExpression, label=None) -> str:
    """Render an expression, naming variables with ``label(id)``."""
    if label is None:
        label = lambda variable_id: f"v{variable_id}"  # noqa: E731

    parts = []
    for variable_id, coefficient in expression._terms.items():
        sign = "-" if coefficient < 0 else "+"
        magnitude = abs(coefficient)
        term = label(variable_id) if magnitude == 1.0 else f"{_format_number(magnitude)}*{label(variable_id)}"
        parts.append((sign, term))
    if expression._constant != 0.0 or not parts:
        sign = "-" if expression._constant < 0 else "+"
        parts.append((sign, _format_number(abs(expression._constant))))

    first_sign, first_term = parts[0]
    text = f"-{first_term}" if first_sign == "-" else first_term
    for sign, term in parts[1:]:
        text += f" {sign} {term}"
    return text


@dataclass(frozen=True, eq=False)
class Constraint:
    """A relational comparison ``lhs <sense> rhs`` between two expressions.

    ``indices`` records the index binding a quantified constraint was
    instantiated for (empty for unquantified constraints).
    """

    lhs: LinearExpression
    sense: ConstraintSense
    rhs: LinearExpression
    indices: tuple[tuple[str, Any], ...] = ()

    def __bool__(self):
        raise TypeError(
            "A constraint has no truth value; chained comparisons such as "
            "'a <= x <= b' must be written as two constraints"
        )

    def normalized(self) -> tuple[LinearExpression, float]:
        """Move every term left and the constant right.

        Returns:
            The variable part of ``lhs - rhs`` (constant zero) and the
            right-hand side, so that ``expr <sense> rhs`` holds.
        """
        difference = self.lhs - self.rhs
        return LinearExpression(difference._terms), -difference.constant

    @property
    def is_constant(self) -> bool:
        """True when no variable term survives after moving terms left."""
        expression, _ = self.normalized()
        return expression.is_constant

    def holds_trivially(self) -> bool:
        """Truth value of a constant constraint.

        Raises:
            ValueError: If the constraint references variables
        """
        expression, rhs = self.normalized()
        if not expression.is_constant:
            raise ValueError("Constraint references variables")
        return self.sense.holds(0.0, rhs)

    def with_indices(self, indices: Mapping[str, Any]) -> "Constraint":
        return Constraint(self.lhs, self.sense, self.rhs, tuple(indices.items()))

    def __repr__(self) -> str:
        return f"Constraint({format_constraint(self)})"


def format_constraint(constraint: Constraint, label=None) -> str:
    """Render a constraint as ``lhs <op> rhs``."""
    lhs = format_expression(constraint.lhs, label)
    rhs = format_expression(constraint.rhs, label)
    return f"{lhs} {constraint.sense.value} {rhs}"
