"""Quantified constructs: sums and constraint families over index domains."""

from collections.abc import Callable, Iterator
from typing import Any

import numpy as np

from ..exceptions import InvalidConstraintError
from ..utils.logger import get_logger
from .domain import IndexDomain, call_with_indices, check_bindable
from .expression import Constraint, LinearExpression, format_constraint

logger = get_logger(__name__)


def instantiate(template: Any, domain: IndexDomain) -> Iterator[tuple[dict[str, Any], Any]]:
    """Evaluate ``template`` once per accepted tuple of ``domain``.

    Callable templates receive the bound index values their parameters
    name; any other value is used unchanged for every tuple.

    Yields:
        ``(binding, value)`` pairs in resolver order
    """
    if callable(template):
        check_bindable(template, domain.names)
        for binding in domain.bindings():
            yield binding, call_with_indices(template, binding)
    else:
        for binding in domain.bindings():
            yield binding, template


def sum_expr(template: Any, *filters: Any, **dimensions: Any) -> LinearExpression:
    """Sum ``template`` over an index domain.

    The domain is given the same way as for every builder verb: keyword
    dimensions in order, positional filter callables, or an explicit
    ``IndexDomain``::

        sum_expr(lambda i: cost[i] * x[i], i=range(n))
        sum_expr(lambda i, j: x[i, j], lambda i, j: i != j, i=range(n), j=range(n))

    An empty domain yields the zero expression.
    """
    domain = IndexDomain.from_arguments(filters, dimensions)
    return LinearExpression.sum(value for _, value in instantiate(template, domain))


def expand_constraints(
    template: Callable[..., Constraint] | Constraint, domain: IndexDomain
) -> list[Constraint]:
    """Instantiate a constraint template once per accepted tuple.

    Constraints that reduce to a true constant comparison are dropped.

    Raises:
        InvalidConstraintError: If an instance reduces to a false constant
            comparison
        TypeError: If the template does not produce a ``Constraint``
    """
    constraints = []
    dropped = 0
    for binding, constraint in instantiate(template, domain):
        # Comparing two plain numbers already produced a bool
        if isinstance(constraint, (bool, np.bool_)):
            if not constraint:
                where = f" for {binding}" if binding else ""
                raise InvalidConstraintError(f"Constant comparison is false{where}")
            dropped += 1
            continue
        if not isinstance(constraint, Constraint):
            raise TypeError(
                "Constraint template must produce a comparison such as 'lhs <= rhs', "
                f"got {type(constraint).__name__}"
            )
        if constraint.is_constant:
            if not constraint.holds_trivially():
                where = f" for {binding}" if binding else ""
                raise InvalidConstraintError(
                    f"Constraint {format_constraint(constraint)} can never hold{where}"
                )
            dropped += 1
            continue
        constraints.append(constraint.with_indices(binding))

    if dropped:
        logger.debug(f"Dropped {dropped} trivially satisfied constraint(s)")
    return constraints
