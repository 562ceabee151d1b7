"""Expression algebra and quantified generation over index domains."""

from .domain import Dimension, IndexDomain
from .expression import (
    Constraint,
    ConstraintSense,
    LinearExpression,
    ObjectiveSense,
    as_expression,
)
from .quantifiers import expand_constraints, sum_expr
from .variables import Variable, VariableFamily, VariableKind, VariableRegistry

__all__ = [
    "Constraint",
    "ConstraintSense",
    "Dimension",
    "IndexDomain",
    "LinearExpression",
    "ObjectiveSense",
    "Variable",
    "VariableFamily",
    "VariableKind",
    "VariableRegistry",
    "as_expression",
    "expand_constraints",
    "sum_expr",
]
