"""mip-algebra - Algebraic modeling of mixed-integer linear programs."""

__version__ = "0.1.0"

from .algebra import (
    Constraint,
    ConstraintSense,
    IndexDomain,
    LinearExpression,
    ObjectiveSense,
    VariableFamily,
    VariableKind,
    sum_expr,
)
from .exceptions import (
    DuplicateVariableError,
    InvalidConstraintError,
    ModelingError,
    UnboundIndexError,
    UnknownVariableError,
)
from .model import Model
from .models.solution import Solution, SolutionRecord, SolutionStatus
from .snapshot import ModelSnapshot
from .solve import solve_model
from .solvers import SolverError

__all__ = [
    "Constraint",
    "ConstraintSense",
    "DuplicateVariableError",
    "IndexDomain",
    "InvalidConstraintError",
    "LinearExpression",
    "Model",
    "ModelSnapshot",
    "ModelingError",
    "ObjectiveSense",
    "Solution",
    "SolutionRecord",
    "SolutionStatus",
    "SolverError",
    "UnboundIndexError",
    "UnknownVariableError",
    "VariableFamily",
    "VariableKind",
    "solve_model",
    "sum_expr",
]
