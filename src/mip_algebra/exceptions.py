"""Exception classes for mip-algebra."""


class ModelingError(ValueError):
    """Structural error detected while building a model."""
    pass


class DuplicateVariableError(ModelingError):
    """A (name, index tuple) pair was declared twice."""

    def __init__(self, name: str, indices: tuple):
        self.name = name
        self.indices = indices
        super().__init__(f"Variable {name}{list(indices)} is already declared")


class UnknownVariableError(ModelingError, KeyError):
    """A variable key (or variable family) was referenced but never declared."""

    def __init__(self, name: str, indices: tuple | None = None):
        self.name = name
        self.indices = indices
        if indices is None:
            message = f"Unknown variable family: {name}"
        else:
            message = f"Unknown variable: {name}{list(indices)}"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class UnboundIndexError(ModelingError):
    """A filter or template refers to an index dimension that is not bound."""

    def __init__(self, index: str, available: tuple[str, ...] = ()):
        self.index = index
        self.available = tuple(available)
        bound = ", ".join(self.available) or "none"
        super().__init__(f"Index '{index}' is not bound (bound indices: {bound})")


class InvalidConstraintError(ModelingError):
    """A constraint reduced to a constant comparison that does not hold."""
    pass
