"""Exceptions raised by trackstats."""

from collections.abc import Iterable


class InvalidFieldError(ValueError):
    """A field name that is not a recognized column for the operation."""

    def __init__(self, field: str, allowed: Iterable[str]) -> None:
        self.field = field
        self.allowed = frozenset(allowed)
        super().__init__(
            f"Unknown field {field!r}; expected one of: {', '.join(sorted(self.allowed))}"
        )
