"""Errors raised by the Manhattan plotting pipeline."""

from typing import Optional, Sequence


class ManhattanError(Exception):
    """Base class for pipeline errors."""


class MalformedInput(ManhattanError):
    """Input table is missing metadata columns or holds unusable values."""

    def __init__(self, message: str, column: Optional[str] = None, rows: Sequence = ()):
        self.column = column
        self.rows = list(rows)
        super().__init__(message)


class InvalidSelectionSize(ManhattanError):
    """Requested trait count cannot be satisfied by the available traits."""

    def __init__(self, requested, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Cannot select {requested!r} traits: expected an integer between 1 and {available}"
        )


class UnknownTraitName(ManhattanError):
    """A trait name does not match any score column."""

    def __init__(self, trait: str, known: Sequence[str] = ()):
        self.trait = trait
        self.known = list(known)
        preview = ", ".join(self.known[:10])
        more = f" (+{len(self.known) - 10} more)" if len(self.known) > 10 else ""
        super().__init__(f"Unknown trait {trait!r}; available traits: {preview}{more}")
