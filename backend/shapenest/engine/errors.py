"""Exception taxonomy for the shape engine.

An unstable placement is not an error: it is reported as a boolean or a
``StabilityReport``. Degenerate geometry never raises either.
"""

from __future__ import annotations


class ShapeNestError(Exception):
    """Base class for engine errors."""


class InvalidOperandError(ShapeNestError):
    """A polygon operation was given something that is not a polygon."""


class ShapeParamsError(ShapeNestError):
    """Construction parameters are missing, non-numeric or out of range."""

    def __init__(self, kind: str, fields: dict[str, str]) -> None:
        self.kind = kind
        self.fields = fields
        detail = ", ".join(f"{name}: {msg}" for name, msg in fields.items())
        super().__init__(f"Invalid {kind} parameters ({detail})")


class NodeNotFoundError(ShapeNestError, KeyError):
    """No node with the given id exists in the tree."""

    def __str__(self) -> str:
        return f"Unknown node: {self.args[0]!r}" if self.args else "Unknown node"


class EditorBusyError(ShapeNestError):
    """Another preview or transform edit must be finished first."""


class TreeInvariantError(ShapeNestError):
    """The requested change would break the tree's structure."""
