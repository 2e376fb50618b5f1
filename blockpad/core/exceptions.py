"""Document error classes.

Every failure of a document operation is reported with one of the exceptions
below. They are raised by the store and the operations layer and are caught
by the edit translator, which turns them into a failed ``EditResult``.
"""

from __future__ import annotations

from typing import Optional, Sequence

__all__ = [
    "DocumentError",
    "NotFoundError",
    "OutOfRangeError",
    "DuplicateIdError",
    "PositionMismatchError",
    "InvariantError",
]


class DocumentError(Exception):
    """Base exception for all document model errors.

    Parameters
    ----------
    message
        Human-readable summary.
    node_id
        Identifier of the node the failing call was about, if any.
    """

    def __init__(self, message: str, node_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.node_id = node_id

    def __str__(self) -> str:
        if self.node_id is not None:
            return f"[Node: {self.node_id}] {super().__str__()}"
        return super().__str__()


class NotFoundError(DocumentError):
    """Raised when a node id is not present in the document."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Node '{node_id}' not found", node_id)


class OutOfRangeError(DocumentError):
    """Raised when an insertion position lies outside ``[0, len(order)]``."""

    def __init__(self, position: int, length: int, node_id: Optional[str] = None) -> None:
        self.position = position
        self.length = length
        super().__init__(f"Position {position} outside [0, {length}]", node_id)


class DuplicateIdError(DocumentError):
    """Raised when inserting a node whose id is already in the document."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Node '{node_id}' already exists", node_id)


class PositionMismatchError(DocumentError):
    """Raised when a caller's cached position no longer points at its node.

    ``actual`` is the id found at ``position`` in the current order, or None
    when ``position`` is past the end.
    """

    def __init__(self, node_id: str, position: int, actual: Optional[str]) -> None:
        self.position = position
        self.actual = actual
        super().__init__(
            f"Expected node at position {position}, found {actual!r}", node_id
        )


class InvariantError(DocumentError):
    """Raised when a mutation would publish a structurally invalid document."""

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems = list(problems)
        super().__init__("Document invariant violated: " + "; ".join(self.problems))
