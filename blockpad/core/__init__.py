"""GUI-agnostic document model and structural-edit engine."""

from .exceptions import (  # noqa: F401
    DocumentError,
    DuplicateIdError,
    InvariantError,
    NotFoundError,
    OutOfRangeError,
    PositionMismatchError,
)
from .ids import IdGenerator  # noqa: F401
from .models import Document, DocumentDraft, Node, NodeType  # noqa: F401
from .store import DocumentStore  # noqa: F401

__all__: list[str] = [
    "Document",
    "DocumentDraft",
    "DocumentError",
    "DocumentStore",
    "DuplicateIdError",
    "IdGenerator",
    "InvariantError",
    "Node",
    "NodeType",
    "NotFoundError",
    "OutOfRangeError",
    "PositionMismatchError",
]
