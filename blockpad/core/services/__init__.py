"""Document services: the named mutations and the key-event translator."""

from __future__ import annotations

from .document_operations import DocumentOperations  # noqa: F401
from .edit_translator import EditResult, EditTranslator, KeyEvent  # noqa: F401

__all__: list[str] = [
    "DocumentOperations",
    "EditTranslator",
    "EditResult",
    "KeyEvent",
]
