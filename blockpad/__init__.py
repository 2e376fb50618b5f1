"""Top-level package for Blockpad, a minimal block-based document editor.

The business logic lives in :mod:`blockpad.core` and is GUI-agnostic.
Front-ends (the headless HTML view, the Tk GUI) should only depend on the
public API exposed here rather than importing internal modules directly.
"""

from .core.models import Document, Node, NodeType  # re-export for convenience
from .core.store import DocumentStore

__all__: list[str] = [
    "Document",
    "DocumentStore",
    "Node",
    "NodeType",
]
