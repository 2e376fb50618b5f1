"""Controllers coordinating view events with the core services."""

from .editor_controller import EditorController

__all__ = ["EditorController"]
