"""Translate key events into document operations and focus movement.

The translator is a small state machine keyed by the key event, operating on
the node that held input focus when the event occurred:

- split (Enter): insert an empty paragraph after the focused node, then, one
  scheduling turn later, focus the new element.
- merge-backward (Backspace on an empty element): move focus to the end of
  the previous element, then remove the focused node.
- undo / redo (Meta+Z, Meta+Shift+Z): recognised, deliberately no-op.

Document errors never escape :meth:`EditTranslator.handle_key`; they abort the
current pass and are reported through a failed :class:`EditResult`, with
document and focus left as they were before the event.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from blockpad.core.exceptions import DocumentError, NotFoundError
from blockpad.core.interfaces import EditorView, Scheduler
from blockpad.core.models import Node, NodeType
from blockpad.core.services.document_operations import DocumentOperations
from blockpad.core.settings import KeyBindings

__all__ = ["KeyEvent", "EditResult", "EditTranslator"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyEvent:
    """A key press as delivered by the key-event source."""
    key: str
    meta_key: bool = False
    shift_key: bool = False


@dataclass(frozen=True)
class EditResult:
    """Outcome of handling one key event.

    Attributes
    ----------
    success
        False when the pass was aborted by a document error.
    handled
        Whether the translator recognised the event at all. Unhandled events
        are left to the editable surface (ordinary typing and deletion).
    prevent_default
        Whether the surface must suppress its own behaviour for the key.
    action
        "split", "merge_backward", "undo", "redo" or "none".
    message
        Human-readable summary suitable for logs.
    details
        Optional structured data (new node id, positions, error kind).
    """
    success: bool
    handled: bool
    prevent_default: bool
    action: str
    message: str
    details: Optional[Dict[str, Any]] = None


_UNHANDLED = EditResult(True, False, False, "none", "Key not handled.")


class EditTranslator:
    """Turn ``(KeyEvent, focused_id)`` into operations plus focus movement.

    Parameters
    ----------
    operations
        Operations bound to the store being edited.
    view
        Rendering layer, used for sibling lookup, content checks and focus.
    scheduler
        Runs the deferred focus after a split, once the view has mounted the
        new element.
    keys
        Key names for each branch.
    """

    def __init__(
        self,
        operations: DocumentOperations,
        view: EditorView,
        scheduler: Scheduler,
        keys: Optional[KeyBindings] = None,
    ) -> None:
        self.operations = operations
        self.store = operations.store
        self.view = view
        self.scheduler = scheduler
        self.keys = keys or KeyBindings()

    def handle_key(self, event: KeyEvent, focused_id: str) -> EditResult:
        if event.key == self.keys.split:
            return self._split(focused_id)

        if event.key == self.keys.merge_backward:
            return self._merge_backward(focused_id)

        if event.meta_key and event.key.lower() == self.keys.undo.lower():
            action = "redo" if event.shift_key else "undo"
            logger.debug("Edit noop: %s is not implemented focused=%s", action, focused_id)
            return EditResult(True, True, False, action, f"{action.capitalize()} is not implemented.", {"noop": True})

        return _UNHANDLED

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    def _split(self, focused_id: str) -> EditResult:
        logger.debug("Edit: split focused=%s", focused_id)
        try:
            index = self.store.index_of(focused_id)
            new_id = self.store.id_generator.next()
            self.operations.insert_node(Node(new_id, NodeType.PARAGRAPH, ""), index + 1)
        except DocumentError as exc:
            return self._aborted("split", focused_id, exc)

        self.scheduler.call_soon(lambda: self._focus_inserted(new_id))
        return EditResult(
            True, True, True, "split",
            "Inserted empty paragraph.",
            {"node_id": new_id, "position": index + 1},
        )

    def _merge_backward(self, focused_id: str) -> EditResult:
        try:
            content = self.view.element_text(focused_id)
        except KeyError:
            return self._aborted("merge_backward", focused_id, NotFoundError(focused_id))
        if content != "":
            return _UNHANDLED

        previous_id = self.view.previous_sibling(focused_id)
        if previous_id is None:
            logger.debug("Edit noop: merge_backward at first block focused=%s", focused_id)
            return EditResult(
                True, True, True, "merge_backward",
                "No previous block to merge into.",
                {"noop": True, "node_id": focused_id},
            )

        try:
            index = self.store.index_of(focused_id)
        except DocumentError as exc:
            return self._aborted("merge_backward", focused_id, exc)

        # Focus leaves the element before removal unmounts it
        self.view.focus(previous_id, "end")
        try:
            self.operations.remove_node(focused_id, index)
        except DocumentError as exc:
            self.view.focus(focused_id, "start")
            return self._aborted("merge_backward", focused_id, exc)

        return EditResult(
            True, True, True, "merge_backward",
            "Removed empty block.",
            {"node_id": focused_id, "position": index, "focused": previous_id},
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _focus_inserted(self, node_id: str) -> None:
        if not self.view.has_element(node_id):
            logger.info("Edit: deferred focus skipped, node=%s no longer rendered", node_id)
            return
        self.view.focus(node_id, "start")

    def _aborted(self, action: str, focused_id: str, exc: DocumentError) -> EditResult:
        logger.warning("Edit FAIL: %s focused=%s reason=%s", action, focused_id, exc)
        return EditResult(
            False, True, True, action,
            str(exc),
            {"node_id": focused_id, "error": type(exc).__name__},
        )
