"""Controller between the editor views and the document services."""

from __future__ import annotations

import logging
from typing import Optional

from blockpad.core.exceptions import DocumentError
from blockpad.core.journal import EditJournal
from blockpad.core.services.document_operations import DocumentOperations
from blockpad.core.services.edit_translator import EditResult, EditTranslator, KeyEvent

__all__ = ["EditorController"]

logger = logging.getLogger(__name__)


class EditorController:
    """Controller coordinating view events with the document services.

    The controller contains no UI toolkit code. Views call
    :meth:`handle_key` for key presses and :meth:`handle_input` when the user
    changed a block's text; both delegate to the services and never raise for
    routine document errors.

    Parameters
    ----------
    operations : DocumentOperations
        Operations bound to the edited store.
    translator : EditTranslator
        Key-event translator sharing the same operations.
    """

    def __init__(self, operations: DocumentOperations, translator: EditTranslator) -> None:
        self.operations = operations
        self.translator = translator

    @property
    def store(self):
        return self.operations.store

    @property
    def journal(self) -> Optional[EditJournal]:
        return self.operations.journal

    def handle_key(self, event: KeyEvent, focused_id: str) -> EditResult:
        result = self.translator.handle_key(event, focused_id)
        if result.handled:
            logger.debug(
                "Key %s on node=%s -> action=%s success=%s",
                event.key, focused_id, result.action, result.success,
            )
        return result

    def handle_input(self, node_id: str, text: str) -> bool:
        """Store text typed into *node_id*.

        Returns True if the document changed. Unchanged text is not written,
        so key releases that did not edit anything leave no journal entry.
        """
        try:
            if self.store.get_node(node_id).text == text:
                return False
            self.operations.set_text(node_id, text)
        except DocumentError as exc:
            logger.warning("Input dropped for node=%s: %s", node_id, exc)
            return False
        return True
