"""Service layer for the three document mutations.

Each operation validates its preconditions against the draft it is given by
:meth:`DocumentStore.apply_mutation`, so the check and the change happen on
the same state and either both take effect or neither does.

Scope and guarantees:
- Operates purely in-memory on a DocumentStore, no file I/O nor UI imports.
- Invalid calls raise a :class:`~blockpad.core.exceptions.DocumentError`
  subclass and leave the published snapshot untouched.
- Successful calls are recorded in the optional :class:`EditJournal`.

Examples
--------
Basic usage:

    ops = DocumentOperations(store)
    ops.insert_node(Node(store.id_generator.next()), len(store.get_order()))
    ops.set_text("3", "Hello")

"""

from __future__ import annotations

import logging
from typing import Optional

from blockpad.core.exceptions import (
    DuplicateIdError,
    NotFoundError,
    OutOfRangeError,
    PositionMismatchError,
)
from blockpad.core.journal import EditJournal
from blockpad.core.models import DocumentDraft, Node
from blockpad.core.store import DocumentStore

__all__ = ["DocumentOperations"]

logger = logging.getLogger(__name__)


class DocumentOperations:
    """Named mutations on a :class:`DocumentStore`.

    Parameters
    ----------
    store
        Store the operations write to.
    journal
        Optional journal; every successful operation is appended to it.
    """

    def __init__(self, store: DocumentStore, journal: Optional[EditJournal] = None) -> None:
        self.store = store
        self.journal = journal

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def set_text(self, node_id: str, text: str) -> None:
        """Replace the text of *node_id*. Order is not touched."""
        logger.debug("Edit: set_text node=%s length=%d", node_id, len(text))

        def mutate(draft: DocumentDraft) -> None:
            node = draft.nodes_by_id.get(node_id)
            if node is None:
                raise NotFoundError(node_id)
            draft.nodes_by_id[node_id] = node.with_text(text)

        try:
            self.store.apply_mutation(mutate)
        except NotFoundError:
            logger.warning("Edit FAIL: set_text node_not_found node=%s", node_id)
            raise
        self._record("set_text", {"node_id": node_id, "text": text})

    def insert_node(self, node: Node, position: int) -> None:
        """Insert *node* so that it ends up at index *position* of the order.

        Raises
        ------
        OutOfRangeError
            If *position* is outside ``[0, len(order)]``.
        DuplicateIdError
            If a node with the same id is already present.
        """
        logger.info("Edit: insert_node node=%s type=%s position=%d", node.id, node.type.value, position)

        def mutate(draft: DocumentDraft) -> None:
            if not 0 <= position <= len(draft.order):
                raise OutOfRangeError(position, len(draft.order), node.id)
            if node.id in draft.nodes_by_id:
                raise DuplicateIdError(node.id)
            draft.order.insert(position, node.id)
            draft.nodes_by_id[node.id] = node

        try:
            self.store.apply_mutation(mutate)
        except (OutOfRangeError, DuplicateIdError) as exc:
            logger.warning("Edit FAIL: insert_node node=%s reason=%s", node.id, exc)
            raise
        logger.info("Edit OK: insert_node node=%s position=%d", node.id, position)
        self._record(
            "insert_node",
            {"node": {"id": node.id, "type": node.type.value, "text": node.text}, "position": position},
        )

    def remove_node(self, node_id: str, position: int) -> None:
        """Remove *node_id*, which the caller expects at *position*.

        The position comes from a snapshot the caller read earlier; if the
        current order no longer holds *node_id* there, nothing is removed.

        Raises
        ------
        PositionMismatchError
            If ``order[position] != node_id`` (including out-of-range positions).
        """
        logger.info("Edit: remove_node node=%s position=%d", node_id, position)

        def mutate(draft: DocumentDraft) -> None:
            actual = draft.order[position] if 0 <= position < len(draft.order) else None
            if actual != node_id:
                raise PositionMismatchError(node_id, position, actual)
            del draft.order[position]
            del draft.nodes_by_id[node_id]

        try:
            self.store.apply_mutation(mutate)
        except PositionMismatchError as exc:
            logger.warning("Edit FAIL: remove_node stale_position node=%s position=%d found=%r",
                           node_id, position, exc.actual)
            raise
        logger.info("Edit OK: remove_node node=%s position=%d", node_id, position)
        self._record("remove_node", {"node_id": node_id, "position": position})

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _record(self, operation: str, details: dict) -> None:
        if self.journal is not None:
            self.journal.record_edit(operation, details)
