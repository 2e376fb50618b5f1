"""Authoritative holder of the current document snapshot.

The store is the single shared mutable resource of the editor. Readers get
immutable :class:`~blockpad.core.models.Document` snapshots; the only write
path is :meth:`DocumentStore.apply_mutation`, which builds the next snapshot
from a draft and publishes it all-or-nothing.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple

from blockpad.core.exceptions import NotFoundError
from blockpad.core.ids import IdGenerator
from blockpad.core.models import Document, DocumentDraft, Node, validate_document

__all__ = ["DocumentStore", "Mutator", "Observer"]

logger = logging.getLogger(__name__)

Mutator = Callable[[DocumentDraft], None]
Observer = Callable[[Document, Document], None]


class DocumentStore:
    """Own the document snapshot, its id generator and its observers.

    Parameters
    ----------
    document
        Initial state. Defaults to an empty document. It must satisfy the
        structural invariants; an invalid seed raises ``InvariantError``.
    id_generator
        Generator used for new node ids. A fresh one is created when omitted.
        Either way it is advanced past the ids already in *document*.

    Examples
    --------
    >>> store = DocumentStore(Document.from_nodes([Node("a", NodeType.HEADING, "Title")]))
    >>> store.get_order()
    ('a',)
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        id_generator: Optional[IdGenerator] = None,
    ) -> None:
        document = document if document is not None else Document()
        validate_document(document)
        self._snapshot: Document = document
        self._observers: List[Observer] = []
        self._pending: Deque[Tuple[Document, Document]] = deque()
        self._notifying = False
        self.id_generator: IdGenerator = id_generator if id_generator is not None else IdGenerator()
        self.id_generator.skip_past(document.order)

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------
    @property
    def snapshot(self) -> Document:
        """The currently published document."""
        return self._snapshot

    def get_node(self, node_id: str) -> Node:
        try:
            return self._snapshot.nodes_by_id[node_id]
        except KeyError:
            raise NotFoundError(node_id) from None

    def get_order(self) -> Tuple[str, ...]:
        return self._snapshot.order

    def index_of(self, node_id: str) -> int:
        """Return the position of *node_id* in the current order."""
        try:
            return self._snapshot.order.index(node_id)
        except ValueError:
            raise NotFoundError(node_id) from None

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------
    def apply_mutation(self, mutator: Mutator) -> Document:
        """Run *mutator* on a draft and publish the result atomically.

        The draft is discarded if the mutator raises or if the resulting
        document violates an invariant; in both cases the exception propagates
        and the published snapshot is left untouched. On success observers are
        notified with ``(previous, current)`` and the new snapshot is returned.
        """
        draft = self._snapshot.thaw()
        mutator(draft)
        current = draft.freeze()
        validate_document(current)

        previous = self._snapshot
        self._snapshot = current
        logger.debug("Store: published snapshot size=%d", len(current))
        self._notify(previous, current)
        return current

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer* and return a callable that unregisters it.

        Observers are called with ``(previous, current)``. An observer may
        itself call :meth:`apply_mutation`; that change is delivered once the
        current one has reached every observer.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, previous: Document, current: Document) -> None:
        # Mutations made by an observer are delivered after the current
        # pair has reached every observer, so each sees snapshots in order
        self._pending.append((previous, current))
        if self._notifying:
            return
        self._notifying = True
        try:
            while self._pending:
                before, after = self._pending.popleft()
                for observer in list(self._observers):
                    try:
                        observer(before, after)
                    except Exception:
                        # Snapshot is already published; remaining observers still run
                        logger.exception("Store: observer %r failed", observer)
        finally:
            self._notifying = False
            self._pending.clear()
