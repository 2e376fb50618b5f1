"""Interface definitions at the edge of the core.

The core never renders anything and never owns an event loop. These
protocols describe what it needs from the rendering layer and from the host
scheduler; ``blockpad.ui`` provides the implementations.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Literal, Optional, Protocol, runtime_checkable

__all__ = ["CaretPosition", "EditorView", "Scheduler", "DeferredCallQueue"]

logger = logging.getLogger(__name__)

CaretPosition = Literal["start", "end"]


@runtime_checkable
class EditorView(Protocol):
    """Rendering layer as seen by the edit translator.

    A view renders one editable element per id of the store's order and keeps
    track of which element holds input focus.
    """

    def element_text(self, node_id: str) -> str:
        """Return the rendered content of the element bound to *node_id*.

        Raises ``KeyError`` if no such element is mounted.
        """
        ...

    def previous_sibling(self, node_id: str) -> Optional[str]:
        """Return the id of the element rendered right before *node_id*, if any."""
        ...

    def next_sibling(self, node_id: str) -> Optional[str]:
        """Return the id of the element rendered right after *node_id*, if any."""
        ...

    def has_element(self, node_id: str) -> bool:
        """Return True if an element for *node_id* is currently mounted."""
        ...

    def focus(self, node_id: str, caret: CaretPosition = "end") -> None:
        """Give input focus to *node_id* and collapse the caret at *caret*."""
        ...


@runtime_checkable
class Scheduler(Protocol):
    """Runs continuations after the current rendering pass has committed."""

    def call_soon(self, callback: Callable[[], None]) -> None:
        ...


class DeferredCallQueue:
    """FIFO scheduler for headless use and tests.

    Callbacks queued with :meth:`call_soon` run on the next
    :meth:`run_pending`, in the order they were queued. Nothing is ever
    cancelled; callbacks queued while draining run in the same drain.
    """

    def __init__(self) -> None:
        self._pending: Deque[Callable[[], None]] = deque()

    def __len__(self) -> int:
        return len(self._pending)

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    def run_pending(self) -> int:
        """Run all queued callbacks and return how many ran."""
        ran = 0
        while self._pending:
            callback = self._pending.popleft()
            ran += 1
            try:
                callback()
            except Exception:
                logger.exception("Scheduler: deferred callback %r failed", callback)
        return ran
