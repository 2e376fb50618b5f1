"""Tkinter rendering of a document: one ``tk.Text`` per block.

Also maps Tk key events to :class:`~blockpad.core.services.KeyEvent` and
provides :class:`TkScheduler`, which runs deferred focus moves once Tk is
idle.
"""

from __future__ import annotations

import logging
import sys
import tkinter as tk
from tkinter import font as tkfont
from tkinter import ttk
from typing import Callable, Dict, List, Optional

from blockpad.core.interfaces import CaretPosition
from blockpad.core.models import Document, Node, NodeType, diff_documents
from blockpad.core.services.edit_translator import EditResult, KeyEvent
from blockpad.core.store import DocumentStore

__all__ = ["BlockEditorView", "TkScheduler", "key_event_from_tk"]

logger = logging.getLogger(__name__)

# Tk event.state modifier bits
_SHIFT_MASK = 0x0001
_CONTROL_MASK = 0x0004
_MOD1_MASK = 0x0008  # Command on macOS

_KEYSYM_NAMES = {
    "Return": "Enter",
    "KP_Enter": "Enter",
    "BackSpace": "Backspace",
}

_WRAP_CHARS = 90


def key_event_from_tk(event: "tk.Event") -> KeyEvent:
    """Map a Tk ``<KeyPress>`` event to a :class:`KeyEvent`.

    The platform's primary shortcut modifier (Command on macOS, Control
    elsewhere) is reported as ``meta_key``.
    """
    state = int(getattr(event, "state", 0) or 0)
    meta_mask = _MOD1_MASK if sys.platform == "darwin" else _CONTROL_MASK
    keysym = str(getattr(event, "keysym", "") or "")
    return KeyEvent(
        key=_KEYSYM_NAMES.get(keysym, keysym),
        meta_key=bool(state & meta_mask),
        shift_key=bool(state & _SHIFT_MASK),
    )


class TkScheduler:
    """Scheduler running continuations once Tk is idle, after pending redraws."""

    def __init__(self, widget: tk.Misc) -> None:
        self._widget = widget

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._widget.after_idle(callback)


class BlockEditorView(ttk.Frame):
    """Tkinter view rendering one ``tk.Text`` per document block.

    Parameters
    ----------
    master : tk.Widget
        Parent Tkinter widget.
    store : DocumentStore
        Store to render and follow.
    on_key : Optional[Callable[[KeyEvent, str], EditResult]]
        Called for every key press with the id of the block that has focus.
        When the result asks to prevent the default, the key is swallowed.
    on_input : Optional[Callable[[str, str], None]]
        Called with ``(node_id, text)`` after a key release changed a block.

    Notes
    -----
    - Only blocks whose node changed are redrawn after a mutation.
    - Callbacks are invoked inside try/except blocks to avoid raising into
      the Tkinter mainloop.
    """

    def __init__(
        self,
        master: "tk.Widget",
        store: DocumentStore,
        *,
        on_key: Optional[Callable[[KeyEvent, str], EditResult]] = None,
        on_input: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        super().__init__(master)
        self.on_key = on_key
        self.on_input = on_input

        base = tkfont.nametofont("TkTextFont")
        self._fonts = {
            NodeType.PARAGRAPH: base,
            NodeType.HEADING: tkfont.Font(self, family=base.cget("family"), size=base.cget("size") + 8, weight="bold"),
        }

        self._widgets: Dict[str, tk.Text] = {}
        self._order: List[str] = []

        for node in store.snapshot.nodes():
            self._widgets[node.id] = self._create_widget(node)
        self._order = list(store.snapshot.order)
        self._repack()

        self._unsubscribe = store.subscribe(self._on_document_changed)
        self.bind("<Destroy>", self._on_destroy, add="+")

    # ---------------------------------------------------------------------
    # EditorView
    # ---------------------------------------------------------------------
    def element_text(self, node_id: str) -> str:
        return self._widgets[node_id].get("1.0", "end-1c")

    def previous_sibling(self, node_id: str) -> Optional[str]:
        index = self._order.index(node_id)
        return self._order[index - 1] if index > 0 else None

    def next_sibling(self, node_id: str) -> Optional[str]:
        index = self._order.index(node_id)
        return self._order[index + 1] if index + 1 < len(self._order) else None

    def has_element(self, node_id: str) -> bool:
        return node_id in self._widgets

    def focus(self, node_id: str, caret: CaretPosition = "end") -> None:
        widget = self._widgets[node_id]
        widget.focus_set()
        widget.mark_set(tk.INSERT, "1.0" if caret == "start" else "end-1c")
        widget.see(tk.INSERT)

    # ---------------------------------------------------------------------
    # Public helpers
    # ---------------------------------------------------------------------
    def focused_id(self) -> Optional[str]:
        """Return the id of the block whose widget has keyboard focus."""
        current = self.focus_get()
        for node_id, widget in self._widgets.items():
            if widget is current:
                return node_id
        return None

    # ---------------------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------------------
    def _create_widget(self, node: Node) -> tk.Text:
        widget = tk.Text(
            self,
            wrap="word",
            undo=False,
            borderwidth=0,
            highlightthickness=0,
            padx=4,
            pady=4,
            font=self._fonts[node.type],
        )
        self._set_content(widget, node.text)
        widget.bind("<KeyPress>", lambda e, nid=node.id: self._on_key_press(e, nid), add="+")
        widget.bind("<KeyRelease>", lambda e, nid=node.id: self._on_key_release(nid), add="+")
        return widget

    def _set_content(self, widget: tk.Text, text: str) -> None:
        widget.delete("1.0", tk.END)
        widget.insert("1.0", text)
        self._fit_height(widget, text)

    @staticmethod
    def _fit_height(widget: tk.Text, text: str) -> None:
        lines = sum(1 + len(line) // _WRAP_CHARS for line in text.split("\n"))
        widget.configure(height=max(1, lines))

    def _repack(self) -> None:
        for widget in self._widgets.values():
            widget.pack_forget()
        for node_id in self._order:
            self._widgets[node_id].pack(side=tk.TOP, fill=tk.X, padx=8, pady=2)

    def _on_document_changed(self, previous: Document, current: Document) -> None:
        change = diff_documents(previous, current)
        if change.is_empty:
            return

        for node_id in change.removed:
            self._widgets.pop(node_id).destroy()

        for node_id in change.inserted:
            self._widgets[node_id] = self._create_widget(current.nodes_by_id[node_id])

        for node_id in change.updated:
            node = current.nodes_by_id[node_id]
            widget = self._widgets[node_id]
            if widget.get("1.0", "end-1c") != node.text:
                self._set_content(widget, node.text)

        if change.order_changed:
            self._order = list(current.order)
            self._repack()

    # ---------------------------------------------------------------------
    # Event handlers
    # ---------------------------------------------------------------------
    def _on_key_press(self, event: "tk.Event", node_id: str) -> Optional[str]:
        if self.on_key is None:
            return None
        try:
            result = self.on_key(key_event_from_tk(event), node_id)
        except Exception:
            logger.exception("View: key handler failed node=%s", node_id)
            return None
        return "break" if result.prevent_default else None

    def _on_key_release(self, node_id: str) -> None:
        widget = self._widgets.get(node_id)
        if widget is None or self.on_input is None:
            return
        text = widget.get("1.0", "end-1c")
        self._fit_height(widget, text)
        try:
            self.on_input(node_id, text)
        except Exception:
            logger.exception("View: input handler failed node=%s", node_id)

    def _on_destroy(self, event: "tk.Event") -> None:
        if event.widget is self:
            self._unsubscribe()
