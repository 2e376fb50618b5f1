"""Headless rendering of a document as editable HTML elements.

Each node becomes one ``<h1>`` (heading) or ``<p>`` (paragraph) element with a
``data-element-id`` attribute and ``contenteditable="true"``, in document
order under a single ``<div>``. Node text is treated as an HTML fragment, the
way a content-editable surface hands it back.

The view keeps itself in sync with a :class:`DocumentStore` by subscribing to
it, re-rendering only the elements whose node changed. It also tracks focus
and the caret, so it can stand in for a browser DOM when driving the
:class:`~blockpad.core.services.EditTranslator` without a GUI.
"""

from __future__ import annotations

import logging
from collections import Counter
from html import escape
from typing import Callable, Dict, List, Optional

from lxml import etree as ET
from lxml import html as LH

from blockpad.core.interfaces import CaretPosition
from blockpad.core.models import Document, Node, NodeType, diff_documents
from blockpad.core.store import DocumentStore

__all__ = ["HtmlDocumentView"]

logger = logging.getLogger(__name__)

_TAGS = {NodeType.HEADING: "h1", NodeType.PARAGRAPH: "p"}


class HtmlDocumentView:
    """lxml-backed view implementing :class:`~blockpad.core.interfaces.EditorView`.

    Parameters
    ----------
    store
        Store to render and follow.
    on_input
        Called with ``(node_id, html)`` when :meth:`input_text` simulates the
        user editing an element.

    Attributes
    ----------
    render_counts
        Number of times each node's element content was (re)rendered.
    focused_id
        Id of the element holding focus, or None.
    caret
        Caret offset inside the focused element's content.
    """

    def __init__(
        self,
        store: DocumentStore,
        on_input: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        self.on_input = on_input
        self.render_counts: Counter = Counter()
        self.focused_id: Optional[str] = None
        self.caret: int = 0

        self._root = ET.Element("div")
        self._elements: Dict[str, ET._Element] = {}
        self._order: List[str] = []

        self._mount_all(store.snapshot)
        self._unsubscribe = store.subscribe(self._on_document_changed)

    # ------------------------------------------------------------------
    # EditorView
    # ------------------------------------------------------------------
    def element_text(self, node_id: str) -> str:
        return _inner_html(self._elements[node_id])

    def previous_sibling(self, node_id: str) -> Optional[str]:
        index = self._order.index(node_id)
        return self._order[index - 1] if index > 0 else None

    def next_sibling(self, node_id: str) -> Optional[str]:
        index = self._order.index(node_id)
        return self._order[index + 1] if index + 1 < len(self._order) else None

    def has_element(self, node_id: str) -> bool:
        return node_id in self._elements

    def focus(self, node_id: str, caret: CaretPosition = "end") -> None:
        content = self.element_text(node_id)
        self.focused_id = node_id
        self.caret = 0 if caret == "start" else len(content)

    # ------------------------------------------------------------------
    # Simulated user interaction and inspection
    # ------------------------------------------------------------------
    def input_text(self, node_id: str, html: str) -> None:
        """Replace an element's content as typing would, then report it."""
        _fill(self._elements[node_id], html)
        if self.focused_id == node_id:
            self.caret = len(html)
        if self.on_input is not None:
            self.on_input(node_id, html)

    @property
    def rendered_order(self) -> List[str]:
        return list(self._order)

    def to_html(self) -> str:
        return ET.tostring(self._root, method="html", encoding="unicode")

    def close(self) -> None:
        """Stop following the store."""
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def _mount_all(self, document: Document) -> None:
        for node in document.nodes():
            element = self._create_element(node)
            self._elements[node.id] = element
            self._root.append(element)
        self._order = list(document.order)

    def _create_element(self, node: Node) -> ET._Element:
        element = ET.Element(_TAGS[node.type])
        element.set("data-element-id", node.id)
        element.set("contenteditable", "true")
        _fill(element, node.text)
        self.render_counts[node.id] += 1
        return element

    def _on_document_changed(self, previous: Document, current: Document) -> None:
        change = diff_documents(previous, current)
        if change.is_empty:
            return

        for node_id in change.removed:
            element = self._elements.pop(node_id)
            self._root.remove(element)
            if self.focused_id == node_id:
                logger.debug("View: focused element %s unmounted", node_id)
                self.focused_id = None
                self.caret = 0

        for node_id in change.inserted:
            self._elements[node_id] = self._create_element(current.nodes_by_id[node_id])

        for node_id in change.updated:
            node = current.nodes_by_id[node_id]
            element = self._elements[node_id]
            # Content already shown (typed by the user): nothing to redraw
            if _inner_html(element) == node.text:
                continue
            _fill(element, node.text)
            self.render_counts[node_id] += 1

        if change.order_changed or change.inserted:
            for node_id in current.order:
                self._root.append(self._elements[node_id])
            self._order = list(current.order)


def _fill(element: ET._Element, html: str) -> None:
    """Replace the children and text of *element* with the fragment *html*."""
    for child in list(element):
        element.remove(child)
    element.text = None
    if not html.strip():
        element.text = html or None
        return
    try:
        fragments = LH.fragments_fromstring(html)
    except (ET.ParserError, ValueError):
        element.text = html
        return
    for fragment in fragments:
        if isinstance(fragment, str):
            if len(element):
                last = element[-1]
                last.tail = (last.tail or "") + fragment
            else:
                element.text = (element.text or "") + fragment
        else:
            element.append(fragment)


def _inner_html(element: ET._Element) -> str:
    """Serialize the content of *element* the way ``innerHTML`` reads it."""
    parts = [escape(element.text or "", quote=False)]
    for child in element:
        parts.append(ET.tostring(child, method="html", encoding="unicode", with_tail=True))
    return "".join(parts)
