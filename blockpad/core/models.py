"""Shared data structures used across the Blockpad core.

This module is intentionally free of UI / I/O code so that the contained
objects can be reused in any context (unit-tests, headless views, Tk GUI).

A :class:`Document` is an immutable snapshot. Writers never touch it; they
receive a :class:`DocumentDraft` from the store, mutate it, and the store
freezes the draft into the next snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from blockpad.core.exceptions import InvariantError

__all__ = [
    "NodeType",
    "Node",
    "Document",
    "DocumentDraft",
    "DocumentChange",
    "find_problems",
    "validate_document",
    "diff_documents",
]


class NodeType(str, Enum):
    """Block variants. Only affects presentation, never structure."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class Node:
    """A single block of content.

    Attributes
    ----------
    id
        Opaque unique identifier, fixed for the node's lifetime.
    type
        Heading or paragraph.
    text
        Content as produced by the editable surface; may contain markup and is
        treated as opaque text by the core.
    """

    id: str
    type: NodeType = NodeType.PARAGRAPH
    text: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.type, NodeType):
            # Accept plain strings ("heading") from config or journal payloads
            object.__setattr__(self, "type", NodeType(self.type))

    def with_text(self, text: str) -> "Node":
        """Return a copy of this node carrying *text*."""
        return replace(self, text=text)


@dataclass(frozen=True)
class Document:
    """Immutable snapshot of the whole document.

    Attributes
    ----------
    nodes_by_id
        Read-only mapping of node id to :class:`Node`.
    order
        Top-level reading/render order of node ids.
    """

    nodes_by_id: Mapping[str, Node] = field(default_factory=lambda: MappingProxyType({}))
    order: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.nodes_by_id, MappingProxyType):
            object.__setattr__(self, "nodes_by_id", MappingProxyType(dict(self.nodes_by_id)))
        if not isinstance(self.order, tuple):
            object.__setattr__(self, "order", tuple(self.order))

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def from_nodes(cls, nodes: Iterable[Node]) -> "Document":
        """Build a document whose order follows *nodes*."""
        nodes = list(nodes)
        return cls(
            nodes_by_id={node.id: node for node in nodes},
            order=tuple(node.id for node in nodes),
        )

    def nodes(self) -> List[Node]:
        """Return nodes in document order."""
        return [self.nodes_by_id[node_id] for node_id in self.order]

    def thaw(self) -> "DocumentDraft":
        """Return a mutable draft copy of this snapshot."""
        return DocumentDraft(nodes_by_id=dict(self.nodes_by_id), order=list(self.order))

    def __len__(self) -> int:
        return len(self.order)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes_by_id


@dataclass
class DocumentDraft:
    """Mutable working copy of a :class:`Document` handed to mutators."""

    nodes_by_id: Dict[str, Node] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)

    def freeze(self) -> Document:
        return Document(nodes_by_id=dict(self.nodes_by_id), order=tuple(self.order))


def find_problems(nodes_by_id: Mapping[str, Node], order: Iterable[str]) -> List[str]:
    """Return a list of invariant violations (empty when the document is valid)."""
    problems: List[str] = []
    seen = set()
    for node_id in order:
        if node_id in seen:
            problems.append(f"duplicate id {node_id!r} in order")
        seen.add(node_id)
        if node_id not in nodes_by_id:
            problems.append(f"id {node_id!r} in order has no node")
    for key, node in nodes_by_id.items():
        if key not in seen:
            problems.append(f"orphan node {key!r} not in order")
        if node.id != key:
            problems.append(f"node keyed {key!r} carries id {node.id!r}")
    return problems


def validate_document(document: Document) -> None:
    """Raise :class:`InvariantError` if *document* breaks a structural invariant."""
    problems = find_problems(document.nodes_by_id, document.order)
    if problems:
        raise InvariantError(problems)


@dataclass(frozen=True)
class DocumentChange:
    """What changed between two snapshots, as seen by a rendering layer."""

    inserted: Tuple[str, ...] = ()
    removed: Tuple[str, ...] = ()
    updated: Tuple[str, ...] = ()
    order_changed: bool = False

    @property
    def is_empty(self) -> bool:
        return not (self.inserted or self.removed or self.updated or self.order_changed)


def diff_documents(previous: Document, current: Document) -> DocumentChange:
    """Compare two snapshots.

    Nodes are compared by identity first: a node object carried over
    unchanged from the previous draft is never reported as updated.
    """
    before = previous.nodes_by_id
    after = current.nodes_by_id
    inserted = tuple(node_id for node_id in current.order if node_id not in before)
    removed = tuple(node_id for node_id in previous.order if node_id not in after)
    updated = tuple(
        node_id
        for node_id in current.order
        if node_id in before and before[node_id] is not after[node_id] and before[node_id] != after[node_id]
    )
    return DocumentChange(
        inserted=inserted,
        removed=removed,
        updated=updated,
        order_changed=previous.order != current.order,
    )
