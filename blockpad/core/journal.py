"""In-memory journal of the document operations applied during a session.

The journal is a debugging aid, not an undo history: entries can be listed,
dumped to JSON-compatible data and replayed through another
:class:`~blockpad.core.services.DocumentOperations`.

Entry payloads:

- ``set_text``:    ``{"node_id": str, "text": str}``
- ``insert_node``: ``{"node": {"id": str, "type": str, "text": str}, "position": int}``
- ``remove_node``: ``{"node_id": str, "position": int}``
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from blockpad.core.exceptions import DocumentError
from blockpad.core.models import Node

if TYPE_CHECKING:
    from blockpad.core.services.document_operations import DocumentOperations

__all__ = ["JournalEntry", "EditJournal"]


@dataclass
class JournalEntry:
    """One successfully applied operation.

    Attributes
    ----------
    operation
        ``"set_text"``, ``"insert_node"`` or ``"remove_node"``.
    details
        Operation payload, JSON-serializable.
    timestamp
        Unix time at which the operation was recorded.
    """
    operation: str
    details: Dict[str, Any]
    timestamp: float


class _InvalidPayload(Exception):
    pass


def _apply_set_text(ops: "DocumentOperations", details: Dict[str, Any]) -> None:
    node_id, text = details.get("node_id"), details.get("text")
    if not isinstance(node_id, str) or not node_id or not isinstance(text, str):
        raise _InvalidPayload
    ops.set_text(node_id, text)


def _apply_insert_node(ops: "DocumentOperations", details: Dict[str, Any]) -> None:
    node, position = _node_from_payload(details.get("node")), details.get("position")
    if node is None or not isinstance(position, int):
        raise _InvalidPayload
    ops.insert_node(node, position)


def _apply_remove_node(ops: "DocumentOperations", details: Dict[str, Any]) -> None:
    node_id, position = details.get("node_id"), details.get("position")
    if not isinstance(node_id, str) or not node_id or not isinstance(position, int):
        raise _InvalidPayload
    ops.remove_node(node_id, position)


_APPLIERS: Dict[str, Callable[["DocumentOperations", Dict[str, Any]], None]] = {
    "set_text": _apply_set_text,
    "insert_node": _apply_insert_node,
    "remove_node": _apply_remove_node,
}


class EditJournal:
    """Bounded list of :class:`JournalEntry`, oldest first.

    Parameters
    ----------
    max_entries : int, default=1000
        Once exceeded, the oldest entries are discarded. Values below 1 are
        treated as 1.
    """

    def __init__(self, max_entries: int = 1000) -> None:
        self._max_entries: int = max(1, int(max_entries))
        self._entries: List[JournalEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> List[JournalEntry]:
        return list(self._entries)

    def record_edit(self, operation: str, details: Dict[str, Any]) -> None:
        """Append an entry stamped with the current time.

        Payloads are stored as given and only checked on replay.
        """
        self._entries.append(JournalEntry(operation, dict(details), time.time()))
        self._trim()

    def clear_journal(self) -> None:
        self._entries.clear()

    def replay_edits(self, operations: "DocumentOperations") -> Dict[str, Any]:
        """Apply every entry, in order, through *operations*.

        Entries that cannot be applied (unknown operation, malformed payload,
        or a :class:`DocumentError` from the operation) are skipped and
        described in ``errors``; replay carries on with the next entry.

        Returns ``{"applied": int, "skipped": int, "errors": List[str]}``.
        """
        applied = 0
        errors: List[str] = []
        # Copied first: *operations* may record into this journal
        for idx, entry in enumerate(list(self._entries)):
            apply = _APPLIERS.get(entry.operation)
            if apply is None:
                errors.append(f"[{idx}] unsupported operation '{entry.operation}'")
                continue
            try:
                apply(operations, entry.details)
            except _InvalidPayload:
                errors.append(f"[{idx}] {entry.operation}: invalid payload {entry.details!r}")
            except DocumentError as exc:
                errors.append(f"[{idx}] {entry.operation} failed: {exc}")
            else:
                applied += 1
        return {"applied": applied, "skipped": len(errors), "errors": errors}

    def serialize(self) -> List[Dict[str, Any]]:
        """Return the entries as JSON-compatible dicts."""
        return [asdict(entry) for entry in self._entries]

    @classmethod
    def deserialize(cls, data: Any, max_entries: int = 1000) -> "EditJournal":
        """Rebuild a journal from :meth:`serialize` output.

        Items with a missing or mistyped field are dropped. Anything other
        than a list gives an empty journal.
        """
        journal = cls(max_entries=max_entries)
        for item in data if isinstance(data, list) else ():
            entry = _entry_from_dict(item)
            if entry is not None:
                journal._entries.append(entry)
        journal._trim()
        return journal

    def _trim(self) -> None:
        del self._entries[:-self._max_entries]


def _entry_from_dict(item: Any) -> Optional[JournalEntry]:
    if not isinstance(item, dict):
        return None
    operation, details, timestamp = item.get("operation"), item.get("details"), item.get("timestamp")
    if not isinstance(operation, str) or not isinstance(details, dict):
        return None
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        return None
    return JournalEntry(operation, details, float(timestamp))


def _node_from_payload(payload: Any) -> Optional[Node]:
    if not isinstance(payload, dict):
        return None
    node_id, text = payload.get("id"), payload.get("text", "")
    if not isinstance(node_id, str) or not node_id or not isinstance(text, str):
        return None
    try:
        return Node(node_id, payload.get("type", "paragraph"), text)
    except ValueError:
        return None
