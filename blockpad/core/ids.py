"""Node identifier allocation."""

from __future__ import annotations

import itertools
from typing import Iterable

__all__ = ["IdGenerator"]


class IdGenerator:
    """Hands out unique, monotonically increasing node ids (``"0"``, ``"1"``, ...).

    One instance is owned by each :class:`~blockpad.core.store.DocumentStore`.
    Ids are never reused for the lifetime of the generator.
    """

    def __init__(self, start: int = 0) -> None:
        self._counter = itertools.count(max(0, int(start)))
        self._last = max(0, int(start)) - 1

    def next(self) -> str:
        """Return a new id distinct from every id returned before."""
        self._last = next(self._counter)
        return str(self._last)

    def skip_past(self, ids: Iterable[str]) -> None:
        """Advance the counter beyond any numeric id in *ids*.

        Used when a store is seeded with a pre-built document so that freshly
        allocated ids can never collide with existing ones.
        """
        highest = self._last
        for node_id in ids:
            if isinstance(node_id, str) and node_id.isdecimal() and node_id.isascii():
                highest = max(highest, int(node_id))
        if highest > self._last:
            self._counter = itertools.count(highest + 1)
            self._last = highest
