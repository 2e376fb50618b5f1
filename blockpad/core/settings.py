"""Typed view of the ``editor`` configuration section."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

__all__ = ["KeyBindings", "SeedSettings", "EditorSettings"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyBindings:
    """Key names (as carried by ``KeyEvent.key``) for each translator branch."""
    split: str = "Enter"
    merge_backward: str = "Backspace"
    undo: str = "z"


@dataclass(frozen=True)
class SeedSettings:
    """Size of the sample document the desktop app starts with."""
    headings: int = 50
    min_paragraphs: int = 3
    max_paragraphs: int = 10


@dataclass(frozen=True)
class EditorSettings:
    keys: KeyBindings = field(default_factory=KeyBindings)
    seed: SeedSettings = field(default_factory=SeedSettings)
    journal_max_entries: int = 1000
    theme: str = "light"
    window_width: int = 800
    window_height: int = 900

    @classmethod
    def from_config(cls, data: Optional[Mapping[str, Any]]) -> "EditorSettings":
        """Build settings from the ``editor.yml`` mapping.

        Unknown keys are ignored; values that cannot be converted keep their
        defaults and are logged.
        """
        data = data or {}
        keys_cfg: Dict[str, Any] = dict(data.get("keys") or {})
        seed_cfg: Dict[str, Any] = dict(data.get("seed") or {})
        journal_cfg: Dict[str, Any] = dict(data.get("journal") or {})
        ui_cfg: Dict[str, Any] = dict(data.get("ui") or {})

        defaults = cls()
        keys = KeyBindings(
            split=str(keys_cfg.get("split", defaults.keys.split)),
            merge_backward=str(keys_cfg.get("merge_backward", defaults.keys.merge_backward)),
            undo=str(keys_cfg.get("undo", defaults.keys.undo)),
        )
        seed = SeedSettings(
            headings=_as_int(seed_cfg, "headings", defaults.seed.headings),
            min_paragraphs=_as_int(seed_cfg, "min_paragraphs", defaults.seed.min_paragraphs),
            max_paragraphs=_as_int(seed_cfg, "max_paragraphs", defaults.seed.max_paragraphs),
        )
        return cls(
            keys=keys,
            seed=seed,
            journal_max_entries=_as_int(journal_cfg, "max_entries", defaults.journal_max_entries),
            theme=str(ui_cfg.get("theme", defaults.theme)),
            window_width=_as_int(ui_cfg, "window_width", defaults.window_width),
            window_height=_as_int(ui_cfg, "window_height", defaults.window_height),
        )


def _as_int(section: Mapping[str, Any], key: str, default: int) -> int:
    if key not in section:
        return default
    try:
        return int(section[key])
    except (TypeError, ValueError):
        logger.warning("Config: invalid integer for %s=%r, using %d", key, section[key], default)
        return default
