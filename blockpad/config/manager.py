"""Configuration loading and access helpers.

Each section (``editor``, ``logging``) is one YAML file. The copy shipped in
this package provides the defaults; a file of the same name in the user
configuration directory overrides it key by key at the top level.

User directory, in order of precedence:

- ``$BLOCKPAD_CONFIG_DIR``
- ``%LOCALAPPDATA%\\Blockpad\\config`` on Windows
- ``~/.blockpad`` elsewhere

Missing user files are seeded from the packaged defaults on first load, so
users have something to edit.
"""

from __future__ import annotations

import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager", "user_config_dir"]

_SECTIONS = {
    "editor": "editor.yml",
    "logging": "logging.yml",
}


def user_config_dir() -> Path:
    """Return the directory holding the user's override files."""
    override = os.environ.get("BLOCKPAD_CONFIG_DIR")
    if override:
        return Path(override)
    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Local"
        return root / "Blockpad" / "config"
    return Path.home() / ".blockpad"


def _packaged_text(filename: str) -> str:
    return resources.files(__package__).joinpath(filename).read_text(encoding="utf-8")


def _parse_mapping(text: str, source: str) -> Optional[Dict[str, Any]]:
    """Parse *text* as a YAML mapping.

    Returns None (and logs) when the YAML is invalid. A document that is
    empty or not a mapping yields an empty dict.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        logger.error("Config: invalid YAML in %s: %s", source, exc)
        return None
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Config: %s does not hold a mapping, ignored", source)
        return {}
    return data


def _seed_user_dir(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("Config: cannot create %s: %s", directory, exc)
        return
    for filename in _SECTIONS.values():
        target = directory / filename
        if target.exists():
            continue
        try:
            target.write_text(_packaged_text(filename), encoding="utf-8")
        except OSError as exc:
            logger.warning("Config: could not seed %s: %s", target, exc)
        else:
            logger.info("Config: seeded %s", target)


def _load_section(filename: str, directory: Path) -> Tuple[Dict[str, Any], str]:
    """Return the merged mapping for one section and a short status word."""
    merged: Dict[str, Any] = {}
    try:
        packaged = _parse_mapping(_packaged_text(filename), f"packaged {filename}")
    except OSError:
        logger.error("Config: packaged %s is missing", filename)
        packaged = None
    status = "defaults" if packaged is not None else "no-defaults"
    merged.update(packaged or {})

    user_file = directory / filename
    if user_file.exists():
        try:
            user = _parse_mapping(user_file.read_text(encoding="utf-8"), str(user_file))
        except OSError as exc:
            logger.error("Config: cannot read %s: %s", user_file, exc)
            user = None
        if user is not None:
            merged.update(user)
            status += "+user"
    return merged, status


class _Singleton(type):
    _instance: Optional["ConfigManager"] = None

    def __call__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__call__(*args, **kwargs)
        return cls._instance


class ConfigManager(metaclass=_Singleton):
    """Process-wide access to the configuration sections as dictionaries.

    Files are read once, on first instantiation. Call :meth:`reset` to make
    the next ``ConfigManager()`` read them again.
    """

    def __init__(self) -> None:
        directory = user_config_dir()
        _seed_user_dir(directory)
        self._sections: Dict[str, Dict[str, Any]] = {}
        statuses = []
        for name, filename in _SECTIONS.items():
            self._sections[name], status = _load_section(filename, directory)
            statuses.append(f"{name}={status}")
        logger.info("Config loaded from %s (%s)", directory, ", ".join(statuses))

    def get_section(self, name: str) -> Dict[str, Any]:
        return self._sections.get(name, {})

    def get_editor_config(self) -> Dict[str, Any]:
        return self.get_section("editor")

    def get_logging_config(self) -> Dict[str, Any]:
        return self.get_section("logging")

    @classmethod
    def reset(cls) -> None:
        """Forget the process-wide instance."""
        cls._instance = None
