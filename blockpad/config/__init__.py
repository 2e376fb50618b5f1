"""Configuration files (YAML) and the manager that loads them.

`ConfigManager` reads the default files from this folder and merges them with
user overrides.
"""

from .manager import ConfigManager

__all__ = [
    "ConfigManager",
]
