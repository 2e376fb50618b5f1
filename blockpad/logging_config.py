"""Central logging configuration for Blockpad.

Call :func:`setup_logging` once, before the GUI is created.

Environment variables:

- ``BLOCKPAD_LOG_DIR``: directory for ``app.log`` (default ``logs``)
- ``BLOCKPAD_DEBUG_EDITS``: truthy value switches the store, operations and
  translator loggers to DEBUG
- ``BLOCKPAD_DEBUG_MODULES``: comma-separated logger names to switch to DEBUG
"""

from __future__ import annotations

import copy
import logging
import logging.config
import os
from typing import Any, Dict, List

from blockpad.config import ConfigManager

__all__ = ["setup_logging"]

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_EDIT_LOGGERS = (
    "blockpad.core.services.document_operations",
    "blockpad.core.services.edit_translator",
    "blockpad.core.store",
)

_TRUTHY = {"1", "true", "yes", "on"}


def setup_logging() -> None:
    """Apply ``logging.yml``, falling back to console-only logging."""
    log_dir = os.environ.get("BLOCKPAD_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)

    config: Dict[str, Any] = copy.deepcopy(ConfigManager().get_logging_config())
    if config.get("version"):
        file_handler = config.get("handlers", {}).get("file")
        if isinstance(file_handler, dict):
            file_handler["filename"] = os.path.join(log_dir, "app.log")
        try:
            logging.config.dictConfig(config)
        except (ValueError, TypeError, AttributeError, ImportError) as exc:
            _setup_minimal_logging()
            logging.error("Logging config rejected, using console only: %s", exc)
        else:
            logging.info("===== Logging initialised (log dir: %s) =====", log_dir)
    else:
        _setup_minimal_logging()
        logging.warning("No logging config found, using console only")

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"simple": {"format": _FORMAT}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "simple", "level": "INFO"},
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    })


def _apply_debug_overrides() -> List[str]:
    """Switch loggers named by the environment to DEBUG.

    Returns the names of the loggers that were switched.
    """
    targets: List[str] = []
    if os.environ.get("BLOCKPAD_DEBUG_EDITS", "").strip().lower() in _TRUTHY:
        targets.extend(_EDIT_LOGGERS)
    for name in os.environ.get("BLOCKPAD_DEBUG_MODULES", "").split(","):
        if name.strip():
            targets.append(name.strip())

    for name in targets:
        target = logging.getLogger(name)
        target.setLevel(logging.DEBUG)
        # Root handlers usually filter at INFO
        if not any(h.level <= logging.DEBUG for h in target.handlers):
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter(_FORMAT))
            target.addHandler(handler)
        target.info("Debug override active for logger '%s'", name)
    return targets
