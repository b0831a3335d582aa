"""Reading definition tables from disk."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Type

from .errors import DataLoadError, DataValidationError

logger = logging.getLogger(__name__)


def load_json(path: Path) -> object:
    """Parse one JSON file; any I/O or syntax failure becomes DataLoadError."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError("Definition file not found", source=str(path)) from exc
    except OSError as exc:
        raise DataLoadError(f"Definition file is unreadable: {exc}", source=str(path)) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON at line {exc.lineno}: {exc.msg}", source=str(path)) from exc


def load_json_table(path: Path, container: Type[dict] | Type[list] = dict) -> dict | list:
    """Load a table whose top level must be ``container`` (an object keyed by id, or a list)."""
    raw = load_json(path)
    if not isinstance(raw, container):
        expected = "an object" if container is dict else "a list"
        raise DataValidationError(f"Top level must be {expected}", source=str(path))
    logger.debug("Loaded %d definitions from %s", len(raw), path.name)
    return raw
