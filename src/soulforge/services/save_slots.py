"""File-system storage for named saves plus a newest-first index."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List

from soulforge import config
from soulforge.domain.state import GameState
from soulforge.services.errors import SaveLoadError
from soulforge.services.results import OperationResult
from soulforge.services.save_service import SaveService

logger = logging.getLogger(__name__)

SAVE_KEY_PREFIX = "saga_save_data"
INDEX_FILENAME = f"{SAVE_KEY_PREFIX}_index.json"
QUICK_SAVE_NAME = "Quick Save"


@dataclass(slots=True)
class SaveIndexEntry:
    """Describes one save for menu display."""

    key: str
    name: str
    timestamp: int
    version: str


class SaveSlotStore:
    """Writes one JSON file per save key and keeps the index sorted newest first."""

    def __init__(self, base_dir: Path | str | None = None, *, save_service: SaveService | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else config.get_save_dir()
        self._save_service = save_service or SaveService()

    def save_game(self, state: GameState, name: str | None = None) -> OperationResult[str]:
        payload = self._save_service.serialize(state, name)
        key = self._unique_key(payload["timestamp"])
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        self._update_index(
            SaveIndexEntry(key=key, name=payload["name"], timestamp=payload["timestamp"], version=payload["version"])
        )
        logger.info("Game saved to %s", key)
        return OperationResult.ok("Game saved successfully.", key)

    def quick_save(self, state: GameState) -> OperationResult[str]:
        return self.save_game(state, QUICK_SAVE_NAME)

    def load_game(self, key: str) -> OperationResult[GameState]:
        path = self._path(key)
        if not path.exists():
            return OperationResult.not_found("Save file not found.", "save_not_found")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            state = self._save_service.deserialize(payload)
        except (ValueError, SaveLoadError) as exc:
            logger.warning("Save %s could not be loaded: %s", key, exc)
            return OperationResult.precondition_failed(f"Invalid save file: {exc}", "invalid_save")
        logger.info("Game loaded from %s", key)
        return OperationResult.ok("Game loaded successfully.", state)

    def quick_load(self) -> OperationResult[GameState]:
        for entry in self.list_saves():
            if entry.name == QUICK_SAVE_NAME:
                return self.load_game(entry.key)
        return OperationResult.not_found("No quick save found.", "save_not_found")

    def delete_save(self, key: str) -> OperationResult[str]:
        path = self._path(key)
        if not path.exists():
            return OperationResult.not_found("Save file not found.", "save_not_found")
        path.unlink()
        self._write_index([entry for entry in self.list_saves() if entry.key != key])
        logger.info("Deleted save %s", key)
        return OperationResult.ok("Save file deleted successfully.", key)

    def list_saves(self) -> List[SaveIndexEntry]:
        """Return the index newest first; a missing or corrupt index reads as empty."""
        path = self._base_dir / INDEX_FILENAME
        if not path.exists():
            return []
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Save index at %s is unreadable", path)
            return []
        if not isinstance(raw, list):
            return []
        entries = [entry for entry in (self._coerce_entry(item) for item in raw) if entry is not None]
        entries.sort(key=lambda entry: entry.timestamp, reverse=True)
        return entries

    def _update_index(self, saved: SaveIndexEntry) -> None:
        entries = [entry for entry in self.list_saves() if entry.key != saved.key]
        entries.append(saved)
        self._write_index(entries)

    def _write_index(self, entries: List[SaveIndexEntry]) -> None:
        ordered = sorted(entries, key=lambda entry: entry.timestamp, reverse=True)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        (self._base_dir / INDEX_FILENAME).write_text(
            json.dumps([asdict(entry) for entry in ordered], indent=2), encoding="utf-8"
        )

    @staticmethod
    def _coerce_entry(value: Any) -> SaveIndexEntry | None:
        if not isinstance(value, dict):
            return None
        data: Dict[str, Any] = value
        if not isinstance(data.get("key"), str) or not isinstance(data.get("timestamp"), int):
            return None
        return SaveIndexEntry(
            key=data["key"],
            name=str(data.get("name", "")),
            timestamp=data["timestamp"],
            version=str(data.get("version", "")),
        )

    def _unique_key(self, timestamp: int) -> str:
        key = f"{SAVE_KEY_PREFIX}_{timestamp}"
        suffix = 1
        while self._path(key).exists():
            key = f"{SAVE_KEY_PREFIX}_{timestamp}_{suffix}"
            suffix += 1
        return key

    def _path(self, key: str) -> Path:
        return self._base_dir / f"{key}.json"
