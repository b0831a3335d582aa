"""Lazy, cached access to one definition table."""
from __future__ import annotations

from pathlib import Path
from typing import ClassVar, Dict, Generic, TypeVar

from soulforge.data.errors import DataValidationError
from soulforge.data.json_loader import load_json_table
from soulforge.data import paths

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Reads ``filename`` on first access, builds typed definitions once and serves them by id.

    Subclasses implement ``_build``; tables stored as a JSON list set ``container = list``.
    """

    container: ClassVar[type] = dict

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        return paths.get_definitions_path(self._base_path) / self._filename

    def _build(self, raw) -> Dict[str, T]:
        raise NotImplementedError

    def _loaded(self) -> Dict[str, T]:
        if self._definitions is None:
            self._definitions = self._build(load_json_table(self._get_file_path(), self.container))
        return self._definitions

    def get(self, def_id: str) -> T:
        """Return a definition by id; unknown ids raise KeyError."""
        definitions = self._loaded()
        if def_id not in definitions:
            raise KeyError(def_id)
        return definitions[def_id]

    def has(self, def_id: str) -> bool:
        return def_id in self._loaded()

    def all(self) -> list[T]:
        """Every definition, ordered by id so iteration never depends on file order."""
        definitions = self._loaded()
        return [definitions[key] for key in sorted(definitions)]

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _optional_str(value: object, context: str) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string or null.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataValidationError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_float(value: object, context: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"{context} must be a number.")
        return float(value)

    @staticmethod
    def _require_str_list(value: object, context: str) -> list[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        result: list[str] = []
        for entry in value:
            if not isinstance(entry, str):
                raise DataValidationError(f"{context} entries must be strings.")
            result.append(entry)
        return result

    @classmethod
    def _require_int_mapping(cls, value: object, context: str) -> Dict[str, int]:
        if value is None:
            return {}
        mapping = cls._require_mapping(value, context)
        return {key: cls._require_int(entry, f"{context}.{key}") for key, entry in mapping.items()}

    @staticmethod
    def _assert_allowed_fields(payload: dict[str, object], required: set[str], optional: set[str], context: str) -> None:
        actual_keys = set(payload.keys())
        missing = required - actual_keys
        unknown = actual_keys - required - optional
        if missing or unknown:
            pieces = []
            if missing:
                pieces.append(f"missing fields: {sorted(missing)}")
            if unknown:
                pieces.append(f"unknown fields: {sorted(unknown)}")
            raise DataValidationError(f"{context} has schema issues ({'; '.join(pieces)}).")
