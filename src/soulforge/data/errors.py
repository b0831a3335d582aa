"""Exceptions raised while reading the static definition tables."""
from __future__ import annotations


class DataError(Exception):
    """Base exception for the data layer; ``source`` names the offending file when known."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(f"{message} [{source}]" if source else message)
        self.source = source


class DataLoadError(DataError):
    """A definition file is missing, unreadable or not JSON."""


class DataValidationError(DataError):
    """A definition does not have the expected shape or value range."""


class DataReferenceError(DataError):
    """A definition names an id that its target table does not contain."""
