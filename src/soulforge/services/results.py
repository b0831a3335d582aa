"""Uniform result shape returned by every gameplay operation."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    PRECONDITION_FAILED = "precondition_failed"


@dataclass(slots=True)
class OperationResult(Generic[T]):
    """Success flag, a message fit for display, and an optional payload.

    ``reason`` is a stable code such as ``insufficient_ingredients`` that callers
    can branch on without parsing ``message``.
    """

    success: bool
    message: str
    payload: T | None = None
    error: ErrorKind | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, message: str, payload: T | None = None) -> "OperationResult[T]":
        return cls(success=True, message=message, payload=payload)

    @classmethod
    def not_found(cls, message: str, reason: str, payload: T | None = None) -> "OperationResult[T]":
        return cls(success=False, message=message, payload=payload, error=ErrorKind.NOT_FOUND, reason=reason)

    @classmethod
    def precondition_failed(cls, message: str, reason: str, payload: T | None = None) -> "OperationResult[T]":
        return cls(
            success=False,
            message=message,
            payload=payload,
            error=ErrorKind.PRECONDITION_FAILED,
            reason=reason,
        )

    def __bool__(self) -> bool:
        return self.success
