"""Service layer exports."""

from .errors import FactoryError, InvariantViolation, SaveLoadError
from .results import ErrorKind, OperationResult
from .state_store import StateStore
from .game_session import GameSession, Repositories, build_repositories

__all__ = [
    "FactoryError",
    "InvariantViolation",
    "SaveLoadError",
    "ErrorKind",
    "OperationResult",
    "StateStore",
    "GameSession",
    "Repositories",
    "build_repositories",
]
