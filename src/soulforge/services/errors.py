"""Service-layer exceptions."""


class FactoryError(Exception):
    """Raised when a runtime entity cannot be created."""


class InvariantViolation(ValueError):
    """Raised for malformed input or misuse of the state store."""


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""
