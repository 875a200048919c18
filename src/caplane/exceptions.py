"""Custom exceptions for caplane."""


class CaplaneError(Exception):
    """Base exception for all caplane errors."""

    pass


class ValidationError(CaplaneError):
    """Raised when task data or configuration fails validation."""

    pass


class ParseError(CaplaneError):
    """Raised when a task or config file cannot be parsed."""

    pass


class TaskNotFoundError(CaplaneError):
    """Raised when a referenced task ID does not exist on the board."""

    pass


class ResizeSessionError(CaplaneError):
    """Raised when a resize gesture arrives in the wrong session state."""

    pass
