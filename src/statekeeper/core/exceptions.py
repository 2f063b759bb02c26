"""
StateKeeper Exception Hierarchy.

Defines all custom exceptions used across the StateKeeper system.
Provides consistent error handling and debugging information.
"""

from typing import Any


class StateKeeperError(Exception):
    """
    Base exception for all StateKeeper errors.

    All custom exceptions inherit from this class, allowing
    generic catch blocks and consistent error handling.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        """
        Initialize a StateKeeperError.

        Args:
            message: Human-readable error message
            details: Optional structured data for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base} ({details_str})"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidTargetError(StateKeeperError):
    """
    Raised when an object cannot be tracked.

    This covers:
    - None passed as the tracking target
    - Objects that do not support weak references
    """

    def __init__(
        self,
        message: str,
        *,
        target_type: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize an InvalidTargetError.

        Args:
            message: Human-readable error message
            target_type: Name of the rejected object's type
            details: Optional structured data for debugging
        """
        details = details or {}
        if target_type:
            details["target_type"] = target_type

        super().__init__(message, details=details)
        self.target_type = target_type


class InitializerResolutionError(StateKeeperError):
    """
    Raised when no configuration initializer matches an object's type.

    The default initializer for ``object`` is installed when a tracker
    is created, so this always indicates a broken setup.
    """

    def __init__(
        self,
        message: str,
        *,
        target_type: str | None = None,
        searched: list[str] | None = None,
    ):
        details: dict[str, Any] = {}
        if target_type:
            details["target_type"] = target_type
        if searched:
            details["searched"] = searched
        super().__init__(message, details=details)
        self.target_type = target_type
        self.searched = searched or []


class StoreError(StateKeeperError):
    """
    Errors in store operations.

    Raised when a store cannot read or write its record, including:
    - Unwritable store directories
    - Values that cannot be serialized
    """

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        path: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a StoreError.

        Args:
            message: Human-readable error message
            key: Store key involved
            path: Backing file path if applicable
            operation: Operation being performed
            details: Optional structured data for debugging
        """
        details = details or {}
        if key:
            details["key"] = key
        if path:
            details["path"] = path
        if operation:
            details["operation"] = operation

        super().__init__(message, details=details)
        self.key = key
        self.path = path
        self.operation = operation


class AutoPersistError(StateKeeperError):
    """
    Raised after an auto-persist sweep in which some objects failed.

    Every live object is visited before this is raised; ``failures``
    holds one ``(key, exception)`` pair per failed persist.
    """

    def __init__(
        self,
        message: str = "Auto-persist failed",
        *,
        failures: list[tuple[str, BaseException]] | None = None,
    ):
        failures = failures or []
        details = {
            "failed_keys": [key for key, _ in failures],
        }
        super().__init__(message, details=details)
        self.failures = failures


class PersistTriggerError(StateKeeperError):
    """
    Raised when more than one subscriber of a persist trigger failed.

    Every subscriber runs before this is raised; ``errors`` holds the
    exceptions in subscription order.
    """

    def __init__(
        self,
        message: str = "Persist trigger subscribers failed",
        *,
        errors: list[Exception] | None = None,
    ):
        errors = errors or []
        details = {"error_count": len(errors)}
        super().__init__(message, details=details)
        self.errors = errors


class ConfigurationError(StateKeeperError):
    """
    Errors in settings loading or validation.

    Raised when:
    - Environment variables hold invalid values
    - Settings values are out of range
    """

    def __init__(
        self,
        message: str,
        *,
        env_var: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a ConfigurationError.

        Args:
            message: Human-readable error message
            env_var: Environment variable name if applicable
            details: Optional structured data for debugging
        """
        details = details or {}
        if env_var:
            details["env_var"] = env_var

        super().__init__(message, details=details)
        self.env_var = env_var


def format_exception(error: Exception) -> str:
    """
    Format an exception for user-friendly display.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, StateKeeperError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"
