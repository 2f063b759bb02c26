"""
StateKeeper Core Module.

Provides the exception hierarchy shared by every other module.
"""

__all__ = [
    "StateKeeperError",
    "InvalidTargetError",
    "InitializerResolutionError",
    "StoreError",
    "AutoPersistError",
    "PersistTriggerError",
    "ConfigurationError",
    "format_exception",
]

from statekeeper.core.exceptions import (
    AutoPersistError,
    ConfigurationError,
    InitializerResolutionError,
    InvalidTargetError,
    PersistTriggerError,
    StateKeeperError,
    StoreError,
    format_exception,
)
