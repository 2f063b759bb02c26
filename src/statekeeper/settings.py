"""
Tracker settings loaded from the environment.

Environment variables:
- SK_STORE_DIR: Directory for JSON store records (default var/statekeeper)
- SK_STORE_BACKEND: Store backend, json|memory (default json)
- SK_PERSIST_ON_SIGNAL: Also persist on SIGTERM/SIGINT (default false)
"""

import os
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel

from statekeeper.core.exceptions import ConfigurationError


class StoreBackend(Enum):
    """Available store backends."""

    JSON = "json"
    MEMORY = "memory"


class TrackerSettings(BaseModel):
    """Settings for the default tracker."""

    store_dir: Path = Path("var/statekeeper")
    store_backend: StoreBackend = StoreBackend.JSON
    persist_on_signal: bool = False

    @classmethod
    def from_env(cls) -> "TrackerSettings":
        """Load settings from environment."""
        backend_str = os.getenv("SK_STORE_BACKEND", StoreBackend.JSON.value).lower()
        try:
            backend = StoreBackend(backend_str)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown store backend '{backend_str}'",
                env_var="SK_STORE_BACKEND",
            ) from e

        signal_str = os.getenv("SK_PERSIST_ON_SIGNAL", "false").lower()
        if signal_str not in ("true", "false", "1", "0", "yes", "no"):
            raise ConfigurationError(
                f"Invalid boolean '{signal_str}'",
                env_var="SK_PERSIST_ON_SIGNAL",
            )

        return cls(
            store_dir=Path(os.getenv("SK_STORE_DIR", "var/statekeeper")),
            store_backend=backend,
            persist_on_signal=signal_str in ("true", "1", "yes"),
        )


@lru_cache(maxsize=1)
def get_settings() -> TrackerSettings:
    """Get the process-wide settings (cached)."""
    return TrackerSettings.from_env()
