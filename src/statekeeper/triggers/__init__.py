"""
StateKeeper Triggers Module.

Event sources that tell a tracker when to run a global persist.
"""

__all__ = [
    "PersistTrigger",
    "ManualPersistTrigger",
    "ExitPersistTrigger",
    "PersistCallback",
]

from statekeeper.triggers.persist import (
    ExitPersistTrigger,
    ManualPersistTrigger,
    PersistCallback,
    PersistTrigger,
)
