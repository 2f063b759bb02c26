"""
StateKeeper Tracking Module.

Associates live objects with tracking configurations and runs the
auto-persist sweep.
"""

__all__ = [
    "StateTracker",
    "TrackedEntry",
    "TrackingConfiguration",
    "PropertyOperationEvent",
    "ConfigurationInitializer",
    "DefaultConfigurationInitializer",
    "PydanticModelInitializer",
    "TrackingAware",
    "get_tracker",
]

from statekeeper.tracking.configuration import PropertyOperationEvent, TrackingConfiguration
from statekeeper.tracking.initializers import (
    ConfigurationInitializer,
    DefaultConfigurationInitializer,
    PydanticModelInitializer,
    TrackingAware,
)
from statekeeper.tracking.tracker import StateTracker, TrackedEntry, get_tracker
