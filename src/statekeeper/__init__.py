"""
StateKeeper - persistence coordinator for live application objects.

Tracks objects without keeping them alive, resolves per-type
configuration initializers and persists tracked state on shutdown
or on demand.
"""

__version__ = "0.1.0"

__all__ = [
    "StateTracker",
    "TrackingConfiguration",
    "get_tracker",
]

from statekeeper.tracking import StateTracker, TrackingConfiguration, get_tracker
