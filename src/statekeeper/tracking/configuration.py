"""
Tracking Configuration - per-object record of what and how to persist.

A configuration is created once per tracked object by the tracker,
populated by a configuration initializer, then owned by the caller for
further customization (key, properties, auto-persist flag, hooks).
"""

import logging
import weakref
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from statekeeper.storage.base import Store
from statekeeper.triggers.persist import PersistTrigger

if TYPE_CHECKING:
    from statekeeper.tracking.tracker import StateTracker

logger = logging.getLogger(__name__)


@dataclass
class PropertyOperationEvent:
    """Passed to persisting/applying hooks for a single property."""

    configuration: "TrackingConfiguration"
    name: str
    value: Any
    cancel: bool = False


PropertyHook = Callable[[PropertyOperationEvent], None]


class TrackingConfiguration:
    """
    Persistence settings for a single tracked object.

    The target is held through a weak reference; once it has been
    garbage collected ``target`` returns None and persist/apply become
    no-ops.
    """

    def __init__(self, target: Any, tracker: "StateTracker"):
        self._target_ref = weakref.ref(target)
        self._tracker = tracker
        self._key = type(target).__qualname__
        self._properties: dict[str, None] = {}
        self._defaults: dict[str, Any] = {}
        self._persisting_hooks: list[PropertyHook] = []
        self._applying_hooks: list[PropertyHook] = []
        self._store: Store | None = None
        self.auto_persist_enabled = True

    def __repr__(self) -> str:
        return (
            f"TrackingConfiguration(key={self._key!r}, "
            f"properties={list(self._properties)!r}, "
            f"auto_persist_enabled={self.auto_persist_enabled})"
        )

    @property
    def target(self) -> Any | None:
        """The tracked object, or None if it has been collected."""
        return self._target_ref()

    @property
    def tracker(self) -> "StateTracker":
        """Tracker that created this configuration."""
        return self._tracker

    @property
    def key(self) -> str:
        """Identifier of the persisted record."""
        return self._key

    @key.setter
    def key(self, value: str) -> None:
        if value != self._key:
            self._key = value
            # Store is bound to the old key
            self._store = None

    @property
    def properties(self) -> set[str]:
        """Names of the attributes that are persisted."""
        return set(self._properties)

    @property
    def store(self) -> Store:
        """Store for the current key, created on first access."""
        if self._store is None:
            self._store = self._tracker.store_factory.create_store(self._key)
        return self._store

    def add_properties(self, *names: str) -> "TrackingConfiguration":
        """Add attributes to the persisted set."""
        for name in names:
            self._properties[name] = None
        return self

    def remove_properties(self, *names: str) -> "TrackingConfiguration":
        """Remove attributes from the persisted set."""
        for name in names:
            self._properties.pop(name, None)
            self._defaults.pop(name, None)
        return self

    def set_default(self, name: str, value: Any) -> "TrackingConfiguration":
        """
        Set the value applied when nothing is stored for a property.

        The property is added to the persisted set if it is not there yet.
        """
        self._properties[name] = None
        self._defaults[name] = value
        return self

    def on_persisting(self, hook: PropertyHook) -> "TrackingConfiguration":
        """Register a hook called before each property is written."""
        self._persisting_hooks.append(hook)
        return self

    def on_applying(self, hook: PropertyHook) -> "TrackingConfiguration":
        """Register a hook called before each stored value is applied."""
        self._applying_hooks.append(hook)
        return self

    def register_persist_trigger(self, trigger: PersistTrigger) -> "TrackingConfiguration":
        """Persist this object whenever ``trigger`` fires."""
        trigger.subscribe(self.persist)
        return self

    def _run_hooks(self, hooks: list[PropertyHook], name: str, value: Any) -> PropertyOperationEvent:
        event = PropertyOperationEvent(configuration=self, name=name, value=value)
        for hook in hooks:
            hook(event)
            if event.cancel:
                break
        return event

    def persist(self) -> None:
        """
        Write the target's current property values to the store.

        Store failures propagate unchanged.
        """
        target = self.target
        if target is None:
            logger.debug(f"Skipping persist for '{self._key}': target was collected")
            return

        store = self.store
        for name in self._properties:
            event = self._run_hooks(self._persisting_hooks, name, getattr(target, name))
            if event.cancel:
                continue
            store.set(name, event.value)
        store.commit()
        logger.debug(f"Persisted {len(self._properties)} properties for '{self._key}'")

    def apply(self) -> None:
        """Load stored values (or defaults) into the target's attributes."""
        target = self.target
        if target is None:
            return

        store = self.store
        for name in self._properties:
            if store.contains(name):
                value = store.get(name)
            elif name in self._defaults:
                value = self._defaults[name]
            else:
                continue

            event = self._run_hooks(self._applying_hooks, name, value)
            if not event.cancel:
                setattr(target, name, event.value)

    def complete_initialization(self) -> None:
        """Finish setup after the initializer ran: apply previously stored state."""
        self.apply()
