"""
State Tracker - registry of live tracked objects and their configurations.

Responsibilities:
- Create or retrieve the tracking configuration for an object
- Resolve the configuration initializer for an object's type
- Hold tracked objects weakly so tracking never keeps them alive
- Run the auto-persist sweep when the persist trigger fires
"""

import logging
import weakref
from dataclasses import dataclass
from functools import lru_cache, partial
from typing import Any

from statekeeper.core.exceptions import (
    AutoPersistError,
    InitializerResolutionError,
    InvalidTargetError,
)
from statekeeper.settings import StoreBackend, TrackerSettings, get_settings
from statekeeper.storage.base import MemoryStoreFactory, StoreFactory
from statekeeper.storage.json_file import JsonFileStoreFactory
from statekeeper.tracking.configuration import TrackingConfiguration
from statekeeper.tracking.initializers import (
    ConfigurationInitializer,
    DefaultConfigurationInitializer,
    PydanticModelInitializer,
)
from statekeeper.triggers.persist import ExitPersistTrigger, PersistTrigger

logger = logging.getLogger(__name__)


@dataclass
class TrackedEntry:
    """Weak handle to a tracked object paired with its configuration."""

    ref: weakref.ref
    configuration: TrackingConfiguration

    @property
    def is_alive(self) -> bool:
        return self.ref() is not None


class StateTracker:
    """
    Hub tracking objects for persistence.

    Entries are keyed by object identity, not equality, so unhashable
    objects and objects with custom ``__eq__`` are tracked individually.
    An entry's slot is pruned by the weak reference callback once its
    object is collected; sweeps skip dead references either way.
    """

    def __init__(
        self,
        store_factory: StoreFactory,
        persist_trigger: PersistTrigger | None = None,
        *,
        name: str = "default",
    ):
        """
        Initialize a tracker.

        Args:
            store_factory: Creates the store for each tracked object's key
            persist_trigger: Source of the "persist now" signal, usually
                fired on application shutdown
            name: Tracker name, used for logging and default store location
        """
        self.name = name
        self.store_factory = store_factory
        self._entries: dict[int, TrackedEntry] = {}
        self._auto_persist_trigger: PersistTrigger | None = None
        self._initializers: dict[type, ConfigurationInitializer] = {}

        # Default for every object; more specific ones win along the MRO
        self.add_configuration_initializer(DefaultConfigurationInitializer())
        self.add_configuration_initializer(PydanticModelInitializer())

        self.auto_persist_trigger = persist_trigger

    @classmethod
    def from_settings(
        cls, settings: TrackerSettings | None = None, *, name: str = "default"
    ) -> "StateTracker":
        """
        Create a tracker with the configured store and an exit trigger.

        Appropriate for most applications: state is written under
        ``settings.store_dir / name`` when the process shuts down.
        """
        settings = settings or get_settings()
        if settings.store_backend == StoreBackend.MEMORY:
            store_factory: StoreFactory = MemoryStoreFactory()
        else:
            store_factory = JsonFileStoreFactory(settings.store_dir / name)

        trigger = ExitPersistTrigger(handle_signals=settings.persist_on_signal)
        return cls(store_factory, trigger, name=name)

    @property
    def configuration_initializers(self) -> dict[type, ConfigurationInitializer]:
        """Registered initializers by the exact type they handle."""
        return self._initializers

    @property
    def auto_persist_trigger(self) -> PersistTrigger | None:
        """Trigger whose signal runs the auto-persist sweep."""
        return self._auto_persist_trigger

    @auto_persist_trigger.setter
    def auto_persist_trigger(self, trigger: PersistTrigger | None) -> None:
        previous = self._auto_persist_trigger
        if previous is not None and previous is not trigger:
            previous.unsubscribe(self._on_persist_required)
            # Nothing left to persist at exit through the replaced trigger
            if isinstance(previous, ExitPersistTrigger) and previous.subscriber_count == 0:
                previous.close()

        self._auto_persist_trigger = trigger
        if trigger is not None:
            trigger.subscribe(self._on_persist_required)

    @property
    def tracked_count(self) -> int:
        """Number of tracked objects that are still alive."""
        return sum(1 for entry in self._entries.values() if entry.is_alive)

    def _on_persist_required(self) -> None:
        self.run_auto_persist()

    def add_configuration_initializer(self, initializer: ConfigurationInitializer) -> None:
        """Register an initializer, replacing any previous one for the same type."""
        self._initializers[initializer.for_type] = initializer

    def find_initializer(self, target_type: type) -> ConfigurationInitializer:
        """
        Resolve the initializer for a type.

        Walks the MRO most-derived first and returns the first exact
        registration.

        Raises:
            InitializerResolutionError: If not even ``object`` has an initializer
        """
        for klass in target_type.__mro__:
            initializer = self._initializers.get(klass)
            if initializer is not None:
                return initializer

        raise InitializerResolutionError(
            f"No configuration initializer for '{target_type.__qualname__}'",
            target_type=target_type.__qualname__,
            searched=[klass.__qualname__ for klass in target_type.__mro__],
        )

    def get_configuration(self, target: Any) -> TrackingConfiguration | None:
        """Get the existing configuration for an object, if it is tracked."""
        entry = self._entries.get(id(target))
        if entry is not None and entry.ref() is target:
            return entry.configuration
        return None

    def is_tracked(self, target: Any) -> bool:
        """Check if an object has a configuration."""
        return self.get_configuration(target) is not None

    def configure(self, target: Any, identifier: str | None = None) -> TrackingConfiguration:
        """
        Create or retrieve the tracking configuration for an object.

        On first call the resolved initializer populates the configuration,
        ``identifier`` (if given) overrides the initializer's key and
        previously stored state is applied to the object. Later calls
        return the same configuration and ignore ``identifier``.

        Raises:
            InvalidTargetError: If target is None or cannot be weakly referenced
            InitializerResolutionError: If no initializer can be resolved
        """
        if target is None:
            raise InvalidTargetError("Cannot track None")

        configuration = self.get_configuration(target)
        if configuration is not None:
            return configuration

        target_id = id(target)
        try:
            ref = weakref.ref(target, partial(self._discard, target_id))
        except TypeError as e:
            raise InvalidTargetError(
                f"Objects of type '{type(target).__qualname__}' cannot be weakly referenced",
                target_type=type(target).__qualname__,
            ) from e

        initializer = self.find_initializer(type(target))
        configuration = TrackingConfiguration(target, self)
        initializer.initialize_configuration(configuration)

        # An explicit identifier has priority over the initializer's key
        if identifier is not None:
            configuration.key = identifier

        configuration.complete_initialization()

        self._entries[target_id] = TrackedEntry(ref=ref, configuration=configuration)
        logger.debug(
            f"[{self.name}] tracking '{configuration.key}' "
            f"with {initializer.__class__.__name__}"
        )
        return configuration

    def _discard(self, target_id: int, ref: weakref.ref) -> None:
        entry = self._entries.get(target_id)
        if entry is not None and entry.ref is ref:
            del self._entries[target_id]

    def run_auto_persist(self) -> None:
        """
        Persist every live tracked object with auto-persist enabled.

        A failure does not stop the sweep; all failures are raised
        together once every object has been visited.

        Raises:
            AutoPersistError: If persisting one or more objects failed
        """
        failures: list[tuple[str, BaseException]] = []
        persisted = 0

        for entry in list(self._entries.values()):
            target = entry.ref()
            if target is None:
                continue

            configuration = entry.configuration
            if not configuration.auto_persist_enabled:
                continue

            try:
                configuration.persist()
                persisted += 1
            except Exception as e:
                logger.error(f"[{self.name}] failed to persist '{configuration.key}': {e}")
                failures.append((configuration.key, e))

        logger.debug(f"[{self.name}] auto-persist sweep persisted {persisted} objects")

        if failures:
            raise AutoPersistError(
                f"Auto-persist failed for {len(failures)} of {persisted + len(failures)} objects",
                failures=failures,
            )


@lru_cache(maxsize=1)
def get_tracker() -> StateTracker:
    """Get the global state tracker (cached)."""
    return StateTracker.from_settings()
