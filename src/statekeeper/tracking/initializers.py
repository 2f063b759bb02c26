"""
Configuration Initializers - per-type defaults for tracking configurations.

An initializer declares the type it is responsible for and fills in the
key and persisted properties of a new configuration. The tracker picks
the most specific initializer along the target type's MRO.
"""

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

from statekeeper.core.exceptions import InvalidTargetError
from statekeeper.tracking.configuration import TrackingConfiguration


@runtime_checkable
class TrackingAware(Protocol):
    """Objects that customize their own tracking configuration."""

    def init_tracking(self, configuration: TrackingConfiguration) -> None: ...


def declared_properties(cls: type) -> list[str]:
    """Collect ``__tracked_properties__`` declared along a class hierarchy, base first."""
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name in klass.__dict__.get("__tracked_properties__", ()):
            if name not in names:
                names.append(name)
    return names


def default_key(target: Any) -> str:
    """Key from ``__tracking_key__`` if the object defines one, else its class name."""
    key = getattr(target, "__tracking_key__", None)
    if key:
        return str(key)
    return type(target).__qualname__


class ConfigurationInitializer(ABC):
    """Strategy populating a new configuration for one type."""

    for_type: type = object

    @abstractmethod
    def initialize_configuration(self, configuration: TrackingConfiguration) -> None:
        """Set the default key and persisted properties."""

    @staticmethod
    def _let_target_customize(configuration: TrackingConfiguration) -> None:
        target = configuration.target
        if isinstance(target, TrackingAware):
            target.init_tracking(configuration)


class DefaultConfigurationInitializer(ConfigurationInitializer):
    """
    Fallback initializer for any object.

    Uses the class-level ``__tracked_properties__`` declarations and the
    optional ``__tracking_key__`` attribute, then hands the configuration
    to the object itself if it implements ``init_tracking``.
    """

    for_type = object

    def initialize_configuration(self, configuration: TrackingConfiguration) -> None:
        target = configuration.target
        configuration.key = default_key(target)
        configuration.add_properties(*declared_properties(type(target)))
        self._let_target_customize(configuration)


class PydanticModelInitializer(ConfigurationInitializer):
    """
    Persists every declared field of a pydantic model.

    Fields declared with ``frozen=True`` are skipped. Frozen models are
    rejected since stored values could never be applied to them.
    """

    for_type = BaseModel

    def initialize_configuration(self, configuration: TrackingConfiguration) -> None:
        target = configuration.target
        model_cls = type(target)
        if model_cls.model_config.get("frozen"):
            raise InvalidTargetError(
                f"Frozen model '{model_cls.__qualname__}' cannot have stored state applied",
                target_type=model_cls.__qualname__,
            )

        configuration.key = default_key(target)
        configuration.add_properties(
            *(name for name, field in model_cls.model_fields.items() if not field.frozen)
        )
        configuration.add_properties(*declared_properties(model_cls))
        self._let_target_customize(configuration)
