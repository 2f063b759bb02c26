"""Tests for configuration initializers."""

import pytest
from pydantic import BaseModel, ConfigDict, Field

from statekeeper.core.exceptions import InvalidTargetError
from statekeeper.storage.base import MemoryStoreFactory
from statekeeper.tracking.configuration import TrackingConfiguration
from statekeeper.tracking.initializers import (
    DefaultConfigurationInitializer,
    PydanticModelInitializer,
    TrackingAware,
    declared_properties,
    default_key,
)
from statekeeper.tracking.tracker import StateTracker


class Panel:
    __tracked_properties__ = ("width", "height")

    def __init__(self):
        self.width = 100
        self.height = 50


class DockPanel(Panel):
    __tracked_properties__ = ("docked", "width")

    def __init__(self):
        super().__init__()
        self.docked = True


class Sidebar:
    """Object that configures its own tracking."""

    def __init__(self, name: str):
        self.name = name
        self.collapsed = False

    def init_tracking(self, configuration: TrackingConfiguration) -> None:
        configuration.key = f"sidebar-{self.name}"
        configuration.add_properties("collapsed")


class Toolbar:
    __tracking_key__ = "main-toolbar"
    __tracked_properties__ = ("visible",)

    def __init__(self):
        self.visible = True


class Preferences(BaseModel):
    language: str = "en"
    autosave: bool = True


class Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "x"


class Account(BaseModel):
    user_id: str = Field(default="anonymous", frozen=True)
    theme: str = "light"


class TestHelpers:
    """Tests for initializer helper functions."""

    def test_declared_properties_merge_base_first(self) -> None:
        """Declarations along the MRO are merged without duplicates."""
        assert declared_properties(DockPanel) == ["width", "height", "docked"]

    def test_declared_properties_empty(self) -> None:
        """Classes without declarations yield no properties."""
        assert declared_properties(object) == []

    def test_default_key_uses_tracking_key(self) -> None:
        """__tracking_key__ takes priority over the class name."""
        assert default_key(Toolbar()) == "main-toolbar"
        assert default_key(Panel()) == "Panel"


class TestDefaultConfigurationInitializer:
    """Tests for DefaultConfigurationInitializer."""

    def test_for_object(self) -> None:
        """The default initializer handles object."""
        assert DefaultConfigurationInitializer.for_type is object

    def test_populates_declared_properties(self, tracker: StateTracker) -> None:
        """Declared properties become persisted properties."""
        config = tracker.configure(DockPanel())

        assert config.key == "DockPanel"
        assert config.properties == {"width", "height", "docked"}

    def test_tracking_aware_object(self, tracker: StateTracker) -> None:
        """Objects implementing init_tracking customize their configuration."""
        sidebar = Sidebar("left")
        assert isinstance(sidebar, TrackingAware)

        config = tracker.configure(sidebar)

        assert config.key == "sidebar-left"
        assert config.properties == {"collapsed"}

    def test_tracking_key_attribute(self, tracker: StateTracker) -> None:
        """__tracking_key__ sets the default key."""
        config = tracker.configure(Toolbar())
        assert config.key == "main-toolbar"


class TestPydanticModelInitializer:
    """Tests for PydanticModelInitializer."""

    def test_registered_by_default(self, tracker: StateTracker) -> None:
        """Trackers resolve pydantic models to the model initializer."""
        initializer = tracker.find_initializer(Preferences)
        assert isinstance(initializer, PydanticModelInitializer)

    def test_tracks_model_fields(self, tracker: StateTracker) -> None:
        """Every declared field is persisted under the model name."""
        config = tracker.configure(Preferences())

        assert config.key == "Preferences"
        assert config.properties == {"language", "autosave"}

    def test_round_trip_through_store(
        self, tracker: StateTracker, store_factory: MemoryStoreFactory
    ) -> None:
        """Persisted model fields are restored into a new instance."""
        prefs = Preferences()
        tracker.configure(prefs)
        prefs.language = "de"
        tracker.run_auto_persist()

        restored = Preferences()
        tracker.configure(restored)

        assert restored.language == "de"
        assert store_factory.records["Preferences"] == {"language": "de", "autosave": True}

    def test_frozen_model_rejected(
        self, tracker: StateTracker, store_factory: MemoryStoreFactory
    ) -> None:
        """Frozen models are rejected even when a stored record exists."""
        store_factory.records["Frozen"] = {"name": "y"}
        model = Frozen()

        with pytest.raises(InvalidTargetError) as exc_info:
            tracker.configure(model)

        assert exc_info.value.target_type == "Frozen"
        assert not tracker.is_tracked(model)

    def test_frozen_fields_skipped(
        self, tracker: StateTracker, store_factory: MemoryStoreFactory
    ) -> None:
        """Fields declared frozen are neither persisted nor applied."""
        store_factory.records["Account"] = {"user_id": "admin", "theme": "dark"}
        account = Account()

        config = tracker.configure(account)

        assert config.properties == {"theme"}
        assert account.theme == "dark"
        assert account.user_id == "anonymous"
