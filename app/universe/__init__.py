"""Universe: lädt Extensions bei Bedarf, bootet sie in Abhängigkeitsreihenfolge
und stellt benannte Registries für Menüpunkte, Panels, Widgets und Komponenten bereit."""

from universe.bus import EventBus, bus
from universe.config import UniverseSettings, load_settings
from universe.errors import (
    ExtensionNotFound,
    MisconfiguredExtension,
    RegistryNotFound,
    RegistryValidationError,
    UniverseError,
)
from universe.services.universe_service import UniverseService

__all__ = [
    "EventBus",
    "ExtensionNotFound",
    "MisconfiguredExtension",
    "RegistryNotFound",
    "RegistryValidationError",
    "UniverseError",
    "UniverseService",
    "UniverseSettings",
    "bus",
    "load_settings",
]
