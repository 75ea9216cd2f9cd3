import asyncio
from typing import Any, Dict, Iterable, List, Optional

from universe.bus import bus as global_bus
from universe.errors import RegistryNotFound, RegistryValidationError
from universe.logger import get_logger
from universe.strings import dasherize, internal_registry_name
from .menu import collapse_view, create_menu_item, create_menu_panel, get_option, matches
from .models import DashboardWidget, MenuItem, MenuPanel, Registry
from .widgets import create_dashboard_widget

log = get_logger("RegistryStore")

DEFAULT_REGISTRIES = ("admin", "account", "settings")


class RegistryStore:
    """
    Benannte Registries, in die Extensions Menüpunkte, Panels, Widgets und
    Komponenten eintragen. Lesende Zugriffe liefern bei Fehlschlag None bzw. [].
    """

    def __init__(self, bus=None, modules=None, owner=None, mount_root: str = "console", lookup_retry_delay: float = 0.1):
        self.bus = bus or global_bus
        # ModuleManager, um Komponenten in Extension-Namensräume zu registrieren
        self.modules = modules
        self.owner = owner
        self.mount_root = mount_root
        self.lookup_retry_delay = lookup_retry_delay

        self._registries: Dict[str, Registry] = {}
        self.header_menu_items: List[MenuItem] = []
        self.organization_menu_items: List[MenuItem] = []
        self.user_menu_items: List[MenuItem] = []
        self.dashboard_widgets: Dict[str, List[DashboardWidget]] = {"default_widgets": [], "widgets": []}

        for name in DEFAULT_REGISTRIES:
            self._registries[internal_registry_name(name)] = Registry(name=name)

    # --- Registries ---

    def create_registry(self, registry_name: str, **options) -> "RegistryStore":
        """Legt die Registry (neu) an. Eine bestehende wird ersetzt, nicht gemerged."""
        registry = Registry(**{"name": registry_name, **options})
        self._registries[internal_registry_name(registry_name)] = registry
        log.debug(f"🗂️ Registry angelegt: {registry_name}")

        self.bus.emit("registry.created", {"registry": registry})
        return self

    def create_registries(self, registries: Iterable = ()) -> "RegistryStore":
        """Akzeptiert Namen oder (name, options)-Paare."""
        if not isinstance(registries, (list, tuple)):
            raise RegistryValidationError("`create_registries()` erwartet eine Liste.")

        # Erst alles prüfen, dann anlegen
        normalized = []
        for registry in registries:
            if isinstance(registry, str):
                normalized.append((registry, {}))
            elif isinstance(registry, (list, tuple)) and len(registry) == 2 and isinstance(registry[0], str):
                options = registry[1] if registry[1] is not None else {}
                if not isinstance(options, dict):
                    raise RegistryValidationError(f"Optionen für '{registry[0]}' müssen ein Dictionary sein.")
                normalized.append((registry[0], options))
            else:
                raise RegistryValidationError(f"Ungültiger Registry-Eintrag: {registry!r}")

        for name, options in normalized:
            self.create_registry(name, **options)
        return self

    def create_registry_event(self, registry_name: str, event: str, payload: Optional[dict] = None):
        self.bus.emit(f"{registry_name}.{event}", payload)

    def get_registry(self, registry_name: str) -> Optional[Registry]:
        return self._registries.get(internal_registry_name(registry_name))

    def has_registry(self, registry_name: str) -> bool:
        return self.get_registry(registry_name) is not None

    def registry_names(self) -> List[str]:
        return [registry.name for registry in self._registries.values()]

    async def lookup_registry(self, registry_name: str) -> Registry:
        """Einmaliger, verzögerter zweiter Versuch für Aufrufer, die mit dem Boot um die Wette laufen."""
        registry = self.get_registry(registry_name)
        if registry is not None:
            return registry

        await asyncio.sleep(self.lookup_retry_delay)

        registry = self.get_registry(registry_name)
        if registry is not None:
            return registry

        log.debug(f"Registry '{registry_name}' auch nach Retry nicht gefunden.")
        raise RegistryNotFound(registry_name)

    def _ensure_registry(self, registry_name: str) -> Registry:
        if not self.has_registry(registry_name):
            self.create_registry(registry_name)
        return self.get_registry(registry_name)

    # --- Lesen ---

    def get_menu_items_from_registry(self, registry_name: str) -> List[MenuItem]:
        registry = self.get_registry(registry_name)
        return registry.menu_items if registry is not None and isinstance(registry.menu_items, list) else []

    def get_menu_panels_from_registry(self, registry_name: str) -> List[MenuPanel]:
        registry = self.get_registry(registry_name)
        return registry.menu_panels if registry is not None and isinstance(registry.menu_panels, list) else []

    def get_renderable_components_from_registry(self, registry_name: str) -> List[Any]:
        registry = self.get_registry(registry_name)
        if registry is not None and isinstance(registry.renderable_components, list):
            return registry.renderable_components
        return []

    def lookup_menu_item_from_registry(self, registry_name: str, slug: str, view: Optional[str] = None) -> Optional[MenuItem]:
        # Erst die Menüpunkte, dann die Panels; der erste Treffer gewinnt
        for menu_item in self.get_menu_items_from_registry(registry_name):
            if matches(menu_item, slug, view):
                return menu_item

        for menu_panel in self.get_menu_panels_from_registry(registry_name):
            for menu_item in menu_panel.items or []:
                if matches(menu_item, slug, view):
                    return menu_item
        return None

    def load_component_from_registry(self, registry_name: str, slug: str, view: Optional[str] = None):
        menu_item = self.lookup_menu_item_from_registry(registry_name, slug, view)
        return menu_item.component if menu_item is not None else None

    # --- Schreiben ---

    def register_menu_item(self, registry_name: str, title: str, **options) -> MenuItem:
        options = dict(options)
        route = options.pop("route", f"{self.mount_root}.{dasherize(registry_name)}.virtual")
        options["slug"] = get_option(options, "slug", "~")
        options["view"] = collapse_view(options["slug"], get_option(options, "view", dasherize(title)))

        self._register_menu_item_component_to_engine(options)

        menu_item = create_menu_item(title, route, **options)
        registry = self._ensure_registry(registry_name)
        registry.menu_items.append(menu_item)

        self.bus.emit("menuItem.registered", {"menu_item": menu_item, "registry": registry})
        return menu_item

    def _register_menu_item_component_to_engine(self, options: dict):
        engines = options.get("register_component_to_engine")
        component = options.get("component")
        if self.modules is None or engines is None or component is None:
            return

        if isinstance(engines, str):
            engines = [engines]
        for engine_name in engines:
            if isinstance(engine_name, str):
                self.modules.register_component_in_engine(engine_name, component)

    def register_menu_panel(self, registry_name: str, title: str, items: Iterable[dict] = (), **options) -> MenuPanel:
        menu_panel = create_menu_panel(title, items, **options)
        registry = self._ensure_registry(registry_name)
        registry.menu_panels.append(menu_panel)

        self.bus.emit("menuPanel.registered", {"menu_panel": menu_panel, "registry": registry})
        return menu_panel

    def register_renderable_component(self, engine_name: str, registry_name: str, component, register_as: Optional[str] = None):
        if isinstance(component, (list, tuple)):
            for c in component:
                self.register_renderable_component(engine_name, registry_name, c, register_as)
            return

        if self.modules is not None:
            self.modules.register_component_in_engine(engine_name, component, register_as)

        registry = self._ensure_registry(registry_name)
        registry.renderable_components.append(component)

    # --- Admin / Settings ---

    @property
    def admin_menu_items(self) -> List[MenuItem]:
        return self.get_menu_items_from_registry("admin")

    @property
    def admin_menu_panels(self) -> List[MenuPanel]:
        return self.get_menu_panels_from_registry("admin")

    @property
    def settings_menu_items(self) -> List[MenuItem]:
        return self.get_menu_items_from_registry("settings")

    @property
    def settings_menu_panels(self) -> List[MenuPanel]:
        return self.get_menu_panels_from_registry("settings")

    def register_admin_menu_item(self, title: str, **options) -> MenuItem:
        return self.register_menu_item("admin", title, **options)

    def register_admin_menu_panel(self, title: str, items: Iterable[dict] = (), **options) -> MenuPanel:
        options["section"] = get_option(options, "section", "admin")
        return self.register_menu_panel("admin", title, items, **options)

    def register_settings_menu_item(self, title: str, **options) -> MenuItem:
        return self.register_menu_item("settings", title, **options)

    def register_settings_menu_panel(self, title: str, items: Iterable[dict] = (), **options) -> MenuPanel:
        return self.register_menu_panel("settings", title, items, **options)

    # --- Header / Organisation / User ---

    def register_header_menu_item(self, title: str, route: str, **options) -> MenuItem:
        menu_item = create_menu_item(title, route, **options)
        self.header_menu_items.append(menu_item)
        # Stabil: gleiche Priorität behält die Einfügereihenfolge
        self.header_menu_items.sort(key=lambda item: item.priority)
        return menu_item

    def register_organization_menu_item(self, title: str, **options) -> MenuItem:
        return self._register_context_menu_item(self.organization_menu_items, "settings", title, options)

    def register_user_menu_item(self, title: str, **options) -> MenuItem:
        return self._register_context_menu_item(self.user_menu_items, "account", title, options)

    def _register_context_menu_item(self, target: List[MenuItem], section: str, title: str, options: dict) -> MenuItem:
        options = dict(options)
        route = options.pop("route", f"{self.mount_root}.virtual")
        options["index"] = get_option(options, "index", 0)
        options["section"] = get_option(options, "section", section)

        menu_item = create_menu_item(title, route, **options)
        target.append(menu_item)
        return menu_item

    # --- Dashboard ---

    def register_dashboard_widgets(self, widget):
        self._register_widget("widgets", widget)

    def register_default_dashboard_widgets(self, widget):
        self._register_widget("default_widgets", widget)

    def _register_widget(self, kind: str, widget):
        if isinstance(widget, (list, tuple)):
            for w in widget:
                self._register_widget(kind, w)
            return

        new_widget = create_dashboard_widget(widget, self.owner)
        self.dashboard_widgets[kind].append(new_widget)
        self.bus.emit("widget.registered", {"widget": new_widget})

    def get_dashboard_widgets(self) -> List[DashboardWidget]:
        return self.dashboard_widgets["widgets"]

    def get_default_dashboard_widgets(self) -> List[DashboardWidget]:
        return self.dashboard_widgets["default_widgets"]
