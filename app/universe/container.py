import inspect
from typing import Any, Dict, Optional

from universe.logger import get_logger

log = get_logger("Container")


def _split(full_name: str):
    if not isinstance(full_name, str) or ":" not in full_name:
        raise ValueError(f"Registrierungsname muss das Format 'typ:name' haben, erhalten: {full_name!r}")
    kind, _, name = full_name.partition(":")
    if not kind or not name:
        raise ValueError(f"Registrierungsname muss das Format 'typ:name' haben, erhalten: {full_name!r}")
    return kind, name


class Container:
    """
    Einfacher Namensraum für Komponenten und Services ('component:x', 'service:y').
    Klassen werden bei instantiate=True beim ersten lookup() einmalig erzeugt.
    """

    def __init__(self):
        self._registrations: Dict[str, Any] = {}
        self._options: Dict[str, dict] = {}
        self._singletons: Dict[str, Any] = {}

    def register(self, full_name: str, value: Any, instantiate: bool = True):
        _split(full_name)
        self._registrations[full_name] = value
        self._options[full_name] = {"instantiate": instantiate}
        self._singletons.pop(full_name, None)

    def unregister(self, full_name: str):
        self._registrations.pop(full_name, None)
        self._options.pop(full_name, None)
        self._singletons.pop(full_name, None)

    def has_registration(self, full_name: str) -> bool:
        _split(full_name)
        return full_name in self._registrations

    def resolve_registration(self, full_name: str) -> Optional[Any]:
        return self._registrations.get(full_name)

    def lookup(self, full_name: str) -> Optional[Any]:
        if not self.has_registration(full_name):
            return None

        value = self._registrations[full_name]
        if not self._options[full_name]["instantiate"] or not inspect.isclass(value):
            return value

        if full_name not in self._singletons:
            self._singletons[full_name] = value()
        return self._singletons[full_name]


class ModuleInstance(Container):
    """Die gebootete Laufzeit-Instanz einer Extension in einem logischen Slot."""

    def __init__(self, name: str, base, host=None, instance_id: str = "manual", mount_point: Optional[str] = None):
        super().__init__()
        self.name = name
        self.base = base
        self.host = host
        self.instance_id = instance_id
        self.mount_point = mount_point
        self.dependencies: Dict[str, Any] = {"services": {}, "externalRoutes": {}}
        self.booted = False
        # setup_extension darf pro Prozess nur einmal laufen
        self.finalized = False

    def lookup(self, full_name: str) -> Optional[Any]:
        found = super().lookup(full_name)
        if found is not None or self.host is None:
            return found

        # Geteilte Host-Services (dependencies.services) durchreichen
        kind, name = _split(full_name)
        if kind == "service" and name in self.dependencies.get("services", {}):
            return self.host.lookup(f"service:{self.dependencies['services'][name]}")
        return None

    async def boot(self):
        if self.booted:
            return self
        hook = getattr(self.base, "boot", None)
        if callable(hook):
            result = hook(self)
            if inspect.isawaitable(result):
                await result
        self.booted = True
        log.debug(f"🔌 Instanz gebootet: {self.name} ({self.instance_id}) @ {self.mount_point}")
        return self

    def __repr__(self):
        return f"<ModuleInstance {self.name}:{self.instance_id} mount={self.mount_point!r}>"


class Host(Container):
    """Der Owner: hält Engine-Registrierungen und erzeugt Kind-Instanzen."""

    def __init__(self, engines: Optional[Dict[str, dict]] = None):
        super().__init__()
        # Pro Engine vom Host freigegebene Abhängigkeiten (siehe map_engines)
        self.engines: Dict[str, dict] = engines or {}

    def engine_dependencies(self, name: str) -> dict:
        return dict(self.engines.get(name, {}).get("dependencies", {}))

    def build_child_engine_instance(self, name: str, instance_id: str = "manual", mount_point: Optional[str] = None) -> ModuleInstance:
        base = self.resolve_registration(f"engine:{name}")
        return ModuleInstance(name, base, host=self, instance_id=instance_id, mount_point=mount_point)
