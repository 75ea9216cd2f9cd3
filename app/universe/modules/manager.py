import asyncio
from typing import Optional

from universe.container import Host, ModuleInstance
from universe.errors import ExtensionNotFound
from universe.logger import get_logger
from universe.strings import dasherize
from .cache import InstanceCache
from .dependencies import mount_path_from_engine_name, mount_point_for, setup_parent_dependencies
from .loader import BundleLoader

log = get_logger("ModuleManager")


class ModuleManager:
    """Lädt, konstruiert und cached Extension-Instanzen."""

    def __init__(self, host: Host, loader: BundleLoader, cache: Optional[InstanceCache] = None,
                 mount_root: str = "console", default_instance_id: str = "manual"):
        self.host = host
        self.loader = loader
        self.cache = cache if cache is not None else InstanceCache()
        self.mount_root = mount_root
        self.default_instance_id = default_instance_id

    async def load_engine(self, name: str, instance_id: Optional[str] = None) -> ModuleInstance:
        """
        Liefert die gebootete Instanz. Parallele Aufrufe warten auf dasselbe
        (memoisierte) Future, es wird also nie doppelt konstruiert.
        """
        return await self.engine_future(name, instance_id)

    def engine_future(self, name: str, instance_id: Optional[str] = None) -> asyncio.Future:
        """Memoisiertes Future für (name, instance_id); braucht einen laufenden Event-Loop."""
        instance_id = instance_id or self.default_instance_id

        promise = self.cache.get_promise(name, instance_id)
        if promise is not None:
            return promise

        # Future MUSS vor dem ersten await im Cache liegen
        promise = asyncio.get_running_loop().create_task(self._load(name, instance_id))
        self.cache.set_promise(name, instance_id, promise)
        return promise

    async def _load(self, name: str, instance_id: str) -> ModuleInstance:
        try:
            if not self.loader.is_loaded(name):
                await self.loader.load_bundle(name)
            return await self.construct_engine_instance(name, instance_id)
        except Exception as e:
            # Slot freigeben, damit ein späterer Versuch möglich ist
            self.cache.clear_promise(name, instance_id)
            self.cache.discard(name, instance_id)
            log.error(f"❌ Extension '{name}' konnte nicht geladen werden: {e}")
            raise

    async def construct_engine_instance(self, name: str, instance_id: str) -> ModuleInstance:
        if not self.host.has_registration(f"engine:{name}"):
            raise ExtensionNotFound(name, f"Extension '{name}' sollte geladen werden, ist aber beim Host nicht registriert.")

        instance = self.host.build_child_engine_instance(
            name, instance_id=instance_id, mount_point=mount_path_from_engine_name(name, self.mount_root)
        )

        # 1. Mount-Point aus der Definition korrigieren
        instance.mount_point = self.get_mount_point_from_engine_instance(instance) or instance.mount_point

        # 2. Geteilte Abhängigkeiten vom Host übernehmen
        if instance.base is not None:
            instance.dependencies = setup_parent_dependencies(
                getattr(instance.base, "dependencies", None), self.host.engine_dependencies(name)
            )

        # 3. Vor dem Boot speichern, damit parallele Aufrufe dieselbe Instanz sehen
        self.cache.set(name, instance_id, instance)

        await instance.boot()
        return instance

    def get_mount_point_from_engine_instance(self, instance: Optional[ModuleInstance]) -> Optional[str]:
        if instance is None or instance.base is None:
            return None
        return mount_point_for(instance.base, instance.name, self.mount_root)

    def get_engine_instance(self, name: str, instance_id: Optional[str] = None) -> Optional[ModuleInstance]:
        return self.cache.get(name, instance_id or self.default_instance_id)

    def get_engine_mount_point(self, name: str) -> Optional[str]:
        return self.get_mount_point_from_engine_instance(self.get_engine_instance(name))

    # --- Namensräume der Instanzen ---

    def register_component_in_engine(self, engine_name: str, component, register_as: Optional[str] = None):
        instance = self.get_engine_instance(engine_name)
        return self.register_component_to_engine_instance(instance, component, register_as)

    def register_component_to_engine_instance(self, instance: Optional[ModuleInstance], component, register_as: Optional[str] = None) -> bool:
        name = getattr(component, "__name__", None)
        if instance is None or component is None or not isinstance(name, str):
            return False

        instance.register(f"component:{name}", component, instantiate=False)
        alias = dasherize(name.replace("Component", ""))
        if alias:
            instance.register(f"component:{alias}", component, instantiate=False)
        if isinstance(register_as, str):
            instance.register(f"component:{register_as}", component, instantiate=False)
        return True

    def register_service_in_engine(self, target_engine_name: str, service_name: str, current_instance) -> bool:
        """Teilt eine Service-Instanz aus current_instance mit der Ziel-Extension."""
        target = self.get_engine_instance(target_engine_name)
        if target is None or current_instance is None or not isinstance(service_name, str):
            return False

        shared_service = current_instance.lookup(f"service:{service_name}")
        if shared_service is None:
            return False

        target.register(f"service:{service_name}", shared_service, instantiate=False)
        return True

    def get_service_from_engine(self, engine_name: str, service_name: str, inject: Optional[dict] = None):
        instance = self.get_engine_instance(engine_name)
        if instance is None or not isinstance(service_name, str):
            return None

        service = instance.lookup(f"service:{service_name}")
        if service is not None and inject:
            for attr, value in inject.items():
                setattr(service, attr, value)
        return service
