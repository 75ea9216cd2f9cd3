import asyncio
from typing import Iterable, List, Optional

from universe.bus import bus as global_bus
from universe.config import UniverseSettings
from universe.container import Host
from universe.logger import get_logger
from universe.modules.cache import InstanceCache
from universe.modules.dependencies import map_engines
from universe.modules.loader import BundleLoader, ImportBundleLoader
from universe.modules.manager import ModuleManager
from universe.modules.models import Extension
from universe.modules.scheduler import BootScheduler
from universe.registry.models import MenuItem
from universe.registry.store import RegistryStore

log = get_logger("Universe")


class UniverseService:
    """
    Zentrale Fassade: verbindet Host, Instanz-Cache, ModuleManager, Scheduler und Registries.
    Wird als 'service:universe' beim Host registriert und an setup_extension übergeben.
    """

    def __init__(self, settings: Optional[UniverseSettings] = None, host: Optional[Host] = None,
                 loader: Optional[BundleLoader] = None, router=None, bus=None):
        self.settings = settings or UniverseSettings()
        self.bus = bus or global_bus
        self.host = host or Host()
        self.router = router
        self.cache = InstanceCache()
        self.loader = loader or ImportBundleLoader(self.host, self.settings.plugin_package)
        self.modules = ModuleManager(
            self.host, self.loader, self.cache,
            mount_root=self.settings.mount_root,
            default_instance_id=self.settings.default_instance_id,
        )
        self.registry = RegistryStore(
            bus=self.bus, modules=self.modules, owner=self.host,
            mount_root=self.settings.mount_root,
            lookup_retry_delay=self.settings.lookup_retry_delay,
        )
        self.scheduler = BootScheduler(self.modules, owner=self.host, sink=self, bus=self.bus)

        self.host.register("service:universe", self, instantiate=False)
        self.host.register("service:bus", self.bus, instantiate=False)
        if router is not None:
            self.host.register("service:router", router, instantiate=False)

    # --- Boot ---

    def configure_engines(self, extensions: Iterable[Extension], with_services: Iterable[str] = ()):
        """Legt fest, welche Host-Services und externen Routen jede Extension erbt."""
        self.host.engines.update(map_engines(
            extensions, self.settings.host_services, with_services, self.settings.mount_root
        ))

    async def run_boot_engines(self, extensions: Iterable[Extension]) -> List[str]:
        extensions = list(extensions)
        self.configure_engines(extensions)
        return await self.scheduler.boot_all(extensions)

    def boot_engines(self, extensions: Iterable[Extension]) -> asyncio.Task:
        """Fire-and-forget: startet den Boot als Task; Fehler werden laut geloggt."""
        task = asyncio.get_running_loop().create_task(self.run_boot_engines(extensions))
        task.add_done_callback(self._on_boot_done)
        return task

    def _on_boot_done(self, task: asyncio.Task):
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            log.error(f"💥 Boot-Sequenz fehlgeschlagen: {error}")

    def get_engine_instance(self, name: str, instance_id: Optional[str] = None):
        return self.modules.get_engine_instance(name, instance_id)

    def get_engine_mount_point(self, name: str) -> Optional[str]:
        return self.modules.get_engine_mount_point(name)

    # --- Navigation ---

    def _require_router(self):
        if self.router is None:
            raise RuntimeError("Kein Router konfiguriert.")
        return self.router

    async def transition_to_engine_route(self, engine_name: str, route: str, *args):
        """Stellt der Route den Mount-Point der Extension voran (falls geladen)."""
        router = self._require_router()
        mount_point = self.get_engine_mount_point(engine_name)
        if mount_point:
            return await router.transition_to(f"{mount_point}{route}", *args)
        return await router.transition_to(route, *args)

    async def transition_menu_item(self, route: str, menu_item: MenuItem):
        router = self._require_router()
        return await router.transition_to(route, menu_item.slug, menu_item.view or "index")

    async def refresh_route(self):
        return await self._require_router().refresh()
