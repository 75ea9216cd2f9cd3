from universe.bus import bus as global_bus
from universe.errors import MisconfiguredExtension
from universe.logger import get_logger
from universe.modules.discovery import load_installed_extensions

log = get_logger("BootService")


class BootService:
    def __init__(self, universe, source=None, bus=None):
        self.universe = universe
        self.source = source
        self.bus = bus or universe.bus
        self.is_booting = False
        self.booted = []
        self.bus.subscribe("system:ready")(self.on_system_ready)

    async def on_system_ready(self, payload):
        await self.boot()

    async def boot(self):
        self.is_booting = True
        log.info("📦 Lade Extensions...")
        try:
            extensions = await load_installed_extensions(self.source, self.universe.settings.extensions)
            self.booted = await self.universe.run_boot_engines(extensions)
        except MisconfiguredExtension as e:
            # Host entscheidet selbst, ob er mit den gebooteten Extensions weitermacht
            self.booted = list(self.universe.scheduler.booted)
            self.bus.emit("system:boot_complete", {"status": "failed", "booted": self.booted, "error": str(e)})
            return self.booted
        finally:
            self.is_booting = False

        log.info("✅ Boot-Sequenz abgeschlossen. System freigegeben.")
        self.bus.emit("system:boot_complete", {"status": "success", "booted": self.booted})
        return self.booted
