import asyncio
from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from universe.bus import bus as global_bus
from universe.container import ModuleInstance
from universe.errors import MisconfiguredExtension
from universe.logger import get_logger
from .manager import ModuleManager
from .models import Extension

log = get_logger("BootScheduler")


class PendingBoot:
    def __init__(self, extension: Extension, instance: ModuleInstance, unmet: Set[str]):
        self.extension = extension
        self.instance = instance
        self.unmet = unmet

    @property
    def name(self) -> str:
        return self.extension.name


class BootScheduler:
    """
    Finalisiert Extensions (setup_extension), sobald alle ihre Abhängigkeiten finalisiert sind.

    Die Reihenfolge ergibt sich aus dem Abschluss der Ladevorgänge und der
    Abhängigkeiten, nicht aus einer globalen Sortierung. Jede Finalisierung
    gibt die darauf wartenden Extensions frei, bis nichts mehr passiert.
    """

    def __init__(self, manager: ModuleManager, owner=None, sink=None, bus=None):
        self.manager = manager
        self.owner = owner
        self.sink = sink
        self.bus = bus or global_bus
        self._reset()

    def _reset(self):
        self.booted: List[str] = []
        self.pending: Dict[str, PendingBoot] = {}
        self.failed: Dict[str, Exception] = {}
        self._booted: Set[str] = set()
        # Abhängigkeit -> Extensions, die darauf warten
        self._waiting: Dict[str, List[str]] = {}

    async def boot_all(self, extensions: Iterable[Extension]) -> List[str]:
        self._reset()
        extensions = list(extensions)
        log.info(f"🚀 Starte Boot-Sequenz für {len(extensions)} Extension(s)...")

        await asyncio.gather(*(self._try_boot(extension) for extension in extensions))

        if self.pending:
            raise self._unsatisfiable()

        log.info(f"✅ Boot-Sequenz abgeschlossen: {len(self.booted)} Extension(s) gebootet.")
        return list(self.booted)

    async def _try_boot(self, extension: Extension):
        try:
            instance = await self.manager.load_engine(extension.name)
        except Exception as e:
            # Betrifft nur diese Extension, der Rest bootet weiter
            self.failed[extension.name] = e
            return
        self.on_loaded(extension, instance)

    def dependencies_of(self, extension: Extension, instance: ModuleInstance) -> List[str]:
        declared = list(getattr(instance.base, "engine_dependencies", None) or [])
        for dependency in extension.dependencies:
            if dependency not in declared:
                declared.append(dependency)
        return declared

    def on_loaded(self, extension: Extension, instance: ModuleInstance):
        name = extension.name
        if name in self._booted or name in self.pending or name in self.failed:
            return

        if getattr(instance, "finalized", False):
            # Schon in einem früheren Lauf finalisiert
            self._mark_booted(name, instance)
            self._release(name)
            return

        if not callable(getattr(instance.base, "setup_extension", None)):
            # Ohne Hook wird nichts finalisiert und nichts als gebootet vermerkt
            log.debug(f"{name} hat kein setup_extension, übersprungen.")
            return

        unmet = {dep for dep in self.dependencies_of(extension, instance) if dep not in self._booted}
        if unmet:
            log.debug(f"⏳ {name} wartet auf: {', '.join(sorted(unmet))}")
            self.pending[name] = PendingBoot(extension, instance, unmet)
            for dep in unmet:
                self._waiting.setdefault(dep, []).append(name)
            return

        if self._finalize(extension, instance):
            self._release(name)

    def _finalize(self, extension: Extension, instance: ModuleInstance) -> bool:
        try:
            instance.base.setup_extension(self.owner, instance, self.sink)
        except Exception as e:
            self.failed[extension.name] = e
            log.error(f"💥 setup_extension von '{extension.name}' fehlgeschlagen: {e}", exc_info=True)
            return False

        instance.finalized = True
        self._mark_booted(extension.name, instance)
        return True

    def _mark_booted(self, name: str, instance: ModuleInstance):
        self.booted.append(name)
        self._booted.add(name)
        log.info(f"🧩 Booted : {name}")
        self.bus.emit("extension.booted", {"name": name, "instance": instance})

    def _release(self, name: str):
        """Gibt alle Extensions frei, die nur noch auf 'name' gewartet haben (transitiv)."""
        queue = deque([name])
        while queue:
            done = queue.popleft()
            for dependent in self._waiting.pop(done, []):
                entry = self.pending.get(dependent)
                if entry is None:
                    continue
                entry.unmet.discard(done)
                if entry.unmet:
                    continue
                del self.pending[dependent]
                if self._finalize(entry.extension, entry.instance):
                    queue.append(dependent)

    def _unsatisfiable(self) -> MisconfiguredExtension:
        unsatisfied = list(self.pending)
        missing = sorted({
            dep for entry in self.pending.values() for dep in entry.unmet if dep not in self.pending
        })
        cycle = self.find_cycle()

        error = MisconfiguredExtension(unsatisfied, missing=missing, cycle=cycle or ())
        log.error(f"💥 {error}")
        self.bus.emit("extensions.boot_failed", {"unsatisfied": unsatisfied, "missing": missing, "cycle": cycle})
        return error

    def find_cycle(self) -> Optional[List[str]]:
        """Sucht einen Zyklus unter den wartenden Extensions, z.B. ['a', 'b', 'a']."""
        visiting: List[str] = []
        done: Set[str] = set()

        def visit(name: str) -> Optional[List[str]]:
            if name in visiting:
                return visiting[visiting.index(name):] + [name]
            if name in done or name not in self.pending:
                return None
            visiting.append(name)
            for dep in sorted(self.pending[name].unmet):
                found = visit(dep)
                if found:
                    return found
            visiting.pop()
            done.add(name)
            return None

        for name in self.pending:
            found = visit(name)
            if found:
                return found
        return None
