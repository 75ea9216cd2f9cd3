import asyncio
from typing import Dict, Iterator, Optional, Tuple

from universe.container import ModuleInstance

Key = Tuple[str, str]


class InstanceCache:
    """
    Prozessweiter Speicher für laufende/fertige Konstruktionen pro (name, instance_id).
    Garantiert, dass eine Extension pro Slot genau einmal erzeugt wird.
    """

    def __init__(self):
        self._promises: Dict[Key, asyncio.Future] = {}
        self._instances: Dict[Key, ModuleInstance] = {}

    # --- Futures ---

    def get_promise(self, name: str, instance_id: str) -> Optional[asyncio.Future]:
        return self._promises.get((name, instance_id))

    def set_promise(self, name: str, instance_id: str, promise: asyncio.Future):
        self._promises[(name, instance_id)] = promise

    def clear_promise(self, name: str, instance_id: str):
        self._promises.pop((name, instance_id), None)

    # --- Instanzen ---

    def get(self, name: str, instance_id: str) -> Optional[ModuleInstance]:
        return self._instances.get((name, instance_id))

    def set(self, name: str, instance_id: str, instance: ModuleInstance):
        self._instances[(name, instance_id)] = instance

    def discard(self, name: str, instance_id: str):
        self._instances.pop((name, instance_id), None)

    def instances(self) -> Iterator[ModuleInstance]:
        return iter(list(self._instances.values()))

    def clear(self):
        self._promises.clear()
        self._instances.clear()

    def __contains__(self, key: Key) -> bool:
        return key in self._instances or key in self._promises

    def __len__(self):
        return len(self._instances)
