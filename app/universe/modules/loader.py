import importlib
from typing import Optional, Set

from universe.errors import ExtensionNotFound
from universe.logger import get_logger
from .models import ExtensionDefinition

log = get_logger("BundleLoader")


class BundleLoader:
    """Schnittstelle: lädt den Code einer Extension und registriert 'engine:<name>' beim Host."""

    def is_loaded(self, name: str) -> bool:
        raise NotImplementedError

    async def load_bundle(self, name: str):
        raise NotImplementedError


class ImportBundleLoader(BundleLoader):
    """Lädt Extensions als Python-Pakete: '<package>.<name>' mit einem 'extension'-Attribut."""

    def __init__(self, host, package: Optional[str] = None):
        self.host = host
        self.package = package
        self._loaded: Set[str] = set()

    def module_path(self, name: str) -> str:
        return f"{self.package}.{name}" if self.package else name

    def is_loaded(self, name: str) -> bool:
        return name in self._loaded or self.host.has_registration(f"engine:{name}")

    async def load_bundle(self, name: str):
        if self.is_loaded(name):
            return

        full_module_name = self.module_path(name)
        try:
            # 1. Modul dynamisch importieren
            module = importlib.import_module(full_module_name)
        except ModuleNotFoundError as e:
            if e.name and full_module_name.startswith(e.name):
                raise ExtensionNotFound(name, f"Modul '{full_module_name}' nicht gefunden.") from e
            raise

        # 2. Prüfen, ob es eine Extension ist
        if not hasattr(module, "extension"):
            raise ExtensionNotFound(name, f"'{full_module_name}' exportiert keine 'extension'-Definition.")

        # 3. Definition validieren (Pydantic übernimmt die Typprüfung!)
        raw_definition = module.extension
        if isinstance(raw_definition, dict):
            definition = ExtensionDefinition(**{"module_prefix": name, **raw_definition})
        elif isinstance(raw_definition, ExtensionDefinition):
            definition = raw_definition
        else:
            raise ValueError("Extension muss ein Dictionary oder ExtensionDefinition-Objekt sein.")

        # 4. Hooks auf Modulebene übernehmen, falls nicht in der Definition
        for hook in ("setup_extension", "boot"):
            if getattr(definition, hook) is None and callable(getattr(module, hook, None)):
                setattr(definition, hook, getattr(module, hook))

        self.host.register(f"engine:{name}", definition, instantiate=False)
        self._loaded.add(name)
        log.info(f"📦 Bundle geladen: {name} ({full_module_name})")
