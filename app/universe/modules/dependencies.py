from typing import Any, Dict, Iterable, List, Optional

from universe.modules.models import Extension, short_name
from universe.strings import dasherize


def mount_path_from_engine_name(engine_name: str, mount_root: str = "console") -> str:
    """'@scope/fleet-ops-engine' -> 'console.fleet-ops'"""
    return f"{mount_root}.{short_name(engine_name)}"


def mount_point_for(base, name: str, mount_root: str = "console") -> str:
    """Deklariertes Routen-Präfix, sonst aus dem Namen abgeleitet; immer mit '.' am Ende."""
    prefix = getattr(base, "mounted_engine_route_prefix", None)
    if not prefix:
        prefix = mount_path_from_engine_name(getattr(base, "module_prefix", None) or name, mount_root)
    if not prefix.endswith("."):
        prefix = prefix + "."
    return prefix


def _entries_to_mapping(entries: Any) -> Dict[str, Any]:
    if isinstance(entries, dict):
        return dict(entries)

    mapping = {}
    if isinstance(entries, (list, tuple)):
        for entry in entries:
            # Mapping-Einträge werden flach überlagert, Strings zeigen auf sich selbst
            if isinstance(entry, dict):
                mapping.update(entry)
                continue
            mapping[entry] = entry
    return mapping


def setup_parent_dependencies(base_dependencies: Optional[dict] = None, host_dependencies: Optional[dict] = None) -> dict:
    """
    Führt die vom Host freigegebenen Abhängigkeiten mit denen der Extension zusammen
    und normalisiert 'services' / 'externalRoutes' zu eindeutigen Mappings.
    """
    host_dependencies = host_dependencies or {}
    base_dependencies = base_dependencies or {}

    dependencies = {**host_dependencies, **base_dependencies}
    for key in ("services", "externalRoutes"):
        merged = _entries_to_mapping(host_dependencies.get(key))
        merged.update(_entries_to_mapping(base_dependencies.get(key)))
        dependencies[key] = merged
    return dependencies


def map_engines(extensions: Iterable[Extension], host_services: Iterable[str] = (), with_services: Iterable[str] = (), mount_root: str = "console") -> Dict[str, dict]:
    """Baut pro Extension die Abhängigkeits-Deklaration, die der Host freigibt."""
    extensions = list(extensions)
    external_routes = {
        "console": f"{mount_root}.home",
        "extensions": f"{mount_root}.extensions",
    }
    for extension in extensions:
        path = dasherize(extension.extension or short_name(extension.name))
        external_routes[path] = f"{mount_root}.{path}"

    services: List[str] = [*host_services, *with_services]
    return {
        extension.name: {
            "dependencies": {
                "services": list(services),
                "externalRoutes": dict(external_routes),
            }
        }
        for extension in extensions
    }
