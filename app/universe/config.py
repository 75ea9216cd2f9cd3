import os
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from universe.logger import get_logger

log = get_logger("Config")

DEFAULT_HOST_SERVICES = ["universe", "bus", "router", "session", "notifications"]


class UniverseSettings(BaseModel):
    debug: bool = False
    log_dir: Optional[str] = None

    # Routing
    mount_root: str = Field(default="console", description="Präfix für alle Mount-Points")
    default_instance_id: str = Field(default="manual", description="Logischer Slot pro Extension")

    # Registry
    lookup_retry_delay: float = Field(default=0.1, ge=0, description="Sekunden bis zum einmaligen Retry")

    # Extensions
    extensions: List[str] = Field(default_factory=list, description="Zusätzliche Core-Extensions")
    plugin_dir: Optional[str] = None
    plugin_package: str = "plugins"
    extensions_url: Optional[str] = None
    host_services: List[str] = Field(default_factory=lambda: list(DEFAULT_HOST_SERVICES))


# ENV-Variable -> Feld
ENV_MAPPING = {
    "UNIVERSE_DEBUG": "debug",
    "UNIVERSE_LOG_DIR": "log_dir",
    "UNIVERSE_MOUNT_ROOT": "mount_root",
    "UNIVERSE_LOOKUP_RETRY_DELAY": "lookup_retry_delay",
    "UNIVERSE_EXTENSIONS": "extensions",
    "UNIVERSE_PLUGIN_DIR": "plugin_dir",
    "UNIVERSE_PLUGIN_PACKAGE": "plugin_package",
    "UNIVERSE_EXTENSIONS_URL": "extensions_url",
}


def _read_env(env: Dict[str, str]) -> dict:
    values = {}
    for env_name, field in ENV_MAPPING.items():
        raw = env.get(env_name)
        if raw is None or raw == "":
            continue
        if field == "debug":
            values[field] = raw.lower() == "true"
        elif field == "extensions":
            values[field] = [name.strip() for name in raw.split(",") if name.strip()]
        else:
            values[field] = raw
    return values


def load_settings(path: Optional[str] = None, env: Optional[Dict[str, str]] = None) -> UniverseSettings:
    """Defaults <- YAML-Datei <- Umgebungsvariablen."""
    if env is None:
        env = dict(os.environ)

    values = {}
    config_path = path or env.get("UNIVERSE_CONFIG")
    if config_path:
        with open(config_path, 'r', encoding='utf-8') as f:
            file_values = yaml.safe_load(f) or {}
        if not isinstance(file_values, dict):
            raise ValueError(f"Konfiguration in '{config_path}' muss ein Mapping sein.")
        values.update(file_values)
        log.debug(f"📄 Konfiguration aus {config_path} geladen.")

    values.update(_read_env(env))
    return UniverseSettings(**values)
