import asyncio
import os
import pkgutil
from typing import Iterable, List

import requests
import yaml

from universe.logger import get_logger
from .models import Extension

log = get_logger("Discovery")

MANIFEST_FILE = "extension.yaml"


class ExtensionSource:
    async def fetch(self) -> List[Extension]:
        raise NotImplementedError


class StaticExtensionSource(ExtensionSource):
    def __init__(self, extensions: Iterable = ()):
        self.extensions = [_to_extension(e) for e in extensions]

    async def fetch(self) -> List[Extension]:
        return list(self.extensions)


class DirectoryExtensionSource(ExtensionSource):
    """Scannt ein Verzeichnis nach Paketen; optionale extension.yaml liefert Metadaten."""

    def __init__(self, directory: str):
        self.directory = directory

    async def fetch(self) -> List[Extension]:
        if not os.path.exists(self.directory):
            log.warning(f"⚠️ Verzeichnis nicht gefunden: {self.directory}")
            return []

        log.debug(f"📂 Scanne Verzeichnis: {self.directory}")
        extensions = []
        for _, name, is_pkg in sorted(pkgutil.iter_modules([self.directory]), key=lambda m: m.name):
            if not is_pkg:
                continue
            data = {"name": name}
            manifest_file = os.path.join(self.directory, name, MANIFEST_FILE)
            if os.path.exists(manifest_file):
                with open(manifest_file, 'r', encoding='utf-8') as f:
                    data.update(yaml.safe_load(f) or {})
                data["name"] = name
            extensions.append(Extension(**data))
        return extensions


class HttpExtensionSource(ExtensionSource):
    """Holt die installierten Extensions als JSON-Liste von einer API."""

    def __init__(self, url: str, timeout: float = 3, headers: dict = None):
        self.url = url
        self.timeout = timeout
        self.headers = headers or {}

    def _get(self):
        response = requests.get(self.url, headers=self.headers, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    async def fetch(self) -> List[Extension]:
        payload = await asyncio.to_thread(self._get)
        if isinstance(payload, dict):
            payload = payload.get("extensions", [])
        return [_to_extension(item) for item in payload]


def _to_extension(item) -> Extension:
    if isinstance(item, Extension):
        return item
    if isinstance(item, str):
        return Extension(name=item)
    return Extension(**item)


async def load_installed_extensions(source: ExtensionSource, additional: Iterable[str] = ()) -> List[Extension]:
    """Entdeckte Extensions plus statisch konfigurierte Namen, ohne Dubletten."""
    extensions = await source.fetch() if source is not None else []

    merged = {}
    for extension in [*extensions, *(_to_extension(a) for a in additional)]:
        if extension.name in merged:
            log.debug(f"Überspringe doppelte Extension '{extension.name}'")
            continue
        merged[extension.name] = extension

    log.info(f"🔎 {len(merged)} Extension(s) entdeckt.")
    return list(merged.values())
