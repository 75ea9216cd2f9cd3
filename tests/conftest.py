"""Gemeinsame Fixtures: frischer Bus, Host und ein steuerbarer Bundle-Loader pro Test."""
import asyncio

import pytest

from universe.bus import EventBus
from universe.config import UniverseSettings
from universe.container import Host
from universe.modules.loader import BundleLoader
from universe.modules.manager import ModuleManager
from universe.modules.models import Extension, ExtensionDefinition
from universe.services.universe_service import UniverseService


class FakeBundleLoader(BundleLoader):
    """Registriert vorbereitete Definitionen beim Host, optional verzögert oder einmalig fehlschlagend."""

    def __init__(self, host, definitions=None, delays=None, failures=None):
        self.host = host
        self.definitions = dict(definitions or {})
        self.delays = dict(delays or {})
        self.failures = dict(failures or {})
        self.calls = []
        self._loaded = set()

    def is_loaded(self, name):
        return name in self._loaded

    async def load_bundle(self, name):
        self.calls.append(name)
        await asyncio.sleep(self.delays.get(name, 0))
        if name in self.failures:
            raise self.failures.pop(name)
        if name in self.definitions:
            self.host.register(f"engine:{name}", self.definitions[name], instantiate=False)
        self._loaded.add(name)


def make_definition(name, deps=(), log=None, **kwargs):
    """Definition, deren setup_extension den Namen in 'log' protokolliert."""
    def setup_extension(host, instance, sink):
        if log is not None:
            log.append(name)

    return ExtensionDefinition(
        module_prefix=name,
        engine_dependencies=list(deps),
        setup_extension=setup_extension,
        **kwargs,
    )


def extensions(*names):
    return [Extension(name=name) for name in names]


@pytest.fixture
def bus():
    return EventBus("TestBus")


@pytest.fixture
def settings():
    return UniverseSettings(lookup_retry_delay=0.01)


@pytest.fixture
def host():
    return Host()


@pytest.fixture
def make_manager(host):
    def factory(definitions=None, **loader_kwargs):
        loader = FakeBundleLoader(host, definitions, **loader_kwargs)
        return ModuleManager(host, loader)
    return factory


@pytest.fixture
def make_universe(settings, bus):
    def factory(definitions=None, router=None, **loader_kwargs):
        host = Host()
        loader = FakeBundleLoader(host, definitions, **loader_kwargs)
        return UniverseService(settings, host=host, loader=loader, router=router, bus=bus)
    return factory


def run(coro):
    return asyncio.run(coro)
