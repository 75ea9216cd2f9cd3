import asyncio

from universe.config import UniverseSettings
from universe.container import Host
from universe.modules.discovery import StaticExtensionSource
from universe.services.boot import BootService
from universe.services.universe_service import UniverseService

from conftest import FakeBundleLoader, make_definition, run


def record(bus, topic):
    events = []
    bus.on(topic, events.append)
    return events


def test_boot_success(make_universe, bus):
    completed = record(bus, "system:boot_complete")
    universe = make_universe({"a": make_definition("a"), "b": make_definition("b", ["a"])})
    service = BootService(universe, source=StaticExtensionSource(["b", "a"]))

    booted = run(service.boot())

    assert booted == ["a", "b"]
    assert service.is_booting is False
    assert completed == [{"status": "success", "booted": ["a", "b"]}]


def test_boot_with_unsatisfiable_dependencies_keeps_partial_result(make_universe, bus):
    completed = record(bus, "system:boot_complete")
    universe = make_universe({"a": make_definition("a"), "b": make_definition("b", ["ghost"])})
    service = BootService(universe, source=StaticExtensionSource(["a", "b"]))

    booted = run(service.boot())

    assert booted == ["a"]
    assert service.is_booting is False
    assert completed[0]["status"] == "failed"
    assert completed[0]["booted"] == ["a"]
    assert "b" in completed[0]["error"]


def test_configured_extensions_are_added(bus):
    log = []
    host = Host()
    loader = FakeBundleLoader(host, {"a": make_definition("a", log=log), "core": make_definition("core", log=log)})
    universe = UniverseService(UniverseSettings(extensions=["core"]), host=host, loader=loader, bus=bus)
    service = BootService(universe, source=StaticExtensionSource(["a"]))

    assert sorted(run(service.boot())) == ["a", "core"]
    assert sorted(log) == ["a", "core"]


def test_system_ready_triggers_boot(make_universe, bus):
    universe = make_universe({"a": make_definition("a")})
    service = BootService(universe, source=StaticExtensionSource(["a"]))

    async def main():
        done = asyncio.Event()
        bus.on("system:boot_complete", lambda payload: done.set())
        bus.emit("system:ready")
        await asyncio.wait_for(done.wait(), timeout=1)

    run(main())

    assert service.booted == ["a"]
