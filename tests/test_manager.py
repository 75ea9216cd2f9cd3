import asyncio

import pytest

from universe.errors import ExtensionNotFound
from universe.modules.models import ExtensionDefinition

from conftest import run


def test_concurrent_loads_share_one_instance(make_manager):
    boots = []
    definition = ExtensionDefinition(module_prefix="fleet_ops", boot=lambda instance: boots.append(instance))
    manager = make_manager({"fleet_ops": definition}, delays={"fleet_ops": 0.01})

    async def main():
        first = manager.engine_future("fleet_ops")
        assert manager.engine_future("fleet_ops") is first
        return await asyncio.gather(manager.load_engine("fleet_ops"), manager.load_engine("fleet_ops"), first)

    a, b, c = run(main())

    assert a is b is c
    assert manager.loader.calls == ["fleet_ops"]
    assert boots == [a]


def test_load_engine_starts_without_running_loop(make_manager):
    manager = make_manager({"fleet_ops": ExtensionDefinition(module_prefix="fleet_ops")})

    instance = asyncio.run(manager.load_engine("fleet_ops"))

    assert instance.booted
    assert manager.get_engine_instance("fleet_ops") is instance


def test_instance_ids_are_separate_slots(make_manager):
    manager = make_manager({"fleet_ops": ExtensionDefinition(module_prefix="fleet_ops")})

    async def main():
        return await manager.load_engine("fleet_ops"), await manager.load_engine("fleet_ops", "tenant-2")

    default, tenant = run(main())

    assert default is not tenant
    assert default.instance_id == "manual"
    assert tenant.instance_id == "tenant-2"
    assert manager.get_engine_instance("fleet_ops") is default
    assert manager.get_engine_instance("fleet_ops", "tenant-2") is tenant


def test_mount_point_derived_from_name(make_manager):
    manager = make_manager({"fleet-ops-engine": ExtensionDefinition(module_prefix="fleet-ops-engine")})

    instance = run(manager.load_engine("fleet-ops-engine"))

    assert instance.mount_point == "console.fleet-ops."
    assert manager.get_engine_mount_point("fleet-ops-engine") == "console.fleet-ops."


def test_declared_route_prefix_wins(make_manager):
    definition = ExtensionDefinition(module_prefix="billing", mounted_engine_route_prefix="console.invoices")
    manager = make_manager({"billing": definition})

    instance = run(manager.load_engine("billing"))

    assert instance.mount_point == "console.invoices."


def test_unknown_engine_has_no_mount_point(make_manager):
    manager = make_manager()

    assert manager.get_engine_mount_point("nope") is None
    assert manager.get_engine_instance("nope") is None


def test_host_dependencies_are_merged(make_manager, host):
    host.engines["billing"] = {"dependencies": {"services": ["universe", "bus"], "externalRoutes": {"console": "console.home"}}}
    host.register("service:universe", "the-universe", instantiate=False)
    definition = ExtensionDefinition(
        module_prefix="billing",
        dependencies={"services": ["notifications", {"hub": "bus"}], "externalRoutes": ["billing"]},
    )
    manager = make_manager({"billing": definition})

    instance = run(manager.load_engine("billing"))

    assert instance.dependencies["services"] == {"universe": "universe", "bus": "bus", "notifications": "notifications", "hub": "bus"}
    assert instance.dependencies["externalRoutes"] == {"console": "console.home", "billing": "billing"}
    assert instance.lookup("service:universe") == "the-universe"


def test_missing_registration_raises_not_found(make_manager):
    manager = make_manager()

    with pytest.raises(ExtensionNotFound) as info:
        run(manager.load_engine("ghost"))

    assert info.value.name == "ghost"
    assert ("ghost", "manual") not in manager.cache


def test_failed_bundle_frees_slot_for_retry(make_manager):
    manager = make_manager(
        {"fleet_ops": ExtensionDefinition(module_prefix="fleet_ops")},
        failures={"fleet_ops": RuntimeError("network down")},
    )

    async def main():
        with pytest.raises(RuntimeError):
            await manager.load_engine("fleet_ops")
        assert manager.cache.get_promise("fleet_ops", "manual") is None
        return await manager.load_engine("fleet_ops")

    instance = run(main())

    assert instance.name == "fleet_ops"
    assert manager.loader.calls == ["fleet_ops", "fleet_ops"]


def test_failed_boot_discards_instance(make_manager):
    def boot(instance):
        raise RuntimeError("boot failed")

    manager = make_manager({"fleet_ops": ExtensionDefinition(module_prefix="fleet_ops", boot=boot)})

    with pytest.raises(RuntimeError):
        run(manager.load_engine("fleet_ops"))

    assert manager.get_engine_instance("fleet_ops") is None


def test_instance_is_cached_before_boot(make_manager):
    seen = []

    async def boot(instance):
        seen.append(manager.get_engine_instance("fleet_ops"))

    manager = make_manager({"fleet_ops": ExtensionDefinition(module_prefix="fleet_ops", boot=boot)})

    instance = run(manager.load_engine("fleet_ops"))

    assert seen == [instance]
    assert instance.booted


def test_register_component_aliases(make_manager):
    manager = make_manager({"fleet_ops": ExtensionDefinition(module_prefix="fleet_ops")})
    instance = run(manager.load_engine("fleet_ops"))

    class VehiclePanelComponent:
        pass

    assert manager.register_component_in_engine("fleet_ops", VehiclePanelComponent, "vehicle-panel")

    for alias in ("VehiclePanelComponent", "vehicle-panel"):
        assert instance.lookup(f"component:{alias}") is VehiclePanelComponent


def test_register_component_named_component_skips_empty_alias(make_manager):
    manager = make_manager({"fleet_ops": ExtensionDefinition(module_prefix="fleet_ops")})
    instance = run(manager.load_engine("fleet_ops"))

    Component = type("Component", (), {})

    assert manager.register_component_in_engine("fleet_ops", Component)
    assert instance.lookup("component:Component") is Component


def test_register_component_into_unknown_engine_is_noop(make_manager):
    manager = make_manager()

    class Anything:
        pass

    assert manager.register_component_in_engine("ghost", Anything) is False
    assert manager.register_component_to_engine_instance(None, Anything) is False


def test_service_sharing_and_injection(make_manager):
    class VehicleService:
        region = "eu"

    definitions = {
        "fleet_ops": ExtensionDefinition(module_prefix="fleet_ops", boot=lambda i: i.register("service:vehicles", VehicleService)),
        "billing": ExtensionDefinition(module_prefix="billing"),
    }
    manager = make_manager(definitions)

    async def main():
        return await manager.load_engine("fleet_ops"), await manager.load_engine("billing")

    fleet_ops, billing = run(main())

    assert manager.register_service_in_engine("billing", "vehicles", fleet_ops)
    shared = manager.get_service_from_engine("billing", "vehicles", inject={"region": "us"})

    assert shared is fleet_ops.lookup("service:vehicles")
    assert isinstance(shared, VehicleService)
    assert shared.region == "us"
    assert manager.register_service_in_engine("billing", "unknown", fleet_ops) is False
    assert manager.get_service_from_engine("ghost", "vehicles") is None
