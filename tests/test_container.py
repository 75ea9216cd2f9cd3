import asyncio

import pytest

from universe.container import Container, Host, ModuleInstance
from universe.modules.models import ExtensionDefinition


class Session:
    pass


def test_register_and_lookup_plain_value():
    container = Container()
    container.register("config:environment", {"debug": True})

    assert container.has_registration("config:environment")
    assert container.lookup("config:environment") == {"debug": True}


def test_class_registration_is_instantiated_once():
    container = Container()
    container.register("service:session", Session)

    first = container.lookup("service:session")
    assert isinstance(first, Session)
    assert container.lookup("service:session") is first


def test_class_registration_without_instantiate_returns_class():
    container = Container()
    container.register("component:session", Session, instantiate=False)

    assert container.lookup("component:session") is Session


def test_lookup_miss_returns_none():
    assert Container().lookup("service:missing") is None


@pytest.mark.parametrize("name", ["session", ":session", "service:", 42])
def test_malformed_names_are_rejected(name):
    with pytest.raises(ValueError):
        Container().register(name, object())


def test_unregister():
    container = Container()
    container.register("service:session", Session)
    container.unregister("service:session")

    assert not container.has_registration("service:session")


def test_module_instance_falls_back_to_shared_host_services():
    host = Host()
    host.register("service:session", Session)
    instance = ModuleInstance("fleet_ops", ExtensionDefinition(module_prefix="fleet_ops"), host=host)
    instance.dependencies = {"services": {"session": "session"}, "externalRoutes": {}}

    assert instance.lookup("service:session") is host.lookup("service:session")
    # Nicht freigegebene Services bleiben unsichtbar
    host.register("service:secret", Session)
    assert instance.lookup("service:secret") is None


def test_module_instance_boot_hook_runs_once():
    calls = []

    async def boot(instance):
        calls.append(instance.name)

    instance = ModuleInstance("fleet_ops", ExtensionDefinition(module_prefix="fleet_ops", boot=boot))

    async def main():
        await instance.boot()
        await instance.boot()

    asyncio.run(main())

    assert calls == ["fleet_ops"]
    assert instance.booted is True


def test_host_builds_child_instance_from_engine_registration():
    host = Host()
    definition = ExtensionDefinition(module_prefix="billing")
    host.register("engine:billing", definition, instantiate=False)

    instance = host.build_child_engine_instance("billing", instance_id="manual", mount_point="console.billing")

    assert instance.base is definition
    assert instance.host is host
    assert instance.mount_point == "console.billing"
    assert instance.finalized is False
