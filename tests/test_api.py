from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from universe.api import create_router
from universe.modules.discovery import DirectoryExtensionSource
from universe.services.boot import BootService
from universe.services.universe_service import UniverseService

from conftest import run

PLUGIN_DIR = Path(__file__).resolve().parents[1] / "app" / "plugins"


@pytest.fixture
def client(settings, bus):
    universe = UniverseService(settings, bus=bus)
    run(BootService(universe, source=DirectoryExtensionSource(str(PLUGIN_DIR))).boot())

    app = FastAPI()
    app.include_router(create_router(universe))
    return TestClient(app)


def test_list_registries(client):
    names = client.get("/universe/registries").json()["registries"]

    assert {"admin", "account", "settings", "fleet-ops:component:vehicle-panel"} <= set(names)


def test_registry_serializes_components_by_name(client):
    response = client.get("/universe/registries/admin")

    assert response.status_code == 200
    panel = response.json()["menu_panels"][0]
    assert panel["slug"] == "fleet-ops-config"
    assert panel["items"][0]["component"] == "FleetStatusComponent"

    components = client.get("/universe/registries/fleet-ops:component:vehicle-panel").json()
    assert components["renderable_components"] == ["FleetStatusComponent"]


def test_unknown_registry_is_404(client):
    assert client.get("/universe/registries/nope").status_code == 404
    assert client.get("/universe/registries/nope/menu-items").status_code == 404


def test_menu_items_and_panels(client):
    items = client.get("/universe/registries/settings/menu-items").json()
    panels = client.get("/universe/registries/admin/menu-panels").json()

    assert [i["title"] for i in items] == ["Invoices"]
    assert [p["title"] for p in panels] == ["Fleet-Ops Config"]


def test_lookup(client):
    found = client.get("/universe/registries/admin/lookup", params={"slug": "fleet-ops-config", "view": "avatars"})
    missing = client.get("/universe/registries/admin/lookup", params={"slug": "fleet-ops-config", "view": "nope"})

    assert found.json()["title"] == "Avatars"
    assert missing.status_code == 404


def test_header_menu_uses_class_alias(client):
    header = client.get("/universe/header-menu").json()

    assert header[0]["title"] == "Fleet-Ops"
    assert "class" in header[0]


def test_dashboard_widgets(client):
    widgets = client.get("/universe/dashboard/widgets").json()

    assert widgets["default_widgets"] == []
    assert widgets["widgets"][0]["widget_id"] == "fleet-map"
    assert widgets["widgets"][0]["component"] == "fleet-map"


def test_extensions(client):
    extensions = {e["name"]: e for e in client.get("/universe/extensions").json()}

    assert extensions["fleet_ops"]["mount_point"] == "console.fleet-ops."
    assert extensions["billing"]["finalized"] is True
