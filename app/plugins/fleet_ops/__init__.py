from universe.modules.models import ExtensionDefinition

# ==========================================
# 1. DEFINITION: Identifikation & Abhängigkeiten
# ==========================================
extension = ExtensionDefinition(
    module_prefix="fleet_ops",
    dependencies={
        "services": ["universe", "bus"],
        "externalRoutes": ["console"],
    },
)


class FleetStatusComponent:
    """Platzhalter-Komponente, die Host-UI rendert sie über ihren Namen."""
    title = "Flottenstatus"


class FleetMapWidget:
    widget_id = "fleet-map"


# ==========================================
# 2. BOOT: eigener Service im Namensraum
# ==========================================
class VehicleService:
    def __init__(self):
        self.vehicles = []

    def add(self, vehicle: str):
        self.vehicles.append(vehicle)
        return vehicle


def boot(instance):
    instance.register("service:vehicles", VehicleService)


# ==========================================
# 3. SETUP: Beiträge zu den Registries
# ==========================================
def setup_extension(host, instance, universe):
    registry = universe.registry

    registry.register_header_menu_item("Fleet-Ops", f"{instance.mount_point}home", icon="route", priority=0)
    registry.register_admin_menu_panel("Fleet-Ops Config", [
        {"title": "Navigator App", "component": FleetStatusComponent},
        {"title": "Avatars"},
    ])
    registry.register_renderable_component("fleet_ops", "fleet-ops:component:vehicle-panel", FleetStatusComponent)
    registry.register_dashboard_widgets({
        "name": "Fleet Map",
        "description": "Live-Karte aller Fahrzeuge.",
        "icon": "map",
        "component": FleetMapWidget,
        "grid_options": {"w": 12, "h": 6},
    })
    universe.bus.emit("fleet_ops:ready", {"mount_point": instance.mount_point})
