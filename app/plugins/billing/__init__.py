# ==========================================
# 1. DEFINITION: als Dictionary, Hooks auf Modulebene
# ==========================================
extension = {
    "engine_dependencies": ["fleet_ops"],
    "mounted_engine_route_prefix": "console.billing",
}


def setup_extension(host, instance, universe):
    # Fleet-Ops ist garantiert schon finalisiert
    universe.modules.register_service_in_engine(
        "billing", "vehicles", universe.get_engine_instance("fleet_ops")
    )

    universe.registry.register_settings_menu_item(
        "Invoices", route="billing.invoices", icon="file-invoice", slug="billing"
    )
    universe.registry.register_user_menu_item("My Invoices", route=f"{instance.mount_point}invoices")
