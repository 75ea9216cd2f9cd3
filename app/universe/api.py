from typing import Optional

from fastapi import APIRouter, HTTPException

from universe.services.universe_service import UniverseService


def _dump(model):
    return model.model_dump(mode="json", by_alias=True)


def create_router(universe: UniverseService) -> APIRouter:
    """Read-only JSON-Sicht auf die Registries für die Host-UI."""
    router = APIRouter(prefix="/universe", tags=["universe"])
    store = universe.registry

    def _registry_or_404(name: str):
        registry = store.get_registry(name)
        if registry is None:
            raise HTTPException(status_code=404, detail=f"Registry '{name}' existiert nicht.")
        return registry

    @router.get("/registries")
    async def list_registries():
        return {"registries": store.registry_names()}

    @router.get("/registries/{name}")
    async def get_registry(name: str):
        return _dump(_registry_or_404(name))

    @router.get("/registries/{name}/menu-items")
    async def get_menu_items(name: str):
        _registry_or_404(name)
        return [_dump(item) for item in store.get_menu_items_from_registry(name)]

    @router.get("/registries/{name}/menu-panels")
    async def get_menu_panels(name: str):
        _registry_or_404(name)
        return [_dump(panel) for panel in store.get_menu_panels_from_registry(name)]

    @router.get("/registries/{name}/lookup")
    async def lookup_menu_item(name: str, slug: str, view: Optional[str] = None):
        _registry_or_404(name)
        menu_item = store.lookup_menu_item_from_registry(name, slug, view)
        if menu_item is None:
            raise HTTPException(status_code=404, detail=f"Kein Menüpunkt für '{slug}/{view}'.")
        return _dump(menu_item)

    @router.get("/header-menu")
    async def get_header_menu():
        return [_dump(item) for item in store.header_menu_items]

    @router.get("/dashboard/widgets")
    async def get_dashboard_widgets():
        return {
            "default_widgets": [_dump(w) for w in store.get_default_dashboard_widgets()],
            "widgets": [_dump(w) for w in store.get_dashboard_widgets()],
        }

    @router.get("/extensions")
    async def get_extensions():
        return [
            {
                "name": instance.name,
                "instance_id": instance.instance_id,
                "mount_point": instance.mount_point,
                "finalized": instance.finalized,
            }
            for instance in universe.cache.instances()
        ]

    return router
