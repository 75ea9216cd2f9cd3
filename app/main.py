import os

from fastapi import FastAPI

from universe.api import create_router
from universe.config import load_settings
from universe.logger import get_logger, setup_logging
from universe.modules.discovery import DirectoryExtensionSource, HttpExtensionSource
from universe.services.boot import BootService
from universe.services.universe_service import UniverseService

settings = load_settings()
setup_logging(settings)
log = get_logger("Main")

PLUGIN_DIR = settings.plugin_dir or os.path.join(os.path.dirname(os.path.abspath(__file__)), "plugins")


def create_source():
    # Remote-Liste hat Vorrang vor dem lokalen Plugin-Ordner
    if settings.extensions_url:
        return HttpExtensionSource(settings.extensions_url)
    return DirectoryExtensionSource(PLUGIN_DIR)


universe = UniverseService(settings)
boot_service = BootService(universe, source=create_source())

app = FastAPI()
app.state.universe = universe
app.include_router(create_router(universe))


# --- LIFECYCLE HANDLER ---
@app.on_event("startup")
async def startup_event():
    await boot_service.boot()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8081)
