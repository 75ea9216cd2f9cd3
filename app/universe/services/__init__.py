from .universe_service import UniverseService

__all__ = ["UniverseService"]
