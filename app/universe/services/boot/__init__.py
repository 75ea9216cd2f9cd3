from .boot_service import BootService

__all__ = ["BootService"]
