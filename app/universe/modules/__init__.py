from .cache import InstanceCache
from .discovery import (
    DirectoryExtensionSource,
    ExtensionSource,
    HttpExtensionSource,
    StaticExtensionSource,
    load_installed_extensions,
)
from .loader import BundleLoader, ImportBundleLoader
from .manager import ModuleManager
from .models import Extension, ExtensionDefinition
from .scheduler import BootScheduler

__all__ = [
    "BootScheduler",
    "BundleLoader",
    "DirectoryExtensionSource",
    "Extension",
    "ExtensionDefinition",
    "ExtensionSource",
    "HttpExtensionSource",
    "ImportBundleLoader",
    "InstanceCache",
    "ModuleManager",
    "StaticExtensionSource",
    "load_installed_extensions",
]
