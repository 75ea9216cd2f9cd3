from .menu import collapse_view, create_menu_item, create_menu_panel
from .models import DashboardWidget, MenuItem, MenuPanel, Registry
from .store import RegistryStore
from .widgets import create_dashboard_widget

__all__ = [
    "DashboardWidget",
    "MenuItem",
    "MenuPanel",
    "Registry",
    "RegistryStore",
    "collapse_view",
    "create_dashboard_widget",
    "create_menu_item",
    "create_menu_panel",
]
