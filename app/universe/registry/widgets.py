import hashlib
import inspect
from typing import Union

from .models import DashboardWidget

WIDGET_FIELDS = ("widget_id", "name", "description", "icon", "component", "grid_options", "options")


def widget_hash_from_definition(component) -> str:
    """Stabile ID aus dem Quelltext der Komponente, ersatzweise aus Modul und Namen."""
    try:
        definition = inspect.getsource(component)
    except (OSError, TypeError):
        definition = f"{getattr(component, '__module__', '')}.{getattr(component, '__qualname__', repr(component))}"
    return hashlib.sha256(definition.encode("utf-8")).hexdigest()[:16]


def create_dashboard_widget(widget: Union[dict, DashboardWidget], owner=None) -> DashboardWidget:
    if isinstance(widget, DashboardWidget):
        widget = dict(widget)
    values = {key: widget.get(key) for key in WIDGET_FIELDS if key in widget}

    component = values.get("component")
    # Definition statt Name: beim Host registrieren und per ID referenzieren
    if callable(component):
        widget_id = getattr(component, "widget_id", None) or values.get("widget_id") or widget_hash_from_definition(component)
        values["widget_id"] = widget_id

        if owner is not None:
            owner.register(f"component:{widget_id}", component, instantiate=False)
            values["component"] = widget_id

    return DashboardWidget(**values)
