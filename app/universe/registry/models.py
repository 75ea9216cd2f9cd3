from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


def _reference(value):
    """Callables/Klassen werden für JSON über ihren Namen referenziert."""
    if value is None or isinstance(value, (str, int, float, bool, dict, list)):
        return value
    return getattr(value, "__name__", repr(value))


class MenuItem(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    title: str
    route: Optional[str] = None
    icon: str = "circle-dot"
    priority: int = 9
    items: Optional[List[Any]] = None
    component: Any = None
    component_params: Optional[Dict[str, Any]] = Field(default_factory=dict)
    render_component_in_place: Optional[bool] = False
    slug: str
    query_params: Optional[Dict[str, Any]] = Field(default_factory=dict)
    view: Optional[str] = None
    index: int = 0
    section: Optional[str] = None
    on_click: Any = None

    # Darstellungs-Hinweise für die Host-UI
    icon_component: Any = None
    icon_component_options: Optional[Dict[str, Any]] = Field(default_factory=dict)
    icon_size: Optional[str] = None
    icon_prefix: Optional[str] = None
    icon_class: Optional[str] = None
    item_class: Optional[str] = Field(default=None, alias="class")
    inline_class: Optional[str] = None
    wrapper_class: Optional[str] = None
    overwrite_wrapper_class: Optional[bool] = False

    @field_serializer("component", "on_click", "icon_component", when_used="json")
    def serialize_reference(self, value):
        return _reference(value)


class MenuPanel(BaseModel):
    title: str
    slug: str
    open: bool = True
    section: Optional[str] = None
    items: List[MenuItem] = Field(default_factory=list)


class DashboardWidget(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    widget_id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    component: Any = None
    grid_options: Optional[Dict[str, Any]] = Field(default_factory=dict)
    options: Optional[Dict[str, Any]] = Field(default_factory=dict)

    @field_serializer("component", when_used="json")
    def serialize_component(self, value):
        return _reference(value)


class Registry(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, extra="allow")

    name: str
    menu_items: List[MenuItem] = Field(default_factory=list)
    menu_panels: List[MenuPanel] = Field(default_factory=list)
    renderable_components: List[Any] = Field(default_factory=list)

    @field_serializer("renderable_components", when_used="json")
    def serialize_components(self, value):
        return [_reference(component) for component in value]
