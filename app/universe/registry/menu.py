from typing import Iterable, Optional

from universe.logger import get_logger
from universe.strings import dasherize, dasherize_route
from .models import MenuItem, MenuPanel

log = get_logger("Menu")

DEFAULT_ICON = "circle-dot"
DEFAULT_PRIORITY = 9
NO_VIEW = "index"


def get_option(options: dict, key: str, default=None):
    """Nur fehlende Keys bekommen den Default, ein explizites None bleibt None."""
    return options[key] if key in options else default


def collapse_view(slug: Optional[str], view: Optional[str]) -> Optional[str]:
    """Ist die View identisch mit dem Slug, gibt es keine eigene View (None)."""
    if slug == view:
        return None
    return view


def matches(menu_item: Optional[MenuItem], slug: str, view: Optional[str]) -> bool:
    """(slug, view)-Vergleich; view=None entspricht der angefragten View 'index'."""
    if menu_item is None or menu_item.slug != slug:
        return False
    if menu_item.view is None and view == NO_VIEW:
        return True
    return menu_item.view == view


def create_menu_item(title: str, route: Optional[str] = None, **options) -> MenuItem:
    # Routen-Segmente dasherizen
    if isinstance(route, str):
        route = dasherize_route(route)

    return MenuItem(
        title=title,
        route=route,
        icon=get_option(options, "icon", DEFAULT_ICON),
        priority=get_option(options, "priority", DEFAULT_PRIORITY),
        items=get_option(options, "items"),
        component=get_option(options, "component"),
        component_params=get_option(options, "component_params", {}),
        render_component_in_place=get_option(options, "render_component_in_place", False),
        slug=get_option(options, "slug", dasherize(title)),
        query_params=get_option(options, "query_params", {}),
        view=get_option(options, "view"),
        index=get_option(options, "index", 0),
        section=get_option(options, "section"),
        on_click=get_option(options, "on_click"),
        icon_component=get_option(options, "icon_component"),
        icon_component_options=get_option(options, "icon_component_options", {}),
        icon_size=get_option(options, "icon_size"),
        icon_prefix=get_option(options, "icon_prefix"),
        icon_class=get_option(options, "icon_class"),
        inline_class=get_option(options, "inline_class"),
        wrapper_class=get_option(options, "wrapper_class"),
        overwrite_wrapper_class=get_option(options, "overwrite_wrapper_class", False),
        **{"class": get_option(options, "class", get_option(options, "item_class"))},
    )


def create_menu_panel(title: str, items: Iterable[dict] = (), **options) -> MenuPanel:
    slug = get_option(options, "slug", dasherize(title))

    panel_items = []
    for item in items:
        item_options = dict(item) if isinstance(item, dict) else {}
        item_title = item_options.pop("title", None)
        if not isinstance(item_title, str):
            log.warning(f"⚠️ Panel '{title}': Eintrag ohne Titel übersprungen.")
            continue
        route = item_options.pop("route", None)

        # Items erben den Slug des Panels, die View kommt aus dem eigenen Titel
        item_options["slug"] = slug
        item_options["view"] = dasherize(item_title)
        panel_items.append(create_menu_item(item_title, route, **item_options))

    return MenuPanel(
        title=title,
        slug=slug,
        open=get_option(options, "open", True),
        section=get_option(options, "section"),
        items=panel_items,
    )
