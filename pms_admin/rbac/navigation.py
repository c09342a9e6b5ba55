"""
Sidebar builder — filters the menu catalog down to what a user may see.

Output is always a subsequence of the catalog in catalog order; the
permission payload never reorders or adds menus.
"""

from pms_admin.rbac.catalog import DEFAULT_MENU, MENU_CATALOG, MenuCatalogEntry, SubMenuEntry
from pms_admin.rbac.store import PermissionStore
from pms_admin.schemas import SidebarGroup, SidebarItem


def _group(
    entry: MenuCatalogEntry,
    items: list[SubMenuEntry] | tuple[SubMenuEntry, ...],
    is_active: bool = False,
) -> SidebarGroup:
    return SidebarGroup(
        title=entry.title,
        is_active=is_active,
        items=[SidebarItem(title=item.title, url=item.url) for item in items],
    )


def build_sidebar(
    store: PermissionStore,
    catalog: tuple[MenuCatalogEntry, ...] = MENU_CATALOG,
    default_title: str = DEFAULT_MENU,
) -> list[SidebarGroup]:
    # Nothing while loading, so a partial menu never flashes.
    if store.is_loading:
        return []

    if store.is_admin:
        return [
            _group(entry, entry.items, is_active=entry.title == default_title)
            for entry in catalog
        ]

    sidebar: list[SidebarGroup] = []
    for entry in catalog:
        if not store.has_menu_access(entry.title):
            continue
        items = [item for item in entry.items if store.has_menu_access(entry.title, item.title)]
        if items:
            sidebar.append(_group(entry, items))
    return sidebar
