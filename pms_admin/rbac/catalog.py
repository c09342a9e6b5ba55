"""
Menu catalog — the master list of every sidebar section.

This is the single universe of (main menu, sub menu) pairs the
dashboard can expose.  It drives:
    • the sidebar (filtered per user by `rbac.navigation`)
    • the group permission matrix (rendered in full by `rbac.matrix`)

The backend keeps its own copy of the same titles; permission records
naming a pair that is not listed here are inert.
"""

from dataclasses import dataclass

from pms_admin.schemas import MenuKey


@dataclass(frozen=True)
class SubMenuEntry:
    title: str
    url: str


@dataclass(frozen=True)
class MenuCatalogEntry:
    title: str
    items: tuple[SubMenuEntry, ...]


# ────────────────────────────────────────────────────────────────────
# 1.  CANONICAL MENU LIST  (order is display order)
# ────────────────────────────────────────────────────────────────────
MENU_CATALOG: tuple[MenuCatalogEntry, ...] = (
    MenuCatalogEntry("Dashboard", (
        SubMenuEntry("Overview", "dashboard"),
    )),
    MenuCatalogEntry("Properties", (
        SubMenuEntry("Property List", "properties"),
        SubMenuEntry("Property Settings", "property-settings"),
    )),
    MenuCatalogEntry("Subscriptions", (
        SubMenuEntry("Plans", "subscription-plans"),
        SubMenuEntry("Active Subscriptions", "active-subscriptions"),
    )),
    MenuCatalogEntry("Invoices", (
        SubMenuEntry("Invoice List", "invoices"),
        SubMenuEntry("Create Invoice", "create-invoice"),
    )),
    MenuCatalogEntry("Payments", (
        SubMenuEntry("Payment List", "payments"),
        SubMenuEntry("Payment History", "payment-history"),
    )),
    MenuCatalogEntry("Expenses", (
        SubMenuEntry("Expense List", "expenses"),
        SubMenuEntry("Expense Categories", "expense-categories"),
    )),
    MenuCatalogEntry("Sales", (
        SubMenuEntry("Sales List", "sales"),
        SubMenuEntry("Sales Reports", "sales-reports"),
    )),
    MenuCatalogEntry("Reports", (
        SubMenuEntry("Financial Reports", "financial-reports"),
        SubMenuEntry("Analytics", "analytics"),
    )),
    MenuCatalogEntry("Team", (
        SubMenuEntry("Users", "team-users"),
        SubMenuEntry("Groups", "team-groups"),
    )),
    MenuCatalogEntry("Settings", (
        SubMenuEntry("General", "settings-general"),
        SubMenuEntry("Account", "settings-account"),
    )),
)

DEFAULT_MENU = "Dashboard"


# ────────────────────────────────────────────────────────────────────
# 2.  LOOKUPS
# ────────────────────────────────────────────────────────────────────
def validate_catalog(catalog: tuple[MenuCatalogEntry, ...]) -> None:
    """Reject duplicate main titles, or duplicate sub titles under one parent."""
    seen_main: set[str] = set()
    for entry in catalog:
        if entry.title in seen_main:
            raise ValueError(f"Duplicate main menu {entry.title!r}")
        seen_main.add(entry.title)
        seen_sub: set[str] = set()
        for item in entry.items:
            if item.title in seen_sub:
                raise ValueError(f"Duplicate sub menu {item.title!r} under {entry.title!r}")
            seen_sub.add(item.title)


def catalog_keys(catalog: tuple[MenuCatalogEntry, ...] = MENU_CATALOG) -> list[MenuKey]:
    return [MenuKey(entry.title, item.title) for entry in catalog for item in entry.items]


def find_entry(
    main_menu: str,
    catalog: tuple[MenuCatalogEntry, ...] = MENU_CATALOG,
) -> MenuCatalogEntry | None:
    return next((entry for entry in catalog if entry.title == main_menu), None)


def in_catalog(key: MenuKey, catalog: tuple[MenuCatalogEntry, ...] = MENU_CATALOG) -> bool:
    entry = find_entry(key.main_menu, catalog)
    return entry is not None and any(item.title == key.sub_menu for item in entry.items)


validate_catalog(MENU_CATALOG)
