"""
Permission matrix — the add/change/delete checkbox grid of a group.

The matrix is a working copy of a group's permission records keyed by
`MenuKey`.  It renders one row per catalog pair whether or not the
group holds a record for it, and keeps the set normalized: a record
whose three flags are all false is removed, never stored.

Records for pairs missing from the catalog are kept as-is so that
saving a group does not silently drop them; they just never render.
Nothing here talks to the backend; the group screen submits
`records()` in one request when the form is saved.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from pms_admin.rbac.catalog import MENU_CATALOG, MenuCatalogEntry
from pms_admin.schemas import MenuKey, PermissionRecord

PERMISSION_FIELDS = ("can_add", "can_change", "can_delete")


@dataclass(frozen=True)
class MatrixRow:
    main_menu: str
    sub_menu: str
    url: str
    can_add: bool = False
    can_change: bool = False
    can_delete: bool = False

    @property
    def has_any(self) -> bool:
        return self.can_add or self.can_change or self.can_delete


@dataclass(frozen=True)
class MatrixSection:
    main_menu: str
    rows: tuple[MatrixRow, ...]


class PermissionMatrix:
    def __init__(
        self,
        records: Iterable[PermissionRecord] = (),
        catalog: tuple[MenuCatalogEntry, ...] = MENU_CATALOG,
    ):
        self.catalog = catalog
        self._records: dict[MenuKey, PermissionRecord] = {}
        for record in records:
            if not record.is_empty:
                self._records[record.key] = record.model_copy()

    def __len__(self) -> int:
        return len(self._records)

    def get(self, main_menu: str, sub_menu: str) -> PermissionRecord | None:
        return self._records.get(MenuKey(main_menu, sub_menu))

    def records(self) -> list[PermissionRecord]:
        return list(self._records.values())

    def sections(self) -> list[MatrixSection]:
        sections = []
        for entry in self.catalog:
            rows = []
            for item in entry.items:
                record = self._records.get(MenuKey(entry.title, item.title))
                rows.append(MatrixRow(
                    main_menu=entry.title,
                    sub_menu=item.title,
                    url=item.url,
                    can_add=bool(record and record.can_add),
                    can_change=bool(record and record.can_change),
                    can_delete=bool(record and record.can_delete),
                ))
            sections.append(MatrixSection(entry.title, tuple(rows)))
        return sections

    def rows(self) -> list[MatrixRow]:
        return [row for section in self.sections() for row in section.rows]

    def toggle(self, main_menu: str, sub_menu: str, url: str, field: str) -> None:
        """Flip exactly one flag for a pair, pruning the record if it empties."""
        if field not in PERMISSION_FIELDS:
            raise ValueError(f"Unknown permission field {field!r}")

        key = MenuKey(main_menu, sub_menu)
        existing = self._records.get(key)
        if existing is None:
            self._records[key] = PermissionRecord(
                main_menu=main_menu,
                sub_menu=sub_menu,
                url=url,
                **{name: name == field for name in PERMISSION_FIELDS},
            )
            return

        updated = existing.model_copy(update={field: not getattr(existing, field)})
        if updated.is_empty:
            del self._records[key]
        else:
            self._records[key] = updated

    def toggle_all(self, main_menu: str, sub_menu: str, url: str) -> None:
        """Full revoke when every flag is set, full grant otherwise."""
        key = MenuKey(main_menu, sub_menu)
        existing = self._records.get(key)
        if existing is not None and existing.is_full:
            del self._records[key]
            return
        self._records[key] = PermissionRecord(
            main_menu=main_menu,
            sub_menu=sub_menu,
            url=url,
            can_add=True,
            can_change=True,
            can_delete=True,
        )
