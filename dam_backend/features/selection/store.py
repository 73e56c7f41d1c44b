"""
Selection store - the operator's cross-page set of selected items.

The store is owned by a session (see `dam_backend.deps.build_session`) and
lives for as long as that session does. Paging, filtering or re-rendering a
view never removes entries; only deselect/clear do.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ...shared import KIND_LABELS, ItemKind, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SelectedItem:
    """A selected object plus the display metadata cached at selection time."""
    id: str
    kind: ItemKind
    display_name: str = ""
    thumbnail_ref: Optional[str] = None

    @staticmethod
    def from_mapping(raw: dict) -> "SelectedItem":
        """Build an item from a loose API/grid row (`name`/`title`, `thumbnail_url`, `type`)."""
        item_id = str(raw.get("id") or "").strip()
        if not item_id:
            raise ValueError("Selected item requires an id")
        kind = ItemKind.parse(raw.get("kind") or raw.get("type"), default=ItemKind.ASSET)
        name = str(raw.get("display_name") or raw.get("name") or raw.get("title") or "").strip()
        thumb = raw.get("thumbnail_ref") or raw.get("thumbnail_url")
        return SelectedItem(item_id, kind, name, str(thumb) if thumb else None)


class SelectionStore:
    """In-memory set of `SelectedItem` keyed by id (ids are unique across kinds)."""

    def __init__(self) -> None:
        self._items: dict[str, SelectedItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    @property
    def count(self) -> int:
        return len(self._items)

    def select(self, item: SelectedItem) -> None:
        # Re-selecting keeps the original position but refreshes display metadata.
        self._items[item.id] = item

    def deselect(self, item_id: str) -> None:
        self._items.pop(item_id, None)

    def toggle(self, item: SelectedItem) -> bool:
        """Flip membership of `item`; returns True when it is selected afterwards."""
        if item.id in self._items:
            del self._items[item.id]
            return False
        self._items[item.id] = item
        return True

    def select_many(self, items: Iterable[SelectedItem]) -> None:
        for item in items:
            self._items[item.id] = item

    def deselect_many(self, item_ids: Iterable[str]) -> None:
        for item_id in item_ids:
            self._items.pop(item_id, None)

    def clear(self) -> None:
        if self._items:
            logger.debug("Clearing selection (%d items)", len(self._items))
        self._items.clear()

    def is_selected(self, item_id: str) -> bool:
        return item_id in self._items

    def ids(self) -> set[str]:
        return set(self._items)

    def items(self) -> list[SelectedItem]:
        return list(self._items.values())

    def breakdown_by_kind(self) -> dict[ItemKind, int]:
        counts: dict[ItemKind, int] = {}
        for item in self._items.values():
            counts[item.kind] = counts.get(item.kind, 0) + 1
        return counts

    def is_mixed_kind(self) -> bool:
        return len(self.breakdown_by_kind()) > 1

    def describe_breakdown(self) -> str:
        """Human readable breakdown, e.g. "Assets (3), Collections (1)"."""
        return ", ".join(
            f"{KIND_LABELS.get(kind, kind.value)} ({count})"
            for kind, count in self.breakdown_by_kind().items()
        )

    def on_page(self, page_ids: Iterable[str]) -> list[SelectedItem]:
        """Selected items whose id appears in `page_ids`, in page order."""
        out: list[SelectedItem] = []
        seen: set[str] = set()
        for item_id in page_ids:
            if item_id in seen:
                continue
            seen.add(item_id)
            item = self._items.get(item_id)
            if item is not None:
                out.append(item)
        return out

    def toggle_page(self, page_items: Iterable[SelectedItem]) -> bool:
        """
        Select-all-on-page toggle.

        If every item of the page is already selected the page is deselected,
        otherwise the missing items are added. Returns True when the page ends
        up fully selected. Off-page selections are never touched.
        """
        page = list(page_items)
        if not page:
            return False
        if all(item.id in self._items for item in page):
            self.deselect_many(item.id for item in page)
            return False
        self.select_many(item for item in page if item.id not in self._items)
        return True
