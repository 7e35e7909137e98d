"""
Filter Engine: type and sub-category filtering plus navigation aggregates
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath
from urllib.parse import urlparse

from brainbox.catalog.models import Item, ItemType
from brainbox.utils.mixins import LoggerMixin

Listener = Callable[["FilterEngine"], None]

SUB_FILTERED_TYPES = (ItemType.LINK, ItemType.DOCUMENT)


@dataclass(frozen=True)
class FilterState:
    """Primary type filter and a secondary sub-category nested under it"""

    primary: ItemType | None = None
    secondary: str | None = None


def normalize_hostname(url: str | None) -> str:
    """Lower-cased hostname without a leading ``www.``; ``""`` when unparseable."""
    if not url:
        return ""
    try:
        host = urlparse(url.strip()).hostname or ""
    except ValueError:
        return ""
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def file_extension(reference: str | None) -> str:
    """Lower-cased extension of a file reference, ignoring any query string."""
    if not reference:
        return ""
    path = reference.split("?", 1)[0].split("#", 1)[0]
    suffix = PurePosixPath(path.replace("\\", "/")).suffix
    return suffix[1:].lower() if suffix else ""


def sub_category(item: Item) -> str:
    """Stored sub-category, else the one derived from the item's payload."""
    if item.category_sub:
        return item.category_sub
    if item.type is ItemType.LINK:
        return normalize_hostname(item.url)
    if item.type is ItemType.DOCUMENT:
        return file_extension(item.file_path) or file_extension(item.title)
    return ""


def derive_visible(collection: Sequence[Item], state: FilterState) -> list[Item]:
    """Visible subset of the collection, in collection order."""
    if state.primary is None:
        return list(collection)

    visible = [item for item in collection if item.type is state.primary]
    if state.secondary and state.primary in SUB_FILTERED_TYPES:
        visible = [item for item in visible if sub_category(item) == state.secondary]
    return visible


def compute_available_types(collection: Iterable[Item]) -> dict[ItemType, int]:
    """Count per present type, ordered alphabetically by type name."""
    counts = Counter(item.type for item in collection)
    return {
        item_type: counts[item_type]
        for item_type in sorted(counts, key=lambda t: t.value)
    }


def compute_sub_groups(collection: Iterable[Item]) -> dict[ItemType, list[str]]:
    """Sorted distinct domains for links and extensions for documents."""
    groups: dict[ItemType, set[str]] = {t: set() for t in SUB_FILTERED_TYPES}
    for item in collection:
        if item.type in groups:
            key = sub_category(item)
            if key:
                groups[item.type].add(key)
    return {item_type: sorted(keys) for item_type, keys in groups.items()}


class FilterEngine(LoggerMixin):
    """Holds the filter state and notifies subscribers when it changes."""

    def __init__(self, state: FilterState | None = None) -> None:
        self.state = state or FilterState()
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, state: FilterState) -> None:
        if state == self.state:
            return
        self.state = state
        for listener in list(self._listeners):
            listener(self)

    def set_primary_filter(self, item_type: ItemType | None) -> FilterState:
        """Toggle the primary filter; any change clears the secondary one."""
        if item_type is None or item_type is self.state.primary:
            self._set(FilterState())
        else:
            self._set(FilterState(primary=item_type))
        return self.state

    def set_secondary_filter(
        self, item_type: ItemType, key: str | None
    ) -> FilterState:
        if self.state.primary is not item_type or item_type not in SUB_FILTERED_TYPES:
            self.logger.warning(
                "Ignoring sub-filter for inactive type",
                requested=item_type.value,
                active=self.state.primary.value if self.state.primary else None,
            )
            return self.state
        self._set(FilterState(primary=item_type, secondary=key or None))
        return self.state

    def clear(self) -> None:
        self._set(FilterState())

    def derive_visible(self, collection: Sequence[Item]) -> list[Item]:
        return derive_visible(collection, self.state)
