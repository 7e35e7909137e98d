"""Item collection, its lifecycle and filtering"""

from brainbox.catalog.models import (
    Item,
    ItemDraft,
    ItemPatch,
    ItemType,
    resolve_file_url,
)
from brainbox.catalog.filters import (
    FilterEngine,
    FilterState,
    compute_available_types,
    compute_sub_groups,
    derive_visible,
    file_extension,
    normalize_hostname,
    sub_category,
)
from brainbox.catalog.store import ItemStore

__all__ = [
    "Item",
    "ItemDraft",
    "ItemPatch",
    "ItemType",
    "resolve_file_url",
    "FilterEngine",
    "FilterState",
    "compute_available_types",
    "compute_sub_groups",
    "derive_visible",
    "file_extension",
    "normalize_hostname",
    "sub_category",
    "ItemStore",
]
