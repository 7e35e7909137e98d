"""Display set resolution, pagination and the catalog view"""

from brainbox.display.catalog_view import CatalogView
from brainbox.display.pagination import (
    DEFAULT_PAGE_SIZE,
    Pagination,
    clamp_page,
    total_pages,
)
from brainbox.display.reconciler import DisplayReconciler, Page, resolve_display_set

__all__ = [
    "CatalogView",
    "DEFAULT_PAGE_SIZE",
    "Pagination",
    "clamp_page",
    "total_pages",
    "DisplayReconciler",
    "Page",
    "resolve_display_set",
]
