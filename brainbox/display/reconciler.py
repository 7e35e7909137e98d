"""Display Reconciler: search order versus filter output, then pagination"""

from collections.abc import Sequence
from dataclasses import dataclass

from brainbox.catalog.filters import FilterState, derive_visible
from brainbox.catalog.models import Item
from brainbox.display.pagination import Pagination, total_pages
from brainbox.search.search_models import SearchState


@dataclass(frozen=True)
class Page:
    """One page of the display set."""

    items: list[Item]
    page: int
    page_size: int
    total_pages: int
    total: int


def resolve_display_set(
    collection: Sequence[Item], filter_state: FilterState, search_state: SearchState
) -> list[Item]:
    """Search order when a search is active, otherwise the filtered collection.

    Identifiers that no longer resolve against the collection are dropped.
    """
    if search_state.active and search_state.ordered_ids:
        by_id = {item.id: item for item in collection}
        return [by_id[i] for i in search_state.ordered_ids if i in by_id]
    return derive_visible(collection, filter_state)


class DisplayReconciler:
    """Resolves the display set and slices the current page of it.

    The page is only clamped here. Returning to page 1 on a new filter or new
    search results is done by whoever owns the pagination when that change
    is published, so a page requested afterwards is kept.
    """

    def __init__(self, pagination: Pagination | None = None) -> None:
        self.pagination = pagination or Pagination()

    def resolve(
        self,
        collection: Sequence[Item],
        filter_state: FilterState,
        search_state: SearchState,
    ) -> Page:
        display_set = resolve_display_set(collection, filter_state, search_state)
        items = self.pagination.slice(display_set)
        return Page(
            items=items,
            page=self.pagination.page,
            page_size=self.pagination.page_size,
            total_pages=total_pages(len(display_set), self.pagination.page_size),
            total=len(display_set),
        )
