"""
Catalog view: wires the item store, filters, search and pagination together
"""

from __future__ import annotations

from brainbox.api.client import CatalogClient
from brainbox.catalog.filters import (
    FilterEngine,
    FilterState,
    compute_available_types,
    compute_sub_groups,
)
from brainbox.catalog.models import Item, ItemDraft, ItemPatch, ItemType
from brainbox.catalog.store import ItemStore
from brainbox.config import Settings, get_settings
from brainbox.display.pagination import Pagination
from brainbox.display.reconciler import DisplayReconciler, Page
from brainbox.search.search_models import SearchState
from brainbox.search.session import SearchSession
from brainbox.utils.mixins import LoggerMixin


class CatalogView(LoggerMixin):
    """Composition root for one browsing window.

    All derived views (visible page, type counts, sub-groups) are recomputed
    from the current collection and filter/search state on every call.
    """

    def __init__(
        self,
        client: CatalogClient,
        *,
        store: ItemStore | None = None,
        filters: FilterEngine | None = None,
        search: SearchSession | None = None,
        pagination: Pagination | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.client = client
        self.store = store or ItemStore(client)
        self.filters = filters or FilterEngine()
        self.search_session = search or SearchSession(
            client,
            self.store,
            mode=settings.search_ranking_mode,
            threshold=settings.keyword_fallback_threshold,
        )
        self.pagination = pagination or Pagination(
            page_size=settings.default_page_size
        )
        self.reconciler = DisplayReconciler(self.pagination)

        self._last_order: tuple[bool, tuple[str, ...]] = (False, ())
        self.filters.subscribe(self._on_filter_change)
        self.search_session.subscribe(self._on_search_change)

    @property
    def items(self) -> list[Item]:
        return self.store.items

    @property
    def filter_state(self) -> FilterState:
        return self.filters.state

    @property
    def search_state(self) -> SearchState:
        return self.search_session.state

    def _on_filter_change(self, _engine: FilterEngine) -> None:
        self.pagination.reset()

    def _on_search_change(self, session: SearchSession) -> None:
        order = (session.state.active, session.state.ordered_ids)
        if order != self._last_order:
            self._last_order = order
            self.pagination.reset()

    async def load(self) -> list[Item] | None:
        return await self.store.fetch_items()

    async def create_item(self, draft: ItemDraft) -> Item | None:
        return await self.store.create_item(draft)

    async def update_item(self, item_id: str, patch: ItemPatch) -> Item | None:
        item = await self.store.update_item(item_id, patch)
        if item is not None and patch.degrades_to_json:
            self.logger.debug("Refreshing collection after converted update")
            await self.store.fetch_items()
        return item

    async def delete_item(self, item_id: str) -> bool:
        return await self.store.delete_item(item_id)

    def toggle_type(self, item_type: ItemType | None) -> FilterState:
        return self.filters.set_primary_filter(item_type)

    def select_sub_filter(self, item_type: ItemType, key: str | None) -> FilterState:
        return self.filters.set_secondary_filter(item_type, key)

    async def search(self, query: str) -> SearchState:
        return await self.search_session.submit(query, self.filters.state.primary)

    def clear_search(self) -> None:
        self.search_session.clear()

    def set_page(self, page: int) -> None:
        self.pagination.page = page

    def set_page_size(self, page_size: int) -> None:
        self.pagination.set_page_size(page_size)

    def current_page(self) -> Page:
        return self.reconciler.resolve(
            self.store.items, self.filters.state, self.search_session.state
        )

    def available_types(self) -> dict[ItemType, int]:
        return compute_available_types(self.store.items)

    def sub_groups(self) -> dict[ItemType, list[str]]:
        return compute_sub_groups(self.store.items)
