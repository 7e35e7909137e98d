"""
Item Store: the canonical in-memory collection mirrored from the remote store
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from brainbox.api.decoding import decode_collection, decode_item
from brainbox.api.errors import describe_error
from brainbox.catalog.models import Item, ItemDraft, ItemPatch, ItemType
from brainbox.utils.mixins import LoggerMixin

if TYPE_CHECKING:
    from brainbox.api.client import CatalogClient

T = TypeVar("T")

Listener = Callable[["ItemStore"], None]

AUTH_MISSING_MESSAGE = "Please login to continue"
NO_FILE_MESSAGE = "No file uploaded for document item"


class ItemStore(LoggerMixin):
    """Holds the collection and the pending/fulfilled/rejected lifecycle.

    Operations are not serialized. Each one marks the store as loading and
    clears the error when dispatched; when it resolves it either applies its
    result keyed by item identifier or records a single error string. Only a
    successful fetch replaces the whole collection. Failures never raise to
    the caller and never partially modify the collection.
    """

    def __init__(self, client: CatalogClient) -> None:
        self._client = client
        self._items: list[Item] = []
        self._in_flight = 0
        self.error: str | None = None
        self._listeners: list[Listener] = []

    @property
    def items(self) -> list[Item]:
        return list(self._items)

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    def get(self, item_id: str) -> Item | None:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    async def fetch_items(self) -> list[Item] | None:
        """Replace the whole collection with the remote one."""
        payload = await self._run(
            "fetch items", "Failed to fetch items", self._client.list_items
        )
        if payload is _FAILED:
            return None

        self._items = decode_collection(payload)
        self.logger.info("Collection loaded", count=len(self._items))
        self._settle()
        return self.items

    async def create_item(self, draft: ItemDraft) -> Item | None:
        """Create an item; the confirmed item is placed at the front."""
        if draft.type is ItemType.DOCUMENT and draft.file is None:
            self.logger.warning("Rejected document draft without a file")
            self.error = NO_FILE_MESSAGE
            self._notify()
            return None

        payload = await self._run(
            "create item",
            "Failed to create item",
            lambda: self._client.create_item(draft),
        )
        if payload is _FAILED:
            return None

        item = decode_item(payload)
        if item is None:
            self._reject("create item", "Failed to create item")
            return None

        index = self._index_of(item.id)
        if index is None:
            self._items.insert(0, item)
        else:
            self._items[index] = item
        self.logger.info("Item created", item_id=item.id, type=item.type.value)
        self._settle()
        return item

    async def update_item(self, item_id: str, patch: ItemPatch) -> Item | None:
        """Replace the matching element in place with the confirmed item."""
        payload = await self._run(
            "update item",
            "Failed to update item",
            lambda: self._client.update_item(item_id, patch),
            item_id=item_id,
        )
        if payload is _FAILED:
            return None

        item = decode_item(payload)
        if item is None:
            self._reject("update item", "Failed to update item")
            return None

        index = self._index_of(item.id)
        if index is None:
            self.logger.warning(
                "Updated item not in collection", item_id=item.id, requested=item_id
            )
        else:
            self._items[index] = item
            self.logger.info("Item updated", item_id=item.id)
        self._settle()
        return item

    async def delete_item(self, item_id: str) -> bool:
        result = await self._run(
            "delete item",
            "Failed to delete item",
            lambda: self._client.delete_item(item_id),
            item_id=item_id,
        )
        if result is _FAILED:
            return False

        self._items = [item for item in self._items if item.id != item_id]
        self.logger.info("Item deleted", item_id=item_id)
        self._settle()
        return True

    def _index_of(self, item_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    async def _run(
        self,
        operation: str,
        fallback: str,
        call: Callable[[], Awaitable[T]],
        **log_kwargs: Any,
    ) -> T | object:
        self._in_flight += 1
        self.error = None
        self._notify()
        try:
            return await call()
        except Exception as e:
            self._in_flight -= 1
            self.error = describe_error(
                e, auth_message=AUTH_MISSING_MESSAGE, fallback=fallback
            )
            self.logger.warning(
                f"Failed to {operation}", error=str(e), **log_kwargs
            )
            self._notify()
            return _FAILED

    def _settle(self) -> None:
        self._in_flight -= 1
        self._notify()

    def _reject(self, operation: str, message: str) -> None:
        self.logger.warning(f"Failed to {operation}", error="unrecognized response")
        self._in_flight -= 1
        self.error = message
        self._notify()


_FAILED = object()
