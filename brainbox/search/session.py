"""Search Ranking Session: remote semantic ranking with local keyword fallback."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from brainbox.api.decoding import decode_search_results
from brainbox.api.errors import describe_error
from brainbox.catalog.models import Item, ItemType
from brainbox.search.ranking import (
    KEYWORD_FALLBACK_THRESHOLD,
    as_score,
    keyword_matches,
    needs_keyword_fallback,
    rank_boosted,
)
from brainbox.search.search_models import RankingMode, SearchPhase, SearchState
from brainbox.utils.mixins import LoggerMixin

if TYPE_CHECKING:
    from brainbox.api.client import CatalogClient
    from brainbox.catalog.store import ItemStore

Listener = Callable[["SearchSession"], None]

AUTH_MISSING_MESSAGE = "Please login to use semantic search."
FAILURE_MESSAGE = "Failed to fetch search results"
NO_MATCHES_MESSAGE = "No matching items found"


class SearchSession(LoggerMixin):
    """Tracks one relevance search: Idle -> Searching -> outcome -> Idle.

    Every submit and clear takes a new sequence number. A response is only
    applied when its request is still the latest one dispatched, so a slow
    answer to an older query can never overwrite a newer submit or a clear.
    """

    def __init__(
        self,
        client: CatalogClient,
        store: ItemStore,
        *,
        mode: RankingMode | str = RankingMode.AUTO,
        threshold: float = KEYWORD_FALLBACK_THRESHOLD,
    ) -> None:
        self._client = client
        self._store = store
        self.mode = RankingMode(mode)
        self.threshold = threshold
        self.state = SearchState()
        self._sequence = 0
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def active(self) -> bool:
        return self.state.active

    def _publish(self, state: SearchState) -> None:
        self.state = state
        for listener in list(self._listeners):
            listener(self)

    def clear(self) -> None:
        """Return to Idle and drop any response still in flight."""
        self._sequence += 1
        self._publish(SearchState(sequence=self._sequence))

    async def submit(
        self, query: str, section_hint: ItemType | str | None = None
    ) -> SearchState:
        trimmed = query.strip()
        if not trimmed:
            self.clear()
            return self.state

        self._sequence += 1
        sequence = self._sequence
        self._publish(
            SearchState(
                query=trimmed,
                phase=SearchPhase.SEARCHING,
                loading=True,
                sequence=sequence,
            )
        )

        section = (
            section_hint.value if isinstance(section_hint, ItemType) else section_hint
        )
        try:
            payload = await self._client.search(trimmed, section)
        except Exception as e:
            if self._is_stale(sequence):
                return self.state
            self.logger.warning("Search request failed", query=trimmed, error=str(e))
            self._publish(
                SearchState(
                    query=trimmed,
                    phase=SearchPhase.ERRORED,
                    error=describe_error(
                        e, auth_message=AUTH_MISSING_MESSAGE, fallback=FAILURE_MESSAGE
                    ),
                    sequence=sequence,
                )
            )
            return self.state

        if self._is_stale(sequence):
            return self.state

        results, search_type = decode_search_results(payload)
        collection = self._store.items
        scored = rank_boosted(
            results, trimmed, {item.id: item for item in collection}
        )
        if needs_keyword_fallback(scored, self.threshold):
            self._publish_keyword_fallback(trimmed, collection, len(scored), sequence)
        elif self._resolve_mode(search_type) is RankingMode.REMOTE:
            self._publish_ranked(
                trimmed,
                [(str(r["_id"]), as_score(r.get("similarity"))) for r in results],
                sequence,
                mode=RankingMode.REMOTE,
            )
        else:
            self._publish_ranked(
                trimmed,
                [(r.item_id, r.similarity) for r in scored],
                sequence,
                mode=RankingMode.BOOSTED,
            )
        return self.state

    def _is_stale(self, sequence: int) -> bool:
        if sequence != self._sequence:
            self.logger.debug(
                "Discarding stale search response",
                sequence=sequence,
                latest=self._sequence,
            )
            return True
        return False

    def _resolve_mode(self, search_type: str | None) -> RankingMode:
        if self.mode is not RankingMode.AUTO:
            return self.mode
        return RankingMode.REMOTE if search_type else RankingMode.BOOSTED

    def _publish_ranked(
        self,
        query: str,
        ranked: list[tuple[str, float]],
        sequence: int,
        *,
        mode: RankingMode,
    ) -> None:
        ordered: list[str] = []
        scores: dict[str, float] = {}
        for item_id, score in ranked:
            if item_id in scores:
                continue
            ordered.append(item_id)
            scores[item_id] = score

        self.logger.info(
            "Search ranked", query=query, mode=mode.value, results=len(ordered)
        )
        self._publish(
            SearchState(
                query=query,
                ordered_ids=tuple(ordered),
                scores=scores,
                phase=SearchPhase.RANKED,
                sequence=sequence,
            )
        )

    def _publish_keyword_fallback(
        self, query: str, collection: list[Item], remote_count: int, sequence: int
    ) -> None:
        """Replace an empty or weak remote ranking with local keyword matches."""
        matches = keyword_matches(collection, query)
        self.logger.info(
            "Falling back to keyword matching",
            query=query,
            remote_results=remote_count,
            keyword_matches=len(matches),
        )
        if not matches:
            self._publish_empty(query, sequence)
            return

        self._publish(
            SearchState(
                query=query,
                ordered_ids=tuple(item.id for item in matches),
                phase=SearchPhase.FALLBACK,
                sequence=sequence,
            )
        )

    def _publish_empty(self, query: str, sequence: int) -> None:
        self._publish(
            SearchState(
                query=query,
                phase=SearchPhase.EMPTY,
                message=NO_MATCHES_MESSAGE,
                sequence=sequence,
            )
        )
