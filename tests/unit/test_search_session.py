"""Tests for the search ranking session state machine"""

import asyncio

import pytest
import pytest_asyncio

from brainbox.api.errors import AuthorizationMissingError, RemoteError, TransportError
from brainbox.catalog.models import ItemType
from brainbox.catalog.store import ItemStore
from brainbox.search.search_models import RankingMode, SearchPhase
from brainbox.search.session import (
    AUTH_MISSING_MESSAGE,
    FAILURE_MESSAGE,
    NO_MATCHES_MESSAGE,
    SearchSession,
)


@pytest_asyncio.fixture
async def loaded_store(client):
    store = ItemStore(client)
    client.list_items.return_value = [
        {"_id": "1", "type": "note", "title": "Guitar practice", "content": "scales"},
        {"_id": "2", "type": "link", "title": "Chords", "url": "https://tabs.test"},
        {
            "_id": "3",
            "type": "note",
            "title": "Groceries",
            "tags": ["guitar-strings"],
        },
        {"_id": "4", "type": "video", "title": "Drums", "url": "https://v.test"},
    ]
    await store.fetch_items()
    return store


@pytest.fixture
def session(client, loaded_store) -> SearchSession:
    return SearchSession(client, loaded_store)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_blank_query_resets_to_idle(self, session, client) -> None:
        client.search.return_value = {"results": [{"_id": "1"}], "searchType": "x"}
        await session.submit("guitar")

        state = await session.submit("   ")

        assert state.phase is SearchPhase.IDLE
        assert state.ordered_ids == ()
        assert state.active is False
        client.search.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_searching_state_while_in_flight(self, session, client) -> None:
        release = asyncio.Event()
        observed = []

        async def slow_search(query, section):
            await release.wait()
            return {"results": [{"_id": "2", "similarity": 0.9}], "searchType": "s"}

        client.search.side_effect = slow_search
        session.subscribe(lambda s: observed.append(s.state.phase))
        task = asyncio.create_task(session.submit(" chords "))
        await asyncio.sleep(0)

        assert session.state.loading is True
        assert session.state.query == "chords"
        release.set()
        await task
        assert observed == [SearchPhase.SEARCHING, SearchPhase.RANKED]
        assert session.state.loading is False

    @pytest.mark.asyncio
    async def test_section_hint_sent_as_value(self, session, client) -> None:
        client.search.return_value = {"results": []}

        await session.submit("chords", ItemType.LINK)

        client.search.assert_awaited_once_with("chords", "link")


class TestRemoteRanking:
    @pytest.mark.asyncio
    async def test_remote_order_trusted(self, session, client) -> None:
        client.search.return_value = {
            "results": [
                {"_id": "4", "similarity": 0.1},
                {"_id": "1", "similarity": 0.8},
                {"_id": "4", "similarity": 0.1},
            ],
            "searchType": "semantic",
        }

        state = await session.submit("guitar")

        assert state.phase is SearchPhase.RANKED
        assert state.ordered_ids == ("4", "1")
        assert state.scores == {"4": 0.1, "1": 0.8}
        assert state.active is True

    @pytest.mark.asyncio
    async def test_empty_remote_result_uses_keyword_matches(
        self, session, client
    ) -> None:
        client.search.return_value = {"results": [], "searchType": "semantic"}

        state = await session.submit("guitar")

        assert state.phase is SearchPhase.FALLBACK
        assert state.ordered_ids == ("1", "3")
        assert state.error is None

    @pytest.mark.asyncio
    async def test_weak_remote_results_replaced_by_keyword_matches(
        self, session, client
    ) -> None:
        client.search.return_value = {
            "results": [{"_id": "4", "similarity": 0.05}],
            "searchType": "semantic",
        }

        state = await session.submit("guitar")

        assert state.phase is SearchPhase.FALLBACK
        assert state.ordered_ids == ("1", "3")
        assert state.scores == {}

    @pytest.mark.asyncio
    async def test_no_matches_anywhere_is_not_an_error(self, session, client) -> None:
        client.search.return_value = {"results": [], "searchType": "semantic"}

        state = await session.submit("violin")

        assert state.phase is SearchPhase.EMPTY
        assert state.active is False
        assert state.error is None
        assert state.message == NO_MATCHES_MESSAGE


class TestBoostedRanking:
    @pytest.mark.asyncio
    async def test_boost_reorders(self, session, client) -> None:
        client.search.return_value = {
            "results": [
                {"_id": "4", "similarity": 0.45, "title": "Drums"},
                {"_id": "1", "similarity": 0.1, "title": "Guitar practice"},
            ]
        }

        state = await session.submit("guitar")

        assert state.phase is SearchPhase.RANKED
        assert state.ordered_ids == ("1", "4")
        assert state.scores["1"] == pytest.approx(0.6)

    @pytest.mark.asyncio
    async def test_weak_results_replaced_by_keyword_matches(
        self, session, client
    ) -> None:
        client.search.return_value = {
            "results": [
                {"_id": "4", "similarity": 0.15, "title": "Drums"},
                {"_id": "2", "similarity": 0.05, "title": "Chords"},
            ]
        }

        state = await session.submit("guitar")

        assert state.phase is SearchPhase.FALLBACK
        assert state.ordered_ids == ("1", "3")
        assert "4" not in state.ordered_ids
        assert state.active is True

    @pytest.mark.asyncio
    async def test_empty_remote_uses_keyword_matches(self, session, client) -> None:
        client.search.return_value = {"results": []}

        state = await session.submit("SCALES")

        assert state.phase is SearchPhase.FALLBACK
        assert state.ordered_ids == ("1",)

    @pytest.mark.asyncio
    async def test_nothing_anywhere_is_empty(self, session, client) -> None:
        client.search.return_value = {"results": []}

        state = await session.submit("violin")

        assert state.phase is SearchPhase.EMPTY
        assert state.message == NO_MATCHES_MESSAGE
        assert state.active is False

    @pytest.mark.asyncio
    async def test_forced_boosted_mode_ignores_search_type(
        self, client, loaded_store
    ) -> None:
        session = SearchSession(client, loaded_store, mode=RankingMode.BOOSTED)
        client.search.return_value = {
            "results": [
                {"_id": "4", "similarity": 0.45},
                {"_id": "1", "similarity": 0.1},
            ],
            "searchType": "semantic",
        }

        state = await session.submit("guitar")

        assert state.phase is SearchPhase.RANKED
        assert state.ordered_ids == ("1", "4")

    @pytest.mark.asyncio
    async def test_custom_threshold(self, client, loaded_store) -> None:
        session = SearchSession(client, loaded_store, threshold=0.05)
        client.search.return_value = {"results": [{"_id": "4", "similarity": 0.1}]}

        state = await session.submit("guitar")

        assert state.phase is SearchPhase.RANKED
        assert state.ordered_ids == ("4",)


class TestErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("error", "message"),
        [
            (AuthorizationMissingError("/search"), AUTH_MISSING_MESSAGE),
            (
                RemoteError("Search index unavailable", status=503),
                "Search index unavailable",
            ),
            (TransportError("HTTP 500", status=500), FAILURE_MESSAGE),
        ],
    )
    async def test_error_messages(self, session, client, error, message) -> None:
        client.search.side_effect = error

        state = await session.submit("guitar")

        assert state.phase is SearchPhase.ERRORED
        assert state.error == message
        assert state.loading is False
        assert state.ordered_ids == ()


class TestSupersession:
    @pytest.mark.asyncio
    async def test_stale_response_is_discarded(self, session, client) -> None:
        gates = {"old": asyncio.Event(), "new": asyncio.Event()}

        async def slow_search(query, section):
            await gates[query].wait()
            item_id = "4" if query == "old" else "2"
            return {
                "results": [{"_id": item_id, "similarity": 0.9}],
                "searchType": "s",
            }

        client.search.side_effect = slow_search
        old = asyncio.create_task(session.submit("old"))
        await asyncio.sleep(0)
        new = asyncio.create_task(session.submit("new"))
        await asyncio.sleep(0)

        gates["new"].set()
        await new
        gates["old"].set()
        await old

        assert session.state.query == "new"
        assert session.state.ordered_ids == ("2",)

    @pytest.mark.asyncio
    async def test_clear_wins_over_in_flight_response(self, session, client) -> None:
        release = asyncio.Event()

        async def slow_search(query, section):
            await release.wait()
            return {"results": [{"_id": "1"}], "searchType": "s"}

        client.search.side_effect = slow_search
        inactive: list[bool] = []
        session.subscribe(lambda s: inactive.append(s.active))
        pending = asyncio.create_task(session.submit("guitar"))
        await asyncio.sleep(0)

        session.clear()
        release.set()
        await pending

        assert session.state.phase is SearchPhase.IDLE
        assert session.active is False
        assert inactive[-1] is False

    @pytest.mark.asyncio
    async def test_stale_error_is_discarded(self, session, client) -> None:
        release = asyncio.Event()

        async def failing_search(query, section):
            if query == "old":
                await release.wait()
                raise TransportError("late failure")
            return {"results": [{"_id": "2", "similarity": 0.9}], "searchType": "s"}

        client.search.side_effect = failing_search
        old = asyncio.create_task(session.submit("old"))
        await asyncio.sleep(0)
        await session.submit("new")
        release.set()
        await old

        assert session.state.phase is SearchPhase.RANKED
        assert session.state.error is None
