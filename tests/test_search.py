"""Unit tests for search-as-you-type debouncing."""
import asyncio
from unittest.mock import Mock

import pytest

from app.schemas.market import CoinSearchResult
from app.services.search import SearchDebouncer

RESULTS = [CoinSearchResult(id="bitcoin", name="Bitcoin", symbol="BTC")]


@pytest.fixture
def search() -> Mock:
    return Mock(return_value=RESULTS)


@pytest.mark.asyncio
async def test_single_query_runs_after_delay(search):
    debouncer = SearchDebouncer(search, delay=0.01, min_length=3)

    results = await debouncer.submit("user:1", "  bitcoin ")

    assert results == RESULTS
    search.assert_called_once_with("bitcoin")
    assert not debouncer.pending("user:1")


@pytest.mark.asyncio
async def test_short_query_returns_nothing_without_searching(search):
    debouncer = SearchDebouncer(search, delay=0.01, min_length=3)

    assert await debouncer.submit("user:1", "bi") == []
    assert await debouncer.submit("user:1", "   ") == []
    search.assert_not_called()


@pytest.mark.asyncio
async def test_newer_query_supersedes_pending_one(search):
    debouncer = SearchDebouncer(search, delay=0.05, min_length=3)

    first = asyncio.create_task(debouncer.submit("user:1", "bit"))
    await asyncio.sleep(0.01)
    second = asyncio.create_task(debouncer.submit("user:1", "bitc"))

    first_result, second_result = await asyncio.gather(first, second)

    assert first_result is None
    assert second_result == RESULTS
    search.assert_called_once_with("bitc")


@pytest.mark.asyncio
async def test_short_query_clears_pending_timer(search):
    debouncer = SearchDebouncer(search, delay=0.05, min_length=3)

    pending = asyncio.create_task(debouncer.submit("user:1", "ethereum"))
    await asyncio.sleep(0.01)
    assert debouncer.pending("user:1")

    assert await debouncer.submit("user:1", "et") == []
    assert await pending is None
    search.assert_not_called()


@pytest.mark.asyncio
async def test_clients_are_debounced_independently(search):
    debouncer = SearchDebouncer(search, delay=0.02, min_length=3)

    results = await asyncio.gather(
        debouncer.submit("user:1", "bitcoin"),
        debouncer.submit("user:2", "ethereum"),
    )

    assert results == [RESULTS, RESULTS]
    assert search.call_count == 2


@pytest.mark.asyncio
async def test_cancel_all_drops_pending_searches(search):
    debouncer = SearchDebouncer(search, delay=0.05, min_length=3)

    pending = asyncio.create_task(debouncer.submit("user:1", "solana"))
    await asyncio.sleep(0.01)
    debouncer.cancel_all()

    assert await pending is None
    search.assert_not_called()
