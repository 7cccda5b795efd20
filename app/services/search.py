"""Debounced coin search for search-as-you-type clients."""
import asyncio
import logging
from typing import Callable, Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from app.core.config import get_settings
from app.schemas.market import CoinSearchResult

settings = get_settings()
logger = logging.getLogger(__name__)


class SearchDebouncer:
    """Collapse bursts of search queries into one provider call per client.

    Each client key owns at most one pending timer. A new query resets the
    timer; the query it replaced is reported as superseded and never reaches
    the provider. Queries shorter than ``min_length`` clear the timer and
    return no results.
    """

    def __init__(self, search: Callable[[str], List[CoinSearchResult]],
                 delay: Optional[float] = None, min_length: Optional[int] = None):
        self._search = search
        self.delay = settings.search_debounce_seconds if delay is None else delay
        self.min_length = settings.search_min_query_length if min_length is None else min_length
        self._timers: Dict[str, asyncio.Future] = {}

    def _cancel(self, key: str) -> None:
        timer = self._timers.pop(key, None)
        if timer is not None and not timer.done():
            timer.cancel()

    def pending(self, key: str) -> bool:
        timer = self._timers.get(key)
        return timer is not None and not timer.done()

    async def submit(self, key: str, query: str) -> Optional[List[CoinSearchResult]]:
        """Schedule a search for ``key`` and wait for it to settle.

        Args:
            key: Client identity (user id or remote address)
            query: Raw text typed by the user

        Returns:
            Search results, an empty list for short queries, or None when a
            newer query from the same key superseded this one
        """
        query = query.strip()
        self._cancel(key)

        if len(query) < self.min_length:
            return []

        timer = asyncio.ensure_future(asyncio.sleep(self.delay))
        self._timers[key] = timer
        try:
            await asyncio.wait({timer})
        except asyncio.CancelledError:
            timer.cancel()
            raise

        if timer.cancelled():
            logger.debug(f"Search '{query}' superseded for {key}")
            return None

        if self._timers.get(key) is timer:
            del self._timers[key]

        return await run_in_threadpool(self._search, query)

    def cancel_all(self) -> None:
        """Clear every pending timer (used on shutdown)."""
        for key in list(self._timers):
            self._cancel(key)


_debouncer: Optional[SearchDebouncer] = None


def get_search_debouncer() -> SearchDebouncer:
    """Dependency returning the process-wide debouncer."""
    global _debouncer
    if _debouncer is None:
        from app.services.coingecko_api import coingecko_api
        _debouncer = SearchDebouncer(coingecko_api.search_coins)
    return _debouncer


def shutdown_search_debouncer() -> None:
    if _debouncer is not None:
        _debouncer.cancel_all()
