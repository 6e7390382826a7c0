"""Bounded-concurrency crawl scheduler."""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Awaitable, Callable, Iterable, Optional, Set

from ..core.errors import CrawlError, HandlerError, NavigationError
from ..core.report import CrawlFailure
from .budget import BudgetTracker
from .engine import FetchEngine, PlaywrightEngine, RenderSession
from .state import CrawlSessionState

logger = logging.getLogger(__name__)

PushCallback = Callable[[Iterable[str]], int]
RequestHandler = Callable[[RenderSession, str, PushCallback], Awaitable[None]]

DEFAULT_MAX_URLS_TO_CRAWL = 10
DEFAULT_MAX_CONCURRENCY = 10


class Crawler:
    """
    Fetches pages from a FIFO frontier with at most ``max_concurrency`` tasks in flight.

    The dispatch loop runs on a single event loop, so every change to the
    frontier, the budget and the in-flight counter is a synchronous
    check-and-update step. Fetch tasks only suspend inside the engine and the
    request handler.

    Example::

        async def handler(session, url, push):
            print(url, await session.title())
            push(await session.extract_links())

        crawler = Crawler(handler, max_urls_to_crawl=10, max_concurrency=5)
        await crawler.start(["https://example.com"])
    """

    def __init__(
        self,
        request_handler: RequestHandler,
        *,
        max_urls_to_crawl: int = DEFAULT_MAX_URLS_TO_CRAWL,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        engine: Optional[FetchEngine] = None,
    ) -> None:
        if max_urls_to_crawl < 0:
            raise ValueError("max_urls_to_crawl must not be negative")
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be a positive integer")

        self.request_handler = request_handler
        self.max_urls_to_crawl = max_urls_to_crawl
        self.max_concurrency = max_concurrency
        self._engine: FetchEngine = engine if engine is not None else PlaywrightEngine()
        self._state = CrawlSessionState(budget=BudgetTracker(max_urls_to_crawl))
        self._started = False
        self._engine_released = False

    @property
    def state(self) -> CrawlSessionState:
        """Return the current mutable runtime state for observability tools."""

        return self._state

    def push(self, urls: Iterable[str], base: Optional[str] = None) -> int:
        """Feed URLs into the frontier; relative URLs resolve against ``base``."""

        return self._state.frontier.push(urls, base=base)

    async def start(self, start_urls: Iterable[str]) -> CrawlSessionState:
        """Crawl from ``start_urls`` until quiescence, then release the engine."""

        if self._started:
            raise RuntimeError("a Crawler instance can only be started once")
        self._started = True

        state = self._state
        self.push(start_urls)
        try:
            await self._engine.open()
            state.running = True
            await self._dispatch_until_quiescent()
        finally:
            state.running = False
            await self._release_engine()

        state.completed = True
        logger.info(
            "Crawl finished: %d dispatched, %d failed, %d dropped over budget",
            len(state.dispatch_order),
            len(state.failures),
            state.dropped_count,
        )
        return state

    # ------------------------------------------------------------------
    # Dispatch loop
    # ------------------------------------------------------------------
    async def _dispatch_until_quiescent(self) -> None:
        state = self._state
        active: Set[asyncio.Task[None]] = set()

        try:
            while True:
                while state.in_flight < self.max_concurrency:
                    url = state.frontier.pop()
                    if url is None:
                        break
                    if url in state.fetched_urls:
                        continue
                    if not state.budget.try_consume():
                        state.dropped_count += 1
                        logger.debug("Budget exhausted, dropping %s", url)
                        continue

                    state.task_started(url)
                    logger.debug("Dispatching %s (%d in flight)", url, state.in_flight)
                    active.add(asyncio.create_task(self._fetch(url)))

                if state.is_quiescent():
                    logger.debug("Frontier empty and no task in flight")
                    return

                done, active = await asyncio.wait(
                    active, return_when=asyncio.FIRST_COMPLETED
                )
                for task in done:
                    # Surfaces anything _fetch did not isolate, such as cancellation.
                    task.result()
        finally:
            # Only reached with live tasks when the loop itself is aborting;
            # they must settle before the engine is released.
            for task in active:
                task.cancel()
            if active:
                await asyncio.gather(*active, return_exceptions=True)

    async def _fetch(self, url: str) -> None:
        state = self._state
        session: Optional[RenderSession] = None
        try:
            session = await self._engine.new_session()
            await session.open(url)
            try:
                await self.request_handler(session, url, partial(self.push, base=url))
            except CrawlError:
                raise
            except Exception as exc:
                raise HandlerError(url, exc) from exc
        except CrawlError as exc:
            logger.warning("Error crawling %s: %s", url, exc.message)
            state.failures.append(CrawlFailure.from_error(url, exc))
        except Exception as exc:
            # Engine-level failures outside the CrawlError family, e.g. a dropped socket.
            error = NavigationError(url, str(exc) or type(exc).__name__)
            logger.warning("Error crawling %s: %s", url, error.message)
            state.failures.append(CrawlFailure.from_error(url, error))
        finally:
            try:
                if session is not None:
                    await session.close()
            except Exception:
                logger.debug("Failed to close session for %s", url, exc_info=True)
            finally:
                state.task_finished()

    async def _release_engine(self) -> None:
        if self._engine_released:
            return
        self._engine_released = True
        await self._engine.close()
