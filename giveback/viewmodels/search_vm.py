import asyncio
import logging
from dataclasses import dataclass, replace
from enum import StrEnum

from giveback.config import settings
from giveback.schemas.listing import Category, Condition
from giveback.schemas.search import (
    PriceRange,
    QueryState,
    ResultPage,
    SearchRequest,
    SortMode,
    ViewMode,
)
from giveback.services.debouncer import Debouncer
from giveback.services.listing_store import ListingStore
from giveback.services.navigation import Navigator
from giveback.services.pagination import Pagination

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    request_id: int


@dataclass(frozen=True)
class Loaded:
    request_id: int
    page: ResultPage


@dataclass(frozen=True)
class Failed:
    request_id: int
    reason: str
    timed_out: bool = False


FetchState = Idle | Loading | Loaded | Failed


class RenderState(StrEnum):
    BUSY = "busy"
    ERROR = "error"
    UNSEARCHED = "unsearched"
    EMPTY = "empty"
    RESULTS = "results"


class SearchViewModel:
    """State of one search page: query, filters, results and suggestions.

    Keystrokes go through a debouncer before reaching the store; page clicks
    fetch immediately. Every fetch gets a request id and only the response to
    the most recently dispatched fetch is applied, so a slow response can
    never overwrite a newer one. Store failures are logged and swallowed:
    the page keeps showing its last good results.
    """

    def __init__(
        self,
        store: ListingStore,
        navigator: Navigator,
        state: QueryState | None = None,
        *,
        page_size: int = settings.page_size,
        debounce_seconds: float = settings.debounce_seconds,
        search_timeout: float | None = settings.search_timeout,
        suggestion_limit: int = settings.suggestion_limit,
        suggestion_min_length: int = settings.suggestion_min_length,
    ):
        self._store = store
        self._navigator = navigator
        self.state = state or QueryState(query=navigator.get_param("q") or "")
        self.page_size = page_size
        self.search_timeout = search_timeout
        self.suggestion_limit = suggestion_limit
        self.suggestion_min_length = suggestion_min_length

        self.results = ResultPage()
        self.fetch_state: FetchState = Idle()
        self.suggestions: list[str] = []
        self.view_mode = ViewMode.GRID

        self._debouncer: Debouncer[str, QueryState] = Debouncer(
            self._dispatch_search, wait=debounce_seconds
        )
        self._search_seq = 0
        self._suggest_seq = 0
        self._has_loaded = False
        self._closed = False
        self._tasks: set[asyncio.Task] = set()

    # -- derived state -------------------------------------------------

    @property
    def loading(self) -> bool:
        return isinstance(self.fetch_state, Loading)

    @property
    def pagination(self) -> Pagination:
        return Pagination(page=self.state.page, total=self.results.total, page_size=self.page_size)

    @property
    def render_state(self) -> RenderState:
        if self.loading:
            return RenderState.BUSY
        if isinstance(self.fetch_state, Failed) and self.fetch_state.timed_out:
            return RenderState.ERROR
        if not self.results.items:
            return RenderState.EMPTY if self._has_loaded else RenderState.UNSEARCHED
        return RenderState.RESULTS

    # -- query text ----------------------------------------------------

    def open(self) -> None:
        """Kick off the search for whatever query the page was loaded with."""
        self._schedule_search()

    def type_query(self, text: str) -> None:
        self.state = replace(self.state, query=text, page=1)
        self._navigator.set_params(q=text)
        self._schedule_search()

        if len(text) < self.suggestion_min_length:
            self._clear_suggestions()
        else:
            self._spawn(self.suggest(text))

    def sync_from_url(self) -> None:
        """Re-read the query after browser back/forward changed the address."""
        query = self._navigator.get_param("q") or ""
        if query == self.state.query:
            return
        self.state = replace(self.state, query=query, page=1)
        self._clear_suggestions()
        self._schedule_search()

    # -- suggestions ---------------------------------------------------

    async def suggest(self, partial: str) -> list[str]:
        if len(partial) < self.suggestion_min_length:
            self._clear_suggestions()
            return []

        self._suggest_seq += 1
        request_id = self._suggest_seq
        try:
            titles = await self._store.suggest(partial, limit=self.suggestion_limit)
        except Exception:
            logger.exception("Loading suggestions failed for %r", partial)
            return []

        titles = list(titles[: self.suggestion_limit])
        if request_id == self._suggest_seq and not self._closed:
            self.suggestions = titles
        return titles

    def select_suggestion(self, title: str) -> None:
        self.state = replace(self.state, query=title, page=1)
        self._navigator.set_params(q=title)
        self._clear_suggestions()
        self._schedule_search()

    def _clear_suggestions(self) -> None:
        # bumping the sequence drops any suggestion response still in flight
        self._suggest_seq += 1
        self.suggestions = []

    # -- filters and sort ----------------------------------------------

    def toggle_category(self, category: Category) -> None:
        self.set_category(category, category not in self.state.categories)

    def set_category(self, category: Category, selected: bool) -> None:
        if selected:
            categories = self.state.categories | {category}
        else:
            categories = self.state.categories - {category}
        self._update_filters(categories=categories)

    def remove_category(self, category: Category) -> None:
        self.set_category(category, False)

    def toggle_condition(self, condition: Condition) -> None:
        self.set_condition(condition, condition not in self.state.conditions)

    def set_condition(self, condition: Condition, selected: bool) -> None:
        if selected:
            conditions = self.state.conditions | {condition}
        else:
            conditions = self.state.conditions - {condition}
        self._update_filters(conditions=conditions)

    def remove_condition(self, condition: Condition) -> None:
        self.set_condition(condition, False)

    def set_price_range(self, low: int, high: int) -> None:
        self._update_filters(price_range=PriceRange(low, high))

    def set_sort(self, sort: SortMode) -> None:
        self._update_filters(sort=SortMode(sort))

    def set_view_mode(self, mode: ViewMode) -> None:
        self.view_mode = ViewMode(mode)

    def _update_filters(self, **changes) -> None:
        state = replace(self.state, page=1, **changes)
        if state == self.state:
            return
        self.state = state
        self._schedule_search()

    # -- pagination ----------------------------------------------------

    def go_to_page(self, page: int) -> None:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        self.state = replace(self.state, page=page)
        # page clicks are discrete actions and skip the quiet window
        self._debouncer.cancel()
        self._dispatch_search(self.state.query, self.state)

    def next_page(self) -> None:
        if self.pagination.has_next:
            self.go_to_page(self.state.page + 1)

    def previous_page(self) -> None:
        if self.pagination.has_previous:
            self.go_to_page(self.state.page - 1)

    # -- fetching ------------------------------------------------------

    def _schedule_search(self) -> None:
        self._debouncer.schedule(self.state.query, lambda: self.state)

    def _dispatch_search(self, query: str, state: QueryState) -> None:
        if self._closed:
            return
        if not query:
            logger.debug("Empty query, keeping current results")
            return

        self._search_seq += 1
        request_id = self._search_seq
        request = SearchRequest.from_state(replace(state, query=query), self.page_size)
        self.fetch_state = Loading(request_id)
        self._spawn(self._run_search(request_id, request))

    async def _run_search(self, request_id: int, request: SearchRequest) -> None:
        try:
            async with asyncio.timeout(self.search_timeout):
                page = await self._store.search(request)
        except TimeoutError:
            logger.warning(
                "Search for %r timed out after %ss", request.query, self.search_timeout
            )
            self._fail(request_id, "timed out", timed_out=True)
            return
        except Exception:
            logger.exception("Search failed for %r", request.query)
            self._fail(request_id, "store error")
            return

        if request_id != self._search_seq or self._closed:
            logger.debug("Discarding stale search response %d (latest %d)", request_id, self._search_seq)
            return

        self.results = page
        self.fetch_state = Loaded(request_id, page)
        self._has_loaded = True
        logger.info("Search %r page %d: %d of %d results", request.query, self.state.page, len(page), page.total)

    def _fail(self, request_id: int, reason: str, timed_out: bool = False) -> None:
        if request_id != self._search_seq or self._closed:
            return
        self.fetch_state = Failed(request_id, reason, timed_out=timed_out)

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # -- lifecycle -----------------------------------------------------

    async def refresh(self) -> None:
        """Fetch the current state right away and wait for the result."""
        self._debouncer.cancel()
        self._dispatch_search(self.state.query, self.state)
        await self.settle()

    async def settle(self) -> None:
        """Wait until no debounce timer is armed and no fetch is in flight."""
        while self._debouncer.pending or self._tasks:
            await self._debouncer.wait_idle()
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        self._closed = True
        self._debouncer.close()
