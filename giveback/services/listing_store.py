import logging
from collections.abc import Callable
from typing import Protocol

import httpx
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from giveback.exceptions import StoreError
from giveback.repositories.listing_repo import ListingRepository
from giveback.schemas.listing import SearchResult
from giveback.schemas.search import ResultPage, SearchRequest, SortMode

logger = logging.getLogger(__name__)


class ListingStore(Protocol):
    async def search(self, request: SearchRequest) -> ResultPage: ...

    async def suggest(self, partial: str, limit: int = 5) -> list[str]: ...


class SqlListingStore:
    """Listing store backed by the local database."""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory

    async def search(self, request: SearchRequest) -> ResultPage:
        try:
            async with self._session_factory() as session:
                rows, total = await ListingRepository(session).search(request)
                items = tuple(SearchResult.model_validate(row) for row in rows)
        except (SQLAlchemyError, ValidationError) as exc:
            raise StoreError(f"listing search failed: {exc}") from exc
        return ResultPage(items=items, total=total)

    async def suggest(self, partial: str, limit: int = 5) -> list[str]:
        try:
            async with self._session_factory() as session:
                return await ListingRepository(session).suggest_titles(partial, limit=limit)
        except SQLAlchemyError as exc:
            raise StoreError(f"title suggestions failed: {exc}") from exc


class RestListingStore:
    """Listing store backed by a hosted PostgREST endpoint (``/rest/v1/<table>``)."""

    SELECT = "*,user:user_id(full_name,avatar_url)"
    ORDERING = {
        SortMode.NEWEST: "created_at.desc",
        SortMode.OLDEST: "created_at.asc",
        # PostgREST cannot rank by text relevance without an RPC
        SortMode.RELEVANCE: "created_at.desc",
    }

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        api_key: str = "",
        table: str = "announcements",
    ):
        self._client = client
        self._url = f"{base_url.rstrip('/')}/rest/v1/{table}"
        self._headers = {"Accept": "application/json"}
        if api_key:
            self._headers["apikey"] = api_key
            self._headers["Authorization"] = f"Bearer {api_key}"

    def _search_params(self, request: SearchRequest) -> list[tuple[str, str]]:
        params = [("select", self.SELECT)]
        if request.query.strip():
            params.append(("title", f"plfts.{request.query.strip()}"))
        if request.categories:
            params.append(("category", f"in.({','.join(c.value for c in request.categories)})"))
        if request.conditions:
            params.append(("condition", f"in.({','.join(c.value for c in request.conditions)})"))
        if request.min_price is not None:
            params.append(("price", f"gte.{request.min_price}"))
        if request.max_price is not None:
            params.append(("price", f"lte.{request.max_price}"))
        params.append(("order", self.ORDERING[request.sort]))
        return params

    async def _get(self, params: list[tuple[str, str]], headers: dict[str, str]) -> httpx.Response:
        try:
            resp = await self._client.get(self._url, params=params, headers={**self._headers, **headers})
        except httpx.HTTPError as exc:
            raise StoreError(f"listing store unreachable: {exc}") from exc
        # 416 means the requested range starts past the last row
        if resp.status_code >= 400 and resp.status_code != 416:
            raise StoreError(
                f"listing store returned {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
            )
        return resp

    async def search(self, request: SearchRequest) -> ResultPage:
        resp = await self._get(
            self._search_params(request),
            {
                "Range-Unit": "items",
                "Range": f"{request.range_start}-{request.range_end}",
                "Prefer": "count=exact",
            },
        )
        rows = [] if resp.status_code == 416 else _json(resp)
        try:
            items = tuple(SearchResult.model_validate(row) for row in rows)
        except ValidationError as exc:
            raise StoreError(f"unexpected listing payload: {exc}") from exc

        total = _parse_total(resp.headers.get("Content-Range"), fallback=len(items))
        logger.debug("Store returned %d of %d rows for %r", len(items), total, request.query)
        return ResultPage(items=items, total=total)

    async def suggest(self, partial: str, limit: int = 5) -> list[str]:
        params = [
            ("select", "title"),
            ("title", f"plfts.{partial.strip()}"),
            ("order", "created_at.desc"),
            ("limit", str(limit)),
        ]
        resp = await self._get(params, {})
        return [row["title"] for row in _json(resp)[:limit] if row.get("title")]


def _parse_total(content_range: str | None, fallback: int) -> int:
    """Read the exact count from a ``Content-Range: 0-11/13`` header."""
    if not content_range or "/" not in content_range:
        return fallback
    _, _, total = content_range.rpartition("/")
    if total == "*":
        return fallback
    try:
        return int(total)
    except ValueError:
        return fallback


def _json(resp: httpx.Response):
    try:
        return resp.json()
    except ValueError as exc:
        raise StoreError(
            f"listing store sent a non-JSON body: {resp.text[:200]}", status_code=resp.status_code
        ) from exc
