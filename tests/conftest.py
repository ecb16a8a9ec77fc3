"""Shared fixtures: an in-memory listing store double and a SQLite-backed session factory."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from giveback.exceptions import StoreError
from giveback.models import Announcement, Base, Profile
from giveback.schemas.listing import Category, Condition, SearchResult
from giveback.schemas.search import ResultPage, SearchRequest

BASE_TIME = datetime(2025, 2, 6, 12, 0, tzinfo=timezone.utc)


def make_result(n: int, title: str = "Lamp", **fields) -> SearchResult:
    return SearchResult(
        id=f"item-{n}",
        title=title,
        description=f"{title} number {n}",
        photos=(f"https://cdn.example/{n}.jpg",),
        category=fields.pop("category", Category.FURNITURE),
        condition=fields.pop("condition", Condition.GOOD),
        tags=frozenset({"home"}),
        created_at=BASE_TIME - timedelta(hours=n),
        location="Paris",
        user={"full_name": "Ada Donor", "avatar_url": None},
        **fields,
    )


class FakeListingStore:
    """Answers searches from a list of results, recording every call.

    ``gates`` maps a 0-based search call index to an event the call waits on,
    which lets tests decide the order in which in-flight searches complete.
    """

    def __init__(self, rows: list[SearchResult] | None = None):
        self.rows = rows or []
        self.search_calls: list[SearchRequest] = []
        self.suggest_calls: list[str] = []
        self.gates: dict[int, asyncio.Event] = {}
        self.fail = False

    async def search(self, request: SearchRequest) -> ResultPage:
        index = len(self.search_calls)
        self.search_calls.append(request)
        if index in self.gates:
            await self.gates[index].wait()
        if self.fail:
            raise StoreError("store unavailable", status_code=503)

        words = request.query.lower().split()
        matches = [r for r in self.rows if all(w in r.title.lower() for w in words)]
        if request.categories:
            matches = [r for r in matches if r.category in request.categories]
        page = matches[request.range_start : request.range_end + 1]
        return ResultPage(items=tuple(page), total=len(matches))

    async def suggest(self, partial: str, limit: int = 5) -> list[str]:
        self.suggest_calls.append(partial)
        if self.fail:
            raise StoreError("store unavailable", status_code=503)
        return [r.title for r in self.rows if partial.lower() in r.title.lower()][:limit]


@pytest.fixture
def lamps() -> list[SearchResult]:
    return [make_result(n) for n in range(13)]


@pytest.fixture
def store(lamps) -> FakeListingStore:
    return FakeListingStore(lamps)


@pytest_asyncio.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def seeded(session_factory):
    """13 lamps, two chairs and a bookshelf from one donor, newest first by index."""
    async with session_factory() as session:
        donor = Profile(id="donor-1", full_name="Ada Donor", avatar_url="https://cdn.example/ada.png")
        session.add(donor)
        rows = [
            Announcement(
                id=f"lamp-{n:02d}",
                user_id=donor.id,
                title="Desk lamp" if n else "Lamp",
                category="Furniture",
                condition="GOOD" if n % 2 else "WORN",
                photos=[f"https://cdn.example/lamp-{n}.jpg"],
                tags=["light"],
                location="Paris",
                price=n * 10,
                created_at=BASE_TIME - timedelta(hours=n),
            )
            for n in range(13)
        ]
        rows += [
            Announcement(
                id=f"chair-{n}",
                user_id=donor.id,
                title="Wooden chair",
                category="Furniture",
                condition="LIKE_NEW",
                created_at=BASE_TIME - timedelta(days=1, hours=n),
            )
            for n in range(2)
        ]
        rows.append(
            Announcement(
                id="bookshelf",
                title="Bookshelf",
                category="Books",
                condition="BROKEN",
                created_at=BASE_TIME - timedelta(days=2),
            )
        )
        session.add_all(rows)
        await session.commit()
    return session_factory
