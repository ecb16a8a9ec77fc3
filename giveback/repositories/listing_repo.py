from sqlalchemy import Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from giveback.models.announcement import Announcement
from giveback.repositories.base import BaseRepository
from giveback.schemas.listing import ListingCreate
from giveback.schemas.search import SearchRequest, SortMode


class ListingRepository(BaseRepository[Announcement]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Announcement)

    def _where(self, stmt: Select, request: SearchRequest) -> Select:
        # every query word must appear in the title, like a plain full-text match
        for word in request.query.split():
            stmt = stmt.where(Announcement.title.icontains(word, autoescape=True))
        if request.categories:
            stmt = stmt.where(Announcement.category.in_([c.value for c in request.categories]))
        if request.conditions:
            stmt = stmt.where(Announcement.condition.in_([c.value for c in request.conditions]))
        if request.min_price is not None:
            stmt = stmt.where(Announcement.price >= request.min_price)
        if request.max_price is not None:
            stmt = stmt.where(Announcement.price <= request.max_price)
        return stmt

    def _order(self, stmt: Select, request: SearchRequest) -> Select:
        if request.sort == SortMode.OLDEST:
            return stmt.order_by(Announcement.created_at.asc(), Announcement.id)
        if request.sort == SortMode.RELEVANCE and request.query.strip():
            query = request.query.strip()
            rank = case(
                (func.lower(Announcement.title) == query.lower(), 0),
                (Announcement.title.istartswith(query, autoescape=True), 1),
                else_=2,
            )
            return stmt.order_by(rank, Announcement.created_at.desc(), Announcement.id)
        return stmt.order_by(Announcement.created_at.desc(), Announcement.id)

    async def search(self, request: SearchRequest) -> tuple[list[Announcement], int]:
        """Return one page of matching listings plus the exact total match count."""
        stmt = self._where(select(Announcement).options(selectinload(Announcement.user)), request)
        stmt = self._order(stmt, request).offset(request.range_start).limit(request.limit)
        result = await self.session.execute(stmt)
        rows = list(result.scalars().all())

        count_stmt = self._where(select(func.count(Announcement.id)), request)
        total = (await self.session.execute(count_stmt)).scalar_one()
        return rows, total

    async def suggest_titles(self, partial: str, limit: int = 5) -> list[str]:
        stmt = select(Announcement.title)
        for word in partial.split():
            stmt = stmt.where(Announcement.title.icontains(word, autoescape=True))
        stmt = stmt.order_by(Announcement.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_with_lister(self, listing_id: str) -> Announcement | None:
        stmt = (
            select(Announcement)
            .options(selectinload(Announcement.user))
            .where(Announcement.id == listing_id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str) -> list[Announcement]:
        stmt = (
            select(Announcement)
            .options(selectinload(Announcement.user))
            .where(Announcement.user_id == user_id)
            .order_by(Announcement.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_listing(self, data: ListingCreate) -> Announcement:
        return await self.create(**data.model_dump(mode="json"))
