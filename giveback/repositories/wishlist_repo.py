from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from giveback.models.announcement import Announcement
from giveback.models.wishlist import Wishlist
from giveback.repositories.base import BaseRepository


class WishlistRepository(BaseRepository[Wishlist]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Wishlist)

    async def find(self, user_id: str, listing_id: str) -> Wishlist | None:
        stmt = select(Wishlist).where(
            Wishlist.user_id == user_id, Wishlist.announcement_id == listing_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def save(self, user_id: str, listing_id: str) -> Wishlist:
        """Save a listing for a user. Saving twice keeps the first entry."""
        existing = await self.find(user_id, listing_id)
        if existing:
            return existing
        return await self.create(user_id=user_id, announcement_id=listing_id)

    async def remove(self, user_id: str, listing_id: str) -> bool:
        stmt = delete(Wishlist).where(
            Wishlist.user_id == user_id, Wishlist.announcement_id == listing_id
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def list_for_user(self, user_id: str) -> list[Announcement]:
        stmt = (
            select(Wishlist)
            .options(selectinload(Wishlist.announcement).selectinload(Announcement.user))
            .where(Wishlist.user_id == user_id)
            .order_by(Wishlist.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return [w.announcement for w in result.scalars().all()]
