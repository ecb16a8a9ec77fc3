from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from giveback.models.activity_log import ActivityLog
from giveback.models.announcement import Announcement
from giveback.repositories.activity_repo import ActivityRepository
from giveback.repositories.listing_repo import ListingRepository
from giveback.repositories.profile_repo import ProfileRepository
from giveback.repositories.wishlist_repo import WishlistRepository
from giveback.schemas.listing import ListingCreate, SearchResult


@dataclass
class ListingViewModel:
    listing: SearchResult | None = None

    @classmethod
    async def load(cls, session: AsyncSession, listing_id: str) -> "ListingViewModel":
        repo = ListingRepository(session)
        row = await repo.get_with_lister(listing_id)
        if not row:
            return cls()
        return cls(listing=SearchResult.model_validate(row))

    @classmethod
    async def create_listing(cls, session: AsyncSession, data: ListingCreate) -> Announcement:
        repo = ListingRepository(session)
        listing = await repo.create_listing(data)
        await ActivityRepository(session).record(
            data.user_id, "LISTING_CREATED", listing_id=listing.id, title=listing.title
        )
        await session.commit()
        return listing

    @classmethod
    async def save(cls, session: AsyncSession, user_id: str, listing_id: str) -> bool:
        if not await ListingRepository(session).get(listing_id):
            return False
        await WishlistRepository(session).save(user_id, listing_id)
        await ActivityRepository(session).record(user_id, "LISTING_SAVED", listing_id=listing_id)
        await session.commit()
        return True

    @classmethod
    async def unsave(cls, session: AsyncSession, user_id: str, listing_id: str) -> bool:
        removed = await WishlistRepository(session).remove(user_id, listing_id)
        if removed:
            await ActivityRepository(session).record(user_id, "LISTING_UNSAVED", listing_id=listing_id)
        await session.commit()
        return removed

    @classmethod
    async def saved_for(cls, session: AsyncSession, user_id: str) -> list[Announcement]:
        return await WishlistRepository(session).list_for_user(user_id)

    @classmethod
    async def listed_by(cls, session: AsyncSession, user_id: str) -> list[Announcement]:
        return await ListingRepository(session).list_for_user(user_id)


@dataclass
class ActivityViewModel:
    entries: list[ActivityLog] = field(default_factory=list)
    everyone: bool = False

    @classmethod
    async def load(cls, session: AsyncSession, user_id: str, limit: int = 50) -> "ActivityViewModel":
        # managers review everyone's activity, other roles only their own
        repo = ActivityRepository(session)
        if await ProfileRepository(session).is_manager(user_id):
            return cls(entries=await repo.get_recent(limit=limit), everyone=True)
        return cls(entries=await repo.list_for_user(user_id, limit=limit))
