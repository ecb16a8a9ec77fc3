from sqlalchemy.ext.asyncio import AsyncSession

from giveback.models.profile import Profile
from giveback.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, Profile)

    async def is_manager(self, user_id: str) -> bool:
        profile = await self.get(user_id)
        return profile is not None and profile.role == "MANAGER"
