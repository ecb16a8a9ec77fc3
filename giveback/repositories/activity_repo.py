from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from giveback.models.activity_log import ActivityLog
from giveback.repositories.base import BaseRepository


class ActivityRepository(BaseRepository[ActivityLog]):
    def __init__(self, session: AsyncSession):
        super().__init__(session, ActivityLog)

    async def record(self, user_id: str | None, action: str, **details) -> ActivityLog:
        return await self.create(user_id=user_id, action=action, details=details or None)

    async def list_for_user(self, user_id: str, limit: int = 50) -> list[ActivityLog]:
        stmt = (
            select(ActivityLog)
            .where(ActivityLog.user_id == user_id)
            .order_by(ActivityLog.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_recent(self, limit: int = 50) -> list[ActivityLog]:
        stmt = select(ActivityLog).order_by(ActivityLog.created_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
