from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from giveback.database import get_session
from giveback.viewmodels.listing_vm import ActivityViewModel

router = APIRouter(prefix="/activity")


@router.get("/")
async def activity_feed(user_id: str, session: AsyncSession = Depends(get_session)):
    vm = await ActivityViewModel.load(session, user_id)
    return JSONResponse(
        {
            "everyone": vm.everyone,
            "entries": [
                {
                    "id": entry.id,
                    "user_id": entry.user_id,
                    "action": entry.action,
                    "details": entry.details,
                    "created_at": entry.created_at.isoformat(),
                }
                for entry in vm.entries
            ],
        }
    )
