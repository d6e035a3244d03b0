from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from tripmate.api import deps
from tripmate.realtime.hub import RealtimeHub
from tripmate.services.health import check_db

router = APIRouter(prefix="/health", tags=["health"])

@router.get("/liveness")
async def liveness():
    """Verify whether the API is ready to receive traffic."""
    return {"status": "ok"}

@router.get("/readiness")
async def readiness(
    session: AsyncSession = Depends(deps.get_db),
    hub: RealtimeHub = Depends(deps.get_hub),
):
    """Verify whether the API is ready to process traffic."""
    state = "ready" if await check_db(session) else "degraded"
    return {"status": state, "websockets": hub.connection_count}
