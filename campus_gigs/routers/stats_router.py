# campus_gigs/routers/stats_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.database import get_db
from campus_gigs.schemas.user_schema import PlatformStatsOut
from campus_gigs.services.profile_service import ProfileService

router = APIRouter(
    prefix="/stats",
    tags=["Stats"],
)


@router.get("", response_model=PlatformStatsOut)
async def read_platform_stats(db: AsyncSession = Depends(get_db)):
    """首頁用的全站統計，不需登入"""
    service = ProfileService(db)
    return await service.get_platform_stats()
