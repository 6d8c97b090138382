# campus_gigs/routers/user_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.database import get_db
from campus_gigs.core.security import get_current_user
from campus_gigs.models.user import User
from campus_gigs.schemas.user_schema import MyProfileOut, ProfileUpdate, UserStatsOut
from campus_gigs.services.profile_service import ProfileService

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(get_current_user)] # (重要) 整個路由都需要登入
)


@router.get("/me", response_model=MyProfileOut)
async def read_users_me(
    current_user: User = Depends(get_current_user)
):
    """
    獲取當前登入使用者的完整 Profile (不含密碼)
    """
    return current_user


@router.patch("/me", response_model=MyProfileOut)
async def update_users_me(
    update_data: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    更新自己的 Profile，只會修改有傳入的欄位 (包含 profile_visibility 與 skills)
    """
    service = ProfileService(db)
    return await service.update_my_profile(current_user, update_data)


@router.get("/me/stats", response_model=UserStatsOut)
async def read_my_stats(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """儀表板用的統計數字"""
    service = ProfileService(db)
    return await service.get_my_stats(current_user)
