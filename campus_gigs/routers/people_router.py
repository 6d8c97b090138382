# campus_gigs/routers/people_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.config import settings
from campus_gigs.core.database import get_db
from campus_gigs.core.security import get_optional_user
from campus_gigs.models.user import User
from campus_gigs.schemas.user_schema import PeopleFilter, PeopleListOut, PublicProfileOut
from campus_gigs.services.profile_service import ProfileService

router = APIRouter(
    prefix="/people",
    tags=["People"],
)


@router.get("", response_model=PeopleListOut)
async def list_people(
    search: Optional[str] = None,
    skill: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.LIST_PAGE_SIZE_DEFAULT, ge=1),
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """
    人物目錄 (允許匿名)。

    - search: 比對姓名、學校、科系
    - skill: 比對技能 (支援拼字相近的模糊比對)
    - limit 超過上限會被截斷
    """
    filters = PeopleFilter(search=search, skill=skill, page=page, limit=limit)
    service = ProfileService(db)
    return await service.list_people(filters, current_user)


@router.get("/{user_id}", response_model=PublicProfileOut)
async def get_person(
    user_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """
    檢視某位使用者的 Profile。
    私人 Profile 且與檢視者沒有關聯時回傳 403 ({"error": "private"})。
    """
    service = ProfileService(db)
    return await service.get_public_profile(user_id, current_user)
