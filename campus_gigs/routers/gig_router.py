# campus_gigs/routers/gig_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.config import settings
from campus_gigs.core.database import get_db
from campus_gigs.core.security import get_current_user
from campus_gigs.models.gig import GigStatusEnum
from campus_gigs.models.user import User
from campus_gigs.schemas.application_schema import ApplicationCreate, ApplicationOutWithApplicant
from campus_gigs.schemas.gig_schema import GigCreate, GigDetailOut, GigFilter, GigListOut, GigOut
from campus_gigs.services.application_service import ApplicationService
from campus_gigs.services.gig_service import GigService

router = APIRouter(
    prefix="/gigs",
    tags=["Gigs"],
)


@router.post("", response_model=GigOut, status_code=status.HTTP_201_CREATED)
async def create_new_gig(
    gig_data: GigCreate, # Request Body
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    刊登新的 Gig。
    附件 (attachments) 是前端上傳到 Blob Storage 後拿到的 URL。
    """
    service = GigService(db)
    return await service.create_gig(gig_data, current_user)


@router.get("", response_model=GigListOut)
async def list_gigs(
    category: Optional[str] = None,
    gig_status: GigStatusEnum = Query(GigStatusEnum.open, alias="status"),
    skill: Optional[str] = None,
    skip: int = Query(0, ge=0),
    take: int = Query(settings.LIST_PAGE_SIZE_DEFAULT, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """
    瀏覽 Gig (允許匿名)，預設只列出 open 的 Gig
    """
    filters = GigFilter(category=category, status=gig_status, skill=skill, skip=skip, take=take)
    service = GigService(db)
    return await service.list_gigs(filters)


@router.get("/{gig_id}", response_model=GigDetailOut)
async def get_gig_detail(
    gig_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Gig 詳情，包含所有申請與申請者的評價摘要
    """
    service = GigService(db)
    return await service.get_gig_detail(gig_id)


@router.delete("/{gig_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_gig(
    gig_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """只有刊登者可以刪除"""
    service = GigService(db)
    await service.delete_gig(gig_id, current_user)


@router.post(
    "/{gig_id}/applications",
    response_model=ApplicationOutWithApplicant,
    status_code=status.HTTP_201_CREATED
)
async def submit_application(
    gig_id: str,
    application_data: ApplicationCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    申請 Gig。同一人對同一個 Gig 只能申請一次 (重複申請回傳 409)。
    成功後會通知刊登者。
    """
    service = ApplicationService(db)
    return await service.submit_application(
        gig_id=gig_id,
        applicant=current_user,
        cover_letter=application_data.cover_letter
    )
