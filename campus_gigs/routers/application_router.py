# campus_gigs/routers/application_router.py

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from campus_gigs.core.database import get_db
from campus_gigs.core.security import get_current_user
from campus_gigs.models.user import User
from campus_gigs.services.application_service import ApplicationService
from campus_gigs.schemas.application_schema import (
    ApplicationDecision,
    ApplicationOutWithApplicant,
    ApplicationOutWithGig,
)

# 建立 API Router
router = APIRouter(
    prefix="/applications",
    tags=["Applications"],
    dependencies=[Depends(get_current_user)] # 重要：此 router 下所有 API 都需要登入
)


@router.get("/my", response_model=List[ApplicationOutWithGig])
async def get_my_applications(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    檢視自己送出的所有申請 (最新在前)
    """
    service = ApplicationService(db)
    return await service.list_my_applications(current_user)


@router.patch("/{application_id}", response_model=ApplicationOutWithApplicant)
async def decide_application(
    application_id: str,
    decision: ApplicationDecision,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    (刊登者) 接受或拒絕申請。

    - action 欄位應傳入 "accepted" 或 "rejected"，其他值回傳 400。
    - 已經決定過的申請不能再改 (409)。
    """
    service = ApplicationService(db)
    return await service.decide_application(
        application_id=application_id,
        action=decision.action,
        actor=current_user
    )
