# campus_gigs/routers/notification_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.database import get_db
from campus_gigs.models.user import User
from campus_gigs.core.security import get_current_user
from campus_gigs.services.notification_service import NotificationService
from campus_gigs.schemas.notification_schema import NotificationListOut, NotificationOut

router = APIRouter(
    prefix="/notifications",
    tags=["Notifications"]
)


@router.get(
    "",
    response_model=NotificationListOut,
    summary="獲取我的通知列表"
)
async def get_my_notifications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    獲取當前登入者最新的通知 (依時間倒序) 與未讀數量。
    前端應使用此 API 定期輪詢 (Polling)。
    """
    service = NotificationService(db)
    notifications, unread_count = await service.get_my_notifications(current_user)
    return {"notifications": notifications, "unread_count": unread_count}


@router.patch(
    "/read-all",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="將所有通知設為已讀"
)
async def mark_all_as_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    await service.mark_all_as_read(current_user)


@router.patch(
    "/{notification_id}/read",
    response_model=NotificationOut,
    summary="將通知設為已讀"
)
async def mark_as_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    當使用者點擊通知時，前端應呼叫此 API 將其標記為已讀。
    """
    service = NotificationService(db)
    return await service.mark_notification_as_read(notification_id, current_user)
