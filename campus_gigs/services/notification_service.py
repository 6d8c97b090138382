# campus_gigs/services/notification_service.py

import logging
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.config import settings
from campus_gigs.core.exceptions import ForbiddenError, NotFoundError
from campus_gigs.models.notification import Notification, NotificationTypeEnum
from campus_gigs.models.user import User
from campus_gigs.repositories.notification_repo import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = NotificationRepository(db)

    async def notify(
        self,
        user_id: str,
        type: NotificationTypeEnum,
        title: str,
        message: str,
        link_url: Optional[str] = None,
        gig_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> Optional[Notification]:
        """
        (內部使用) 供其他 Service 在主要操作 commit 之後呼叫。

        通知是 best-effort：寫入失敗只記錄錯誤並 rollback，
        不會讓已經成功的主要操作變成失敗。
        呼叫端在這之後必須重新查詢要回傳的物件 (rollback 會使 Session 中的物件過期)。
        """
        new_notification = Notification(
            user_id=user_id,
            type=type.value,
            title=title,
            message=message,
            link_url=link_url,
            gig_id=gig_id,
            project_id=project_id,
            is_read=False,
        )
        try:
            created = await self.repo.create_notification(new_notification)
        except Exception:
            logger.error(f"建立通知失敗 (type={type.value}, user_id={user_id})", exc_info=True)
            await self.db.rollback()
            return None

        logger.info(f"建立通知 for User ID: {user_id}, Type: {type.value}, Link: {link_url}")
        return created

    async def get_my_notifications(self, user: User) -> Tuple[List[Notification], int]:
        """
        (API 用) 最新的通知與未讀數量
        """
        notifications = await self.repo.list_notifications_by_user(
            user.user_id, limit=settings.NOTIFICATION_LIST_LIMIT
        )
        unread_count = await self.repo.count_unread(user.user_id)
        return notifications, unread_count

    async def mark_notification_as_read(self, notification_id: str, user: User) -> Notification:
        """
        (API 用) 將通知設為已讀，並檢查權限
        """
        notification = await self.repo.get_notification_by_id(notification_id)

        if not notification:
            raise NotFoundError("Notification not found")

        # (重要) 只能標記自己的通知
        if notification.user_id != user.user_id:
            raise ForbiddenError("Not allowed to modify this notification")

        if notification.is_read:
            return notification # 已讀，直接回傳

        return await self.repo.mark_as_read(notification)

    async def mark_all_as_read(self, user: User) -> None:
        await self.repo.mark_all_as_read(user.user_id)
