# campus_gigs/repositories/notification_repo.py

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List, Optional

from campus_gigs.models.notification import Notification


class NotificationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_notification(self, notification: Notification) -> Notification:
        """
        新增一筆通知。失敗時交由呼叫端 (NotificationService.notify) 處理。
        """
        self.db.add(notification)
        await self.db.flush()
        await self.db.commit()
        return notification

    async def get_notification_by_id(self, notification_id: str) -> Optional[Notification]:
        """
        依 ID 獲取通知 (主要用於權限檢查)
        """
        stmt = select(Notification).where(Notification.notification_id == notification_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_notifications_by_user(self, user_id: str, limit: int) -> List[Notification]:
        """
        獲取某位使用者的最新通知 (依時間降序排列)
        """
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_unread(self, user_id: str) -> int:
        stmt = select(func.count(Notification.notification_id)).where(
            Notification.user_id == user_id,
            Notification.is_read == False,
        )
        return (await self.db.execute(stmt)).scalar_one()

    async def mark_as_read(self, notification: Notification) -> Notification:
        """
        將單一通知設為已讀
        """
        notification.is_read = True
        await self.db.commit()
        await self.db.refresh(notification)
        return notification

    async def mark_all_as_read(self, user_id: str) -> None:
        update_stmt = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read == False)
            .values(is_read=True)
        )
        await self.db.execute(update_stmt)
        await self.db.commit()
