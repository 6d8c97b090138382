# campus_gigs/repositories/message_repo.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, update, func
from typing import List, Optional

from campus_gigs.models.message import Message


class MessageRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _unscoped():
        # 私訊：沒有掛在 Gig 或 Project 底下的訊息
        return and_(Message.gig_id.is_(None), Message.project_id.is_(None))

    async def list_unscoped_messages_for_user(self, user_id: str) -> List[Message]:
        """
        使用者傳出或收到的所有私訊，依時間降序 (最新在前)。
        sender / recipient 由 Model 上的 lazy="selectin" 一併載入。
        """
        stmt = (
            select(Message)
            .where(
                self._unscoped(),
                or_(Message.sender_id == user_id, Message.recipient_id == user_id),
            )
            .order_by(Message.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_thread(self, user_id: str, partner_id: str) -> List[Message]:
        """
        兩人之間的私訊，依時間升序
        """
        stmt = (
            select(Message)
            .where(
                self._unscoped(),
                or_(
                    and_(Message.sender_id == user_id, Message.recipient_id == partner_id),
                    and_(Message.sender_id == partner_id, Message.recipient_id == user_id),
                ),
            )
            .order_by(Message.created_at.asc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def mark_thread_as_read(self, user_id: str, partner_id: str) -> None:
        """
        將 partner 傳給 user 的未讀私訊全部設為已讀
        """
        update_stmt = (
            update(Message)
            .where(
                self._unscoped(),
                Message.sender_id == partner_id,
                Message.recipient_id == user_id,
                Message.is_read == False,
            )
            .values(is_read=True)
        )
        await self.db.execute(update_stmt)
        await self.db.commit()

    async def save_message(self, message: Message) -> Message:
        self.db.add(message)
        await self.db.commit()
        return message

    async def get_message_by_id(self, message_id: str) -> Optional[Message]:
        # 重新查詢，讓 sender / recipient 被載入
        stmt = (
            select(Message)
            .where(Message.message_id == message_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def count_unread_for_user(self, user_id: str) -> int:
        stmt = select(func.count(Message.message_id)).where(
            Message.recipient_id == user_id,
            Message.is_read == False,
        )
        return (await self.db.execute(stmt)).scalar_one()
