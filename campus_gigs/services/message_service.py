# campus_gigs/services/message_service.py

import logging
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.config import settings
from campus_gigs.core.exceptions import InvalidArgumentError, NotFoundError
from campus_gigs.models.message import Message
from campus_gigs.models.notification import NotificationTypeEnum
from campus_gigs.models.user import User
from campus_gigs.repositories.gig_repo import GigRepository
from campus_gigs.repositories.message_repo import MessageRepository
from campus_gigs.repositories.project_repo import ProjectRepository
from campus_gigs.repositories.user_repo import UserRepository
from campus_gigs.schemas.message_schema import ConversationOut, LastMessageOut, MessageOut
from campus_gigs.schemas.user_schema import UserSummaryOut
from campus_gigs.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.message_repo = MessageRepository(db)
        self.user_repo = UserRepository(db)
        self.gig_repo = GigRepository(db)
        self.project_repo = ProjectRepository(db)
        self.notification_service = NotificationService(db)

    async def list_conversations(self, user: User) -> List[ConversationOut]:
        """
        將私訊依「對方」彙整成對話列表。

        訊息已依時間降序取出，所以每位對象第一次出現的那則就是最新訊息；
        dict 保留插入順序，對話列表因此自然依最近活動排序。
        """
        messages = await self.message_repo.list_unscoped_messages_for_user(user.user_id)

        conversations: Dict[str, dict] = {}
        for msg in messages:
            if msg.sender_id == user.user_id:
                partner_id, partner = msg.recipient_id, msg.recipient
            else:
                partner_id, partner = msg.sender_id, msg.sender

            if partner_id not in conversations:
                conversations[partner_id] = {
                    "partner_id": partner_id,
                    "partner": UserSummaryOut.model_validate(partner),
                    "last_message": LastMessageOut(
                        content=msg.content,
                        created_at=msg.created_at,
                        is_read=msg.is_read,
                    ),
                    "unread_count": 0,
                }

            if msg.recipient_id == user.user_id and not msg.is_read:
                conversations[partner_id]["unread_count"] += 1

        return [ConversationOut(**conv) for conv in conversations.values()]

    async def get_thread(self, user: User, partner_id: str) -> List[MessageOut]:
        """
        取得與 partner 的完整私訊 (時間升序)，並將對方傳來的訊息標為已讀。
        回傳的是標記前的狀態，前端可據此顯示「剛剛才讀到」的訊息。
        """
        messages = await self.message_repo.list_thread(user.user_id, partner_id)
        snapshot = [MessageOut.model_validate(m) for m in messages]

        await self.message_repo.mark_thread_as_read(user.user_id, partner_id)
        return snapshot

    async def send_message(
        self,
        sender: User,
        recipient_id: str,
        content: str,
        gig_id: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> Message:
        if recipient_id == sender.user_id:
            raise InvalidArgumentError("Cannot send a message to yourself")

        if not content or not content.strip():
            raise InvalidArgumentError("Message content cannot be empty")
        if len(content) > settings.MESSAGE_MAX_LENGTH:
            raise InvalidArgumentError(
                f"Message content exceeds {settings.MESSAGE_MAX_LENGTH} characters"
            )

        recipient = await self.user_repo.get_user_by_id(recipient_id)
        if not recipient:
            raise NotFoundError("Recipient not found")
        if gig_id is not None and not await self.gig_repo.get_gig_by_id(gig_id):
            raise NotFoundError("Gig not found")
        if project_id is not None and not await self.project_repo.get_project_by_id(project_id):
            raise NotFoundError("Project not found")

        sender_name = sender.name

        new_message = Message(
            sender_id=sender.user_id,
            recipient_id=recipient_id,
            gig_id=gig_id,
            project_id=project_id,
            content=content,
            is_read=False,
        )
        saved = await self.message_repo.save_message(new_message)
        message_id = saved.message_id

        await self.notification_service.notify(
            user_id=recipient_id,
            type=NotificationTypeEnum.message,
            title="New Message",
            message=f"{sender_name} sent you a message",
            link_url="/messages",
            gig_id=gig_id,
            project_id=project_id,
        )

        return await self.message_repo.get_message_by_id(message_id)
