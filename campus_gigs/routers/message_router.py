# campus_gigs/routers/message_router.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from campus_gigs.core.database import get_db
from campus_gigs.core.security import get_current_user
from campus_gigs.models.user import User
from campus_gigs.schemas.message_schema import ConversationOut, MessageIn, MessageOut
from campus_gigs.services.message_service import MessageService

router = APIRouter(
    prefix="/messages",
    tags=["Messages"],
    dependencies=[Depends(get_current_user)]
)


@router.get("", response_model=List[ConversationOut])
async def list_my_conversations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    對話列表：每位對象一筆，依最近活動排序，附上最後一則訊息與未讀數
    """
    service = MessageService(db)
    return await service.list_conversations(current_user)


@router.post("", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_in: MessageIn,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    傳送訊息。不能傳給自己 (400)，收件者不存在時回傳 404。
    前端在送出後重新抓取對話即可，不需要 WebSocket。
    """
    service = MessageService(db)
    return await service.send_message(
        sender=current_user,
        recipient_id=message_in.recipient_id,
        content=message_in.content,
        gig_id=message_in.gig_id,
        project_id=message_in.project_id
    )


@router.get("/{partner_id}", response_model=List[MessageOut])
async def get_thread(
    partner_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    與某位使用者的完整對話 (時間升序)。
    讀取的同時會把對方傳來的訊息標為已讀。
    """
    service = MessageService(db)
    return await service.get_thread(current_user, partner_id)
