# campus_gigs/schemas/message_schema.py

from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime

# 複用 UserSummaryOut
from campus_gigs.schemas.user_schema import UserSummaryOut


class MessageIn(BaseModel):
    """
    POST /messages 的請求 Body。
    gig_id / project_id 皆為空時是私訊，才會出現在對話列表中。
    """
    recipient_id: str
    # 空白內容與長度上限都由 Service 檢查 (回傳 400)
    content: str = Field(..., description="訊息內容")
    gig_id: Optional[str] = None
    project_id: Optional[str] = None


class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    message_id: str
    sender_id: str
    recipient_id: str
    gig_id: Optional[str] = None
    project_id: Optional[str] = None
    content: str
    is_read: bool
    created_at: datetime
    # 為了顯示 Sender Name，巢狀 User
    sender: Optional[UserSummaryOut] = None


class LastMessageOut(BaseModel):
    content: str
    created_at: datetime
    is_read: bool


class ConversationOut(BaseModel):
    """
    對話列表中的一筆：每位對象一筆，依最近活動排序
    """
    partner_id: str
    partner: UserSummaryOut
    last_message: LastMessageOut
    unread_count: int
