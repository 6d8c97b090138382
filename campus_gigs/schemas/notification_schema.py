# campus_gigs/schemas/notification_schema.py

from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import List, Optional


class NotificationOut(BaseModel):
    """
    用於 API 回傳的通知格式
    """
    model_config = ConfigDict(from_attributes=True)

    notification_id: str
    user_id: str
    type: str
    title: str
    message: Optional[str] = None
    link_url: Optional[str] = None
    gig_id: Optional[str] = None
    project_id: Optional[str] = None
    is_read: bool
    created_at: datetime


class NotificationListOut(BaseModel):
    notifications: List[NotificationOut]
    unread_count: int
