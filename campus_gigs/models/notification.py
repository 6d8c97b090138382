# campus_gigs/models/notification.py

import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, TEXT, BOOLEAN, CHAR, ForeignKey
from sqlalchemy.orm import relationship

from campus_gigs.core.database import Base, PreciseTimestamp


class NotificationTypeEnum(str, enum.Enum):
    gig_application = "gig_application"
    application_accepted = "application_accepted"
    application_rejected = "application_rejected"
    message = "message"
    project_invite = "project_invite"
    rating_received = "rating_received"


class Notification(Base):
    __tablename__ = "notifications"

    notification_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # (重要) 關聯到接收通知的 user
    user_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    type = Column(String(50), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(TEXT)

    # 點擊通知後要導向的前端 URL
    link_url = Column(String(500))

    gig_id = Column(CHAR(36), ForeignKey("gigs.gig_id", ondelete="CASCADE"), nullable=True)
    project_id = Column(CHAR(36), ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=True)

    is_read = Column(BOOLEAN, default=False, nullable=False)
    created_at = Column(PreciseTimestamp, default=datetime.now)

    # 建立反向關聯
    user = relationship("User")
