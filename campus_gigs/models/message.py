# campus_gigs/models/message.py

import uuid
from datetime import datetime

from sqlalchemy import Column, Text, ForeignKey, CHAR, Boolean
from sqlalchemy.orm import relationship

from campus_gigs.core.database import Base, PreciseTimestamp


class Message(Base):
    """
    扁平的訊息表。「對話」不是獨立的資料表，
    而是由 MessageService 依照對方 ID 彙整出來的。
    """
    __tablename__ = "messages"

    message_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    sender_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    # 可選的上下文；兩者皆為 NULL 才是「私訊」，才會出現在對話列表中
    # 上下文被刪除時訊息一併刪除，不能退化成私訊
    gig_id = Column(CHAR(36), ForeignKey("gigs.gig_id", ondelete="CASCADE"), nullable=True, index=True)
    project_id = Column(CHAR(36), ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=True, index=True)

    content = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(PreciseTimestamp, default=datetime.now, index=True)

    sender = relationship("User", foreign_keys=[sender_id], lazy="selectin")
    recipient = relationship("User", foreign_keys=[recipient_id], lazy="selectin")
