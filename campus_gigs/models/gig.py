# models/gig.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, TEXT, DECIMAL, TIMESTAMP, JSON, ForeignKey, Enum, CHAR
from sqlalchemy.orm import relationship

from campus_gigs.core.database import Base, PreciseTimestamp


class GigStatusEnum(str, enum.Enum):
    open = "open"
    closed = "closed"


class Gig(Base):
    # 對應資料庫中名為 gigs 的表格
    __tablename__ = "gigs"

    gig_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    poster_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(TEXT, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    # 有順序的技能列表
    skills_needed = Column(JSON, default=list, nullable=False)
    budget = Column(DECIMAL(10, 2), nullable=False)
    duration = Column(String(100), nullable=False)
    deadline = Column(TIMESTAMP, nullable=True)
    # 外部 Blob Storage 回傳的 URL，本系統不解析內容
    attachments = Column(JSON, default=list, nullable=False)
    status = Column(
        Enum(GigStatusEnum, values_callable=lambda obj: [e.value for e in obj]),
        default=GigStatusEnum.open,
        nullable=False,
        index=True,
    )
    created_at = Column(PreciseTimestamp, default=datetime.now)
    updated_at = Column(PreciseTimestamp, default=datetime.now, onupdate=datetime.now)

    # 建立與 User (刊登者) 的 '一' 關聯
    poster = relationship("User", back_populates="posted_gigs")

    # 建立與 GigApplication 的 '多' 關聯
    applications = relationship(
        "GigApplication",
        back_populates="gig",
        cascade="all, delete-orphan", # 刪除 Gig 時，一併刪除關聯的申請
    )

    ratings = relationship(
        "Rating",
        back_populates="gig",
        cascade="all, delete-orphan",
    )
