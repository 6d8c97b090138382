# campus_gigs/models/application.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, Text, ForeignKey, TIMESTAMP, Enum, CHAR, UniqueConstraint
from sqlalchemy.orm import relationship

from campus_gigs.core.database import Base, PreciseTimestamp


class ApplicationStatusEnum(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class GigApplication(Base):
    __tablename__ = "gig_applications"
    # (重要) 同一位使用者對同一個 Gig 只能申請一次，真正的保證在資料庫層
    __table_args__ = (
        UniqueConstraint("gig_id", "applicant_id", name="uq_gig_applications_gig_applicant"),
    )

    application_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    gig_id = Column(CHAR(36), ForeignKey("gigs.gig_id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    cover_letter = Column(Text)

    status = Column(
        Enum(ApplicationStatusEnum, values_callable=lambda obj: [e.value for e in obj]),
        default=ApplicationStatusEnum.pending,
        nullable=False,
    )
    # 只在接受時寫入；權限判斷一律看 gig.poster_id，不看這個欄位
    accepted_by_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True)

    applied_at = Column(PreciseTimestamp, default=datetime.now)
    responded_at = Column(TIMESTAMP, nullable=True)

    # --- 建立關聯 (Relationships) ---
    gig = relationship("Gig", back_populates="applications")

    applicant = relationship(
        "User",
        back_populates="gig_applications",
        foreign_keys=[applicant_id],
    )
