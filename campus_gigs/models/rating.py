# campus_gigs/models/rating.py
import uuid
from datetime import datetime

from sqlalchemy import Column, Text, INT, ForeignKey, CHAR, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from campus_gigs.core.database import Base, PreciseTimestamp


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (
        # 每個 Gig 上，同一組 (評價者 -> 被評價者) 只能評一次
        UniqueConstraint("gig_id", "reviewer_id", "reviewee_id", name="uq_ratings_gig_reviewer_reviewee"),
        CheckConstraint("score >= 1 AND score <= 5", name="ck_ratings_score_range"),
    )

    rating_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    gig_id = Column(CHAR(36), ForeignKey("gigs.gig_id", ondelete="CASCADE"), nullable=False, index=True)
    reviewer_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    reviewee_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    score = Column(INT, nullable=False)
    comment = Column(Text)
    created_at = Column(PreciseTimestamp, default=datetime.now)

    gig = relationship("Gig", back_populates="ratings")
    reviewer = relationship("User", foreign_keys=[reviewer_id])
    reviewee = relationship("User", foreign_keys=[reviewee_id])
