# campus_gigs/schemas/rating_schema.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from campus_gigs.schemas.user_schema import UserSummaryOut


class RatingCreate(BaseModel):
    gig_id: str
    reviewee_id: str
    # 分數範圍在輸入驗證時就限制為 1..5 的整數
    score: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class RatingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    rating_id: str
    gig_id: str
    reviewer_id: str
    reviewee_id: str
    score: int
    comment: Optional[str] = None
    created_at: datetime


class RatingGigOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gig_id: str
    title: str


class RatingWithContextOut(RatingOut):
    reviewer: UserSummaryOut
    gig: RatingGigOut


class RatingSummaryOut(BaseModel):
    """
    count == 0 時 average 為 0，代表「尚無評價」而不是「被評 0 分」
    """
    ratings: List[RatingWithContextOut]
    count: int
    average: float
