# campus_gigs/schemas/gig_schema.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from campus_gigs.models.application import ApplicationStatusEnum
from campus_gigs.models.gig import GigStatusEnum
from campus_gigs.schemas.user_schema import UserSummaryWithSchoolOut


# 1. 基礎欄位 (對應 Model)
class GigBase(BaseModel):
    title: str = Field(..., min_length=5, max_length=255)
    description: str = Field(..., min_length=10)
    category: str = Field(..., max_length=100)
    skills_needed: List[str] = []
    budget: float = Field(..., gt=0)
    duration: str = Field(..., max_length=100)
    deadline: Optional[datetime] = None
    # Blob Storage 回傳的 URL 列表
    attachments: List[str] = []


# 2. 刊登 Gig 時的 Request Body
class GigCreate(GigBase):
    pass


# 3. 列表的篩選條件 (固定的欄位，不接受任意組合的查詢)
class GigFilter(BaseModel):
    category: Optional[str] = None
    status: GigStatusEnum = GigStatusEnum.open
    skill: Optional[str] = None
    skip: int = Field(0, ge=0)
    take: int = Field(20, ge=1, le=100)


# 4. 回傳給前端的 Gig 資料
class GigOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gig_id: str
    poster_id: str
    title: str
    description: str
    category: str
    skills_needed: List[str] = []
    budget: float
    duration: str
    deadline: Optional[datetime] = None
    attachments: List[str] = []
    status: GigStatusEnum
    created_at: datetime
    poster: Optional[UserSummaryWithSchoolOut] = None


class GigListItemOut(GigOut):
    application_count: int = 0


class GigListOut(BaseModel):
    gigs: List[GigListItemOut]
    total: int
    skip: int
    take: int


# 5. Gig 詳情中的申請者 (附帶評價平均)
class ApplicantWithRatingOut(UserSummaryWithSchoolOut):
    skills: List[str] = []
    rating_avg: float = 0
    rating_count: int = 0


class GigApplicationDetailOut(BaseModel):
    application_id: str
    applicant_id: str
    cover_letter: Optional[str] = None
    status: ApplicationStatusEnum
    applied_at: datetime
    responded_at: Optional[datetime] = None
    applicant: ApplicantWithRatingOut


class GigDetailOut(GigOut):
    applications: List[GigApplicationDetailOut] = []
    application_count: int = 0


class GigSummaryOut(BaseModel):
    """巢狀顯示在申請、評價中的精簡 Gig"""
    model_config = ConfigDict(from_attributes=True)

    gig_id: str
    title: str
    status: GigStatusEnum

