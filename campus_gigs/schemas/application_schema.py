# campus_gigs/schemas/application_schema.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from campus_gigs.models.application import ApplicationStatusEnum
from campus_gigs.schemas.gig_schema import GigSummaryOut
from campus_gigs.schemas.user_schema import UserSummaryOut


# --- 建立 (Create) ---
class ApplicationCreate(BaseModel):
    # gig_id 由 URL 取得，applicant_id 由 Token 取得
    cover_letter: Optional[str] = Field(None, max_length=5000)


# --- 雇主的決定 (Decide) ---
class ApplicationDecision(BaseModel):
    """用於接受/拒絕申請的請求 Body"""
    action: str # 必須是 "accepted" 或 "rejected"，由 Service 驗證


# --- 讀取 (Read / Out) ---
class ApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True) # orm_mode = True

    application_id: str
    gig_id: str
    applicant_id: str
    cover_letter: Optional[str] = None
    status: ApplicationStatusEnum
    accepted_by_id: Optional[str] = None
    applied_at: datetime
    responded_at: Optional[datetime] = None


# 建立申請後直接附上申請者資訊，呼叫端不需要再查一次
class ApplicationOutWithApplicant(ApplicationOut):
    applicant: UserSummaryOut


# 「我的申請」列表使用
class ApplicationOutWithGig(ApplicationOut):
    gig: GigSummaryOut
