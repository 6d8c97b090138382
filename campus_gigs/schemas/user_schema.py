# campus_gigs/schemas/user_schema.py
import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from campus_gigs.models.user import ProfileVisibilityEnum
from campus_gigs.models.project import ProjectStatusEnum, ProjectVisibilityEnum


# Token 回應的格式
class Token(BaseModel):
    access_token: str
    token_type: str


# Token 內的資料
class TokenData(BaseModel):
    user_id: str


# 註冊請求 Body
class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=100)
    # 密碼要求英數混合
    password: str = Field(..., min_length=8)

    @field_validator('password')
    @classmethod
    def validate_password(cls, v: str) -> str:
        """
        驗證密碼是否包含英文和數字
        """
        if not re.search(r'(?=.*[a-zA-Z])(?=.*[0-9])', v):
            raise ValueError('Password must contain letters and digits')
        return v


class UserSummaryOut(BaseModel):
    """
    精簡的使用者資訊，用於巢狀顯示在 Gig、訊息、評價之中
    """
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    avatar_url: Optional[str] = None


class UserSummaryWithSchoolOut(UserSummaryOut):
    university: Optional[str] = None
    major: Optional[str] = None


class UserOut(BaseModel):
    """註冊/查詢使用者的安全回應 (不含密碼)"""
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: EmailStr
    name: str
    is_active: bool


# --- Profile ---
class ProfileBase(BaseModel):
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    skills: List[str] = []
    university: Optional[str] = None
    major: Optional[str] = None
    years_of_study: Optional[str] = None
    github_url: Optional[str] = None
    website_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None


class ProfileUpdate(BaseModel):
    """PATCH /users/me：全部欄位皆可選，只更新有傳入的欄位"""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    bio: Optional[str] = Field(None, max_length=1000)
    avatar_url: Optional[str] = Field(None, max_length=500)
    skills: Optional[List[str]] = None
    university: Optional[str] = None
    major: Optional[str] = None
    years_of_study: Optional[str] = None
    github_url: Optional[str] = None
    website_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    profile_visibility: Optional[ProfileVisibilityEnum] = None

    @field_validator('github_url', 'website_url', 'linkedin_url', 'twitter_url')
    @classmethod
    def empty_url_to_none(cls, v: Optional[str]) -> Optional[str]:
        # 前端清空欄位時會傳 ""，存成 NULL
        if v == "":
            return None
        if v is not None and not re.match(r'^https?://', v):
            raise ValueError('URL must start with http:// or https://')
        return v


class MyProfileOut(ProfileBase):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    email: EmailStr
    name: str
    profile_visibility: ProfileVisibilityEnum
    created_at: datetime


class PersonOut(ProfileBase):
    """公開目錄中的一筆人物資料 (不含 email)"""
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    created_at: datetime


class PeopleListOut(BaseModel):
    users: List[PersonOut]
    total: int
    page: int
    limit: int
    pages: int


class ProfileGigOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gig_id: str
    title: str
    category: str
    budget: float
    created_at: datetime


class ProfileProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    project_id: str
    title: str
    category: str
    status: ProjectStatusEnum
    skills_needed: List[str] = []
    visibility: ProjectVisibilityEnum
    created_at: datetime


class ProfileCountsOut(BaseModel):
    posted_gigs: int
    created_projects: int
    applications: int


class PublicProfileOut(PersonOut):
    """GET /people/{user_id} 的完整回應"""
    gigs: List[ProfileGigOut] = []
    projects: List[ProfileProjectOut] = []
    counts: ProfileCountsOut


class UserStatsOut(BaseModel):
    gigs: int
    projects: int
    applications: int
    notifications: int
    unread_messages: int


# 首頁用的全站統計 (不需登入)
class PlatformStatsOut(BaseModel):
    total_users: int
    total_gigs: int
    total_projects: int


# 人物目錄的篩選條件 (固定欄位)
class PeopleFilter(BaseModel):
    search: Optional[str] = None
    skill: Optional[str] = None
    page: int = Field(1, ge=1)
    # 超過 settings.PEOPLE_PAGE_SIZE_MAX 時由 Service 截斷，不回傳錯誤
    limit: int = Field(20, ge=1)
