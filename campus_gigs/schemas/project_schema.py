# campus_gigs/schemas/project_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from campus_gigs.models.project import MemberRoleEnum, ProjectStatusEnum, ProjectVisibilityEnum
from campus_gigs.schemas.user_schema import UserSummaryOut, UserSummaryWithSchoolOut


# 1. 建立專案時的 Request Body (Input)
class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=5, max_length=255)
    description: str = Field(..., min_length=20)
    category: str = Field(..., max_length=100)
    skills_needed: List[str] = []
    # 未指定時由 Service 帶入 settings.PROJECT_DEFAULT_MAX_MEMBERS
    max_members: Optional[int] = Field(None, gt=0)
    deadline: Optional[datetime] = None
    visibility: ProjectVisibilityEnum = ProjectVisibilityEnum.public
    readme: Optional[str] = None


# 2. 列表的篩選條件
class ProjectFilter(BaseModel):
    category: Optional[str] = None
    status: ProjectStatusEnum = ProjectStatusEnum.open
    skip: int = Field(0, ge=0)
    take: int = Field(20, ge=1, le=100)


# 3. 成員
class ProjectMemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    member_id: str
    user_id: str
    role: MemberRoleEnum
    joined_at: datetime
    user: UserSummaryWithSchoolOut


# 4. 回傳給前端的專案資料 (Output)
class ProjectOut(BaseModel):
    model_config = ConfigDict(from_attributes=True) # 啟用 ORM 模式

    project_id: str
    created_by_id: str
    title: str
    description: str
    category: str
    skills_needed: List[str] = []
    max_members: int
    deadline: Optional[datetime] = None
    visibility: ProjectVisibilityEnum
    status: ProjectStatusEnum
    readme: Optional[str] = None
    created_at: datetime
    created_by: Optional[UserSummaryWithSchoolOut] = None
    member_count: int = 0


class ProjectListOut(BaseModel):
    projects: List[ProjectOut]
    total: int
    skip: int
    take: int


# 5. 專案詳情，包含所有成員 (依加入時間排序)
class ProjectDetailOut(ProjectOut):
    members: List[ProjectMemberOut] = []


# 6. 討論串
class DiscussionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)


class DiscussionUpdate(BaseModel):
    """只有傳入的欄位會被修改"""
    pinned: Optional[bool] = None
    closed: Optional[bool] = None


class DiscussionReplyCreate(BaseModel):
    # 空白內容由 Service 檢查 (回傳 400)
    body: str


class DiscussionReplyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    reply_id: str
    discussion_id: str
    author_id: str
    body: str
    created_at: datetime
    author: UserSummaryOut


class DiscussionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    discussion_id: str
    project_id: str
    author_id: str
    title: str
    body: str
    pinned: bool
    closed: bool
    created_at: datetime
    author: UserSummaryOut
    reply_count: int = 0
    # 依時間升序
    replies: List[DiscussionReplyOut] = []


# 7. 專案檔案 (檔案本身在外部 Blob Storage，這裡只有中繼資料)
class ProjectFileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    url: str = Field(..., min_length=1, max_length=1000)
    size: int = Field(0, ge=0)
    mime_type: str = Field("application/octet-stream", max_length=255)
    path: str = Field("/", max_length=500)


class ProjectFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    file_id: str
    project_id: str
    uploaded_by_id: str
    name: str
    url: str
    size: int
    mime_type: str
    path: str
    created_at: datetime
    uploaded_by: UserSummaryOut
