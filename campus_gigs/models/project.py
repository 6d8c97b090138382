# models/project.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Column, String, TEXT, INT, TIMESTAMP, JSON, Boolean, ForeignKey, Enum, CHAR, UniqueConstraint
)
from sqlalchemy.orm import relationship

from campus_gigs.core.database import Base, PreciseTimestamp


class ProjectVisibilityEnum(str, enum.Enum):
    public = "public"
    private = "private"


class ProjectStatusEnum(str, enum.Enum):
    open = "open"
    closed = "closed"


class MemberRoleEnum(str, enum.Enum):
    creator = "creator"
    member = "member"


class Project(Base):
    __tablename__ = "projects"

    project_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    created_by_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(TEXT, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    skills_needed = Column(JSON, default=list, nullable=False)
    max_members = Column(INT, default=5, nullable=False)
    deadline = Column(TIMESTAMP, nullable=True)
    visibility = Column(
        Enum(ProjectVisibilityEnum, values_callable=lambda obj: [e.value for e in obj]),
        default=ProjectVisibilityEnum.public,
        nullable=False,
    )
    status = Column(
        Enum(ProjectStatusEnum, values_callable=lambda obj: [e.value for e in obj]),
        default=ProjectStatusEnum.open,
        nullable=False,
    )
    readme = Column(TEXT, nullable=True)
    created_at = Column(PreciseTimestamp, default=datetime.now)

    # 建立與 User (建立者) 的 '一' 關聯
    created_by = relationship("User", back_populates="created_projects")

    # 成員列表 (建立者本身也是一筆 creator 成員)
    members = relationship(
        "ProjectMember",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectMember.joined_at",
    )

    discussions = relationship(
        "ProjectDiscussion",
        back_populates="project",
        cascade="all, delete-orphan",
    )

    # 檔案只存中繼資料，實際內容在外部 Blob Storage；刪除交給資料庫的 ON DELETE CASCADE
    files = relationship(
        "ProjectFile",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ProjectMember(Base):
    __tablename__ = "project_members"
    # 同一個人在同一個專案只能出現一次
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="uq_project_members_project_user"),
    )

    member_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(CHAR(36), ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(
        Enum(MemberRoleEnum, values_callable=lambda obj: [e.value for e in obj]),
        default=MemberRoleEnum.member,
        nullable=False,
    )
    joined_at = Column(PreciseTimestamp, default=datetime.now)

    # 建立反向關聯回 Project
    project = relationship("Project", back_populates="members")
    user = relationship("User", back_populates="project_memberships")


class ProjectDiscussion(Base):
    __tablename__ = "project_discussions"

    discussion_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(CHAR(36), ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    body = Column(TEXT, nullable=False)
    pinned = Column(Boolean, default=False, nullable=False)
    # 關閉後不能再回覆
    closed = Column(Boolean, default=False, nullable=False)
    created_at = Column(PreciseTimestamp, default=datetime.now)

    project = relationship("Project", back_populates="discussions")
    author = relationship("User")
    replies = relationship(
        "DiscussionReply",
        back_populates="discussion",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DiscussionReply.created_at",
    )

    @property
    def reply_count(self) -> int:
        return len(self.replies)


class DiscussionReply(Base):
    __tablename__ = "discussion_replies"

    reply_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    discussion_id = Column(
        CHAR(36), ForeignKey("project_discussions.discussion_id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    body = Column(TEXT, nullable=False)
    created_at = Column(PreciseTimestamp, default=datetime.now)

    discussion = relationship("ProjectDiscussion", back_populates="replies")
    author = relationship("User")


class ProjectFile(Base):
    __tablename__ = "project_files"

    file_id = Column(CHAR(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(CHAR(36), ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False, index=True)
    uploaded_by_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    # 用戶端先上傳到 Blob Storage，這裡只記錄回傳的 URL
    url = Column(String(1000), nullable=False)
    size = Column(INT, default=0, nullable=False)
    mime_type = Column(String(255), default="application/octet-stream", nullable=False)
    # 前端用來呈現資料夾結構的虛擬路徑
    path = Column(String(500), default="/", nullable=False)
    created_at = Column(PreciseTimestamp, default=datetime.now)

    project = relationship("Project", back_populates="files")
    uploaded_by = relationship("User")
