# models/user.py
import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, Enum, TEXT, JSON, CHAR
from sqlalchemy.orm import relationship

from campus_gigs.core.database import Base, PreciseTimestamp


# 對應 SQL 中的 ENUM 型別
class ProfileVisibilityEnum(str, enum.Enum):
    public = "public"
    private = "private"


class User(Base):
    __tablename__ = "users"

    # 基本欄位
    user_id = Column(CHAR(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True)

    # Profile 欄位
    bio = Column(TEXT)
    avatar_url = Column(String(500))
    # 技能直接存成 list[str] (JSON 欄位)，呼叫端不需自行編碼/解碼
    skills = Column(JSON, default=list, nullable=False)
    university = Column(String(255))
    major = Column(String(255))
    years_of_study = Column(String(50))
    github_url = Column(String(500))
    website_url = Column(String(500))
    linkedin_url = Column(String(500))
    twitter_url = Column(String(500))
    profile_visibility = Column(
        Enum(ProfileVisibilityEnum, values_callable=lambda obj: [e.value for e in obj]),
        default=ProfileVisibilityEnum.public,
        nullable=False,
    )

    created_at = Column(PreciseTimestamp, default=datetime.now)

    # 關聯設定
    posted_gigs = relationship(
        "Gig",
        back_populates="poster",
        cascade="all, delete-orphan",
    )

    gig_applications = relationship(
        "GigApplication",
        back_populates="applicant",
        foreign_keys="[GigApplication.applicant_id]",
    )

    created_projects = relationship(
        "Project",
        back_populates="created_by",
    )

    project_memberships = relationship(
        "ProjectMember",
        back_populates="user",
    )
