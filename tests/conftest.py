import os

# 設定必須在匯入 campus_gigs 之前完成 (Settings 會在匯入時讀取環境變數)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import datetime

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campus_gigs.main import app
from campus_gigs.core.database import Base, get_db
from campus_gigs.core.security import create_access_token
from campus_gigs.models.application import ApplicationStatusEnum, GigApplication
from campus_gigs.models.gig import Gig
from campus_gigs.models.project import MemberRoleEnum, Project, ProjectMember, ProjectVisibilityEnum
from campus_gigs.models.user import ProfileVisibilityEnum, User


@pytest.fixture
async def engine():
    # 每個測試一個全新的 in-memory SQLite
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # SQLite 預設不檢查外鍵；打開後 ON DELETE CASCADE 的行為才和 MySQL 一致
    @event.listens_for(test_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine):
    session_factory = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db_session):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token({"user_id": user.user_id})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    async def _make(
        name: str = "Student",
        visibility: ProfileVisibilityEnum = ProfileVisibilityEnum.public,
        skills=None,
        **fields,
    ) -> User:
        counter["n"] += 1
        user = User(
            email=f"user{counter['n']}@campus.edu",
            # 不走 bcrypt，登入測試另外處理
            password_hash="not-a-real-hash",
            name=name,
            profile_visibility=visibility,
            skills=skills or [],
            **fields,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def make_gig(db_session):
    async def _make(poster: User, title: str = "Fix my React app", skills_needed=None, **fields) -> Gig:
        gig = Gig(
            poster_id=poster.user_id,
            title=title,
            description="Need help fixing a few bugs before the demo.",
            category=fields.pop("category", "web"),
            skills_needed=skills_needed or ["React"],
            budget=fields.pop("budget", 100),
            duration=fields.pop("duration", "1 week"),
            **fields,
        )
        db_session.add(gig)
        await db_session.commit()
        return gig

    return _make


@pytest.fixture
def make_application(db_session):
    async def _make(
        gig: Gig,
        applicant: User,
        status: ApplicationStatusEnum = ApplicationStatusEnum.pending,
    ) -> GigApplication:
        application = GigApplication(
            gig_id=gig.gig_id,
            applicant_id=applicant.user_id,
            cover_letter="I can do it",
            status=status,
        )
        db_session.add(application)
        await db_session.commit()
        return application

    return _make


@pytest.fixture
def make_project(db_session):
    async def _make(
        creator: User,
        members=(),
        visibility: ProjectVisibilityEnum = ProjectVisibilityEnum.public,
        max_members: int = 5,
        title: str = "Campus Study Planner",
    ) -> Project:
        project = Project(
            created_by_id=creator.user_id,
            title=title,
            description="A planner app that syncs with the course calendar.",
            category="software",
            skills_needed=["Python"],
            max_members=max_members,
            visibility=visibility,
            members=[ProjectMember(user_id=creator.user_id, role=MemberRoleEnum.creator)]
            + [ProjectMember(user_id=m.user_id, role=MemberRoleEnum.member) for m in members],
        )
        db_session.add(project)
        await db_session.commit()
        return project

    return _make


@pytest.fixture
def at():
    """產生固定的時間戳記，方便驗證排序"""
    def _at(minute: int, second: int = 0) -> datetime:
        return datetime(2024, 3, 1, 12, minute, second)

    return _at
