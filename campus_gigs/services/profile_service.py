# campus_gigs/services/profile_service.py
import logging
import math
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.config import settings
from campus_gigs.core.exceptions import NotFoundError, PrivateProfileError
from campus_gigs.models.user import User
from campus_gigs.repositories.application_repo import ApplicationRepository
from campus_gigs.repositories.gig_repo import GigRepository
from campus_gigs.repositories.message_repo import MessageRepository
from campus_gigs.repositories.notification_repo import NotificationRepository
from campus_gigs.repositories.project_repo import ProjectRepository
from campus_gigs.repositories.user_repo import UserRepository
from campus_gigs.schemas.user_schema import PeopleFilter, ProfileUpdate
from campus_gigs.services.visibility_service import VisibilityService
from campus_gigs.utils.skill_match import skill_matches

logger = logging.getLogger(__name__)

# 個人頁面上顯示的 Gig / 專案數量
PROFILE_PREVIEW_LIMIT = 5


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db # Service 可能需要直接存取 db
        self.user_repo = UserRepository(db)
        self.gig_repo = GigRepository(db)
        self.project_repo = ProjectRepository(db)
        self.application_repo = ApplicationRepository(db)
        self.notification_repo = NotificationRepository(db)
        self.message_repo = MessageRepository(db)
        self.visibility = VisibilityService(db)

    async def update_my_profile(self, user: User, update_data: ProfileUpdate) -> User:
        """
        只更新有傳入的欄位 (exclude_unset)
        """
        for field, value in update_data.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "profile_visibility"):
                continue # 不可為空的欄位，傳 null 視為不變更
            if field == "skills" and value is None:
                value = []
            setattr(user, field, value)
        return await self.user_repo.update_user(user)

    async def get_my_stats(self, user: User) -> dict:
        return {
            "gigs": await self.gig_repo.count_gigs_by_poster(user.user_id),
            "projects": await self.project_repo.count_memberships(user.user_id),
            "applications": await self.application_repo.count_applications_by_applicant(user.user_id),
            "notifications": await self.notification_repo.count_unread(user.user_id),
            "unread_messages": await self.message_repo.count_unread_for_user(user.user_id),
        }

    async def get_platform_stats(self) -> dict:
        """
        全站統計：使用者總數、開放中的 Gig 與專案數。
        資料庫出錯時記錄錯誤並回傳全 0。
        """
        try:
            return {
                "total_users": await self.user_repo.count_users(),
                "total_gigs": await self.gig_repo.count_open_gigs(),
                "total_projects": await self.project_repo.count_open_projects(),
            }
        except SQLAlchemyError:
            logger.error("Failed to load platform stats", exc_info=True)
            return {"total_users": 0, "total_gigs": 0, "total_projects": 0}

    async def list_people(self, filters: PeopleFilter, viewer: Optional[User]) -> dict:
        """
        人物目錄：公開的 Profile 加上自己。
        limit 超過上限時直接截斷。
        """
        viewer_id = viewer.user_id if viewer else None
        limit = min(filters.limit, settings.PEOPLE_PAGE_SIZE_MAX)
        offset = (filters.page - 1) * limit

        if filters.skill:
            candidates = await self.user_repo.list_all_people(viewer_id, filters.search)
            matched = [u for u in candidates if skill_matches(filters.skill, u.skills)]
            total = len(matched)
            users = matched[offset: offset + limit]
        else:
            users, total = await self.user_repo.list_people(viewer_id, filters.search, offset, limit)

        return {
            "users": users,
            "total": total,
            "page": filters.page,
            "limit": limit,
            "pages": math.ceil(total / limit) if total else 0,
        }

    async def get_public_profile(self, user_id: str, viewer: Optional[User]) -> dict:
        target = await self.user_repo.get_user_by_id(user_id)
        if not target:
            raise NotFoundError("User not found")

        viewer_id = viewer.user_id if viewer else None
        if not await self.visibility.can_view_user(viewer_id, target):
            raise PrivateProfileError()

        gigs = await self.gig_repo.list_open_gigs_by_poster(user_id, PROFILE_PREVIEW_LIMIT)
        projects = await self.project_repo.list_public_projects_by_creator(user_id, PROFILE_PREVIEW_LIMIT)

        profile = {
            "user_id": target.user_id,
            "name": target.name,
            "bio": target.bio,
            "avatar_url": target.avatar_url,
            "skills": target.skills or [],
            "university": target.university,
            "major": target.major,
            "years_of_study": target.years_of_study,
            "github_url": target.github_url,
            "website_url": target.website_url,
            "linkedin_url": target.linkedin_url,
            "twitter_url": target.twitter_url,
            "created_at": target.created_at,
            "gigs": gigs,
            "projects": projects,
            "counts": {
                "posted_gigs": await self.gig_repo.count_gigs_by_poster(user_id),
                "created_projects": await self.project_repo.count_projects_by_creator(user_id),
                "applications": await self.application_repo.count_applications_by_applicant(user_id),
            },
        }
        return profile
