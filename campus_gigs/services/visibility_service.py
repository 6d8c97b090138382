# campus_gigs/services/visibility_service.py
# 決定「誰可以看到誰的 Profile」。只讀，不寫入任何資料。

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.models.user import User, ProfileVisibilityEnum
from campus_gigs.repositories.application_repo import ApplicationRepository
from campus_gigs.repositories.project_repo import ProjectRepository
from campus_gigs.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class VisibilityService:
    def __init__(self, db: AsyncSession):
        self.user_repo = UserRepository(db)
        self.project_repo = ProjectRepository(db)
        self.application_repo = ApplicationRepository(db)

    async def can_view(self, viewer_id: Optional[str], target_id: str) -> bool:
        """
        以 ID 判斷。找不到對象或查詢失敗時一律回傳 False (fail closed)。
        """
        if viewer_id is not None and viewer_id == target_id:
            return True

        try:
            target = await self.user_repo.get_user_by_id(target_id)
        except SQLAlchemyError:
            logger.error(f"Visibility lookup failed for target {target_id}", exc_info=True)
            return False

        if target is None:
            logger.error(f"Visibility lookup for missing user {target_id}")
            return False

        return await self.can_view_user(viewer_id, target)

    async def can_view_user(self, viewer_id: Optional[str], target: User) -> bool:
        """
        規則 (依序)：
        1. 自己看自己，或對方是公開 Profile -> 可以
        2. 匿名檢視者 -> 不行
        3. 兩人同屬一個專案 -> 可以
        4. 對方曾申請過檢視者刊登的 Gig -> 可以

        第 4 點是單向的：檢視者申請過對方的 Gig，並不會讓檢視者看到對方。
        """
        if viewer_id is not None and viewer_id == target.user_id:
            return True
        if target.profile_visibility == ProfileVisibilityEnum.public:
            return True
        if viewer_id is None:
            return False

        try:
            if await self.project_repo.share_any_project(viewer_id, target.user_id):
                return True
            return await self.application_repo.has_applied_to_poster(
                applicant_id=target.user_id, poster_id=viewer_id
            )
        except SQLAlchemyError:
            logger.error(
                f"Visibility relationship lookup failed ({viewer_id} -> {target.user_id})",
                exc_info=True,
            )
            return False
