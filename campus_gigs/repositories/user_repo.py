# campus_gigs/repositories/user_repo.py
# 負責與使用者相關的資料庫操作
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from campus_gigs.models.user import User, ProfileVisibilityEnum


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> User | None:
        """
        透過 email 查詢使用者
        """
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_user(self, user: User) -> User:
        """
        新增使用者到資料庫
        """
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def get_user_by_id(self, user_id: str) -> User | None:
        """
        透過 user_id 查詢使用者
        """
        stmt = select(User).where(User.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def update_user(self, user: User) -> User:
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def count_users(self) -> int:
        stmt = select(func.count(User.user_id))
        return (await self.db.execute(stmt)).scalar_one()

    def _people_stmt(self, viewer_id: Optional[str], search: Optional[str]):
        # 目錄只列出公開的 Profile，再加上自己的
        visible = User.profile_visibility == ProfileVisibilityEnum.public
        if viewer_id:
            visible = or_(visible, User.user_id == viewer_id)

        stmt = select(User).where(User.is_active == True, visible)

        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    User.name.ilike(pattern),
                    User.university.ilike(pattern),
                    User.major.ilike(pattern),
                )
            )
        return stmt

    async def list_people(
        self,
        viewer_id: Optional[str],
        search: Optional[str],
        offset: int,
        limit: int,
    ) -> Tuple[List[User], int]:
        """
        分頁查詢人物目錄，回傳 (該頁使用者, 總筆數)
        """
        base_stmt = self._people_stmt(viewer_id, search)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = base_stmt.order_by(User.created_at.desc()).offset(offset).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def list_all_people(self, viewer_id: Optional[str], search: Optional[str]) -> List[User]:
        """
        不分頁的版本：技能模糊比對必須在 Python 端進行，由 Service 自行分頁
        """
        stmt = self._people_stmt(viewer_id, search).order_by(User.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
