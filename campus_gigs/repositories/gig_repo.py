# campus_gigs/repositories/gig_repo.py
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload, selectinload

from campus_gigs.models.application import GigApplication
from campus_gigs.models.gig import Gig, GigStatusEnum


class GigRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_gig(self, gig: Gig) -> Gig:
        """
        新增 Gig。
        不使用 refresh()，而是重新查詢一次，讓 poster 關聯被預先載入。
        """
        self.db.add(gig)
        await self.db.commit()
        return await self.get_gig_by_id(gig.gig_id)

    async def get_gig_by_id(self, gig_id: str) -> Optional[Gig]:
        """
        透過 ID 獲取單一 Gig (含刊登者)
        """
        stmt = (
            select(Gig)
            .where(Gig.gig_id == gig_id)
            .options(joinedload(Gig.poster))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_gig_with_applications(self, gig_id: str) -> Optional[Gig]:
        """
        Gig 詳情頁使用：刊登者 + 所有申請 + 每筆申請的申請者
        """
        stmt = (
            select(Gig)
            .where(Gig.gig_id == gig_id)
            .options(
                joinedload(Gig.poster),
                selectinload(Gig.applications).selectinload(GigApplication.applicant),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    def _filtered_stmt(self, category: Optional[str], status: Optional[GigStatusEnum]):
        stmt = select(Gig)
        if category:
            stmt = stmt.where(Gig.category == category)
        if status:
            stmt = stmt.where(Gig.status == status)
        return stmt

    async def list_gigs(
        self,
        category: Optional[str],
        status: Optional[GigStatusEnum],
        skip: int,
        take: int,
    ) -> Tuple[List[Gig], int]:
        """
        依固定欄位篩選 Gig 並分頁，回傳 (該頁 Gig, 總筆數)
        """
        base_stmt = self._filtered_stmt(category, status)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            base_stmt.options(joinedload(Gig.poster))
            .order_by(Gig.created_at.desc())
            .offset(skip)
            .limit(take)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total

    async def list_all_gigs(self, category: Optional[str], status: Optional[GigStatusEnum]) -> List[Gig]:
        """不分頁的版本，給需要在 Python 端比對技能的查詢使用"""
        stmt = (
            self._filtered_stmt(category, status)
            .options(joinedload(Gig.poster))
            .order_by(Gig.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_applications_by_gig_ids(self, gig_ids: List[str]) -> Dict[str, int]:
        """
        一次算出多個 Gig 的申請數量 (避免 N+1)
        """
        if not gig_ids:
            return {}
        stmt = (
            select(GigApplication.gig_id, func.count(GigApplication.application_id))
            .where(GigApplication.gig_id.in_(gig_ids))
            .group_by(GigApplication.gig_id)
        )
        result = await self.db.execute(stmt)
        return {gig_id: count for gig_id, count in result.all()}

    async def list_open_gigs_by_poster(self, poster_id: str, limit: int) -> List[Gig]:
        stmt = (
            select(Gig)
            .where(Gig.poster_id == poster_id, Gig.status == GigStatusEnum.open)
            .order_by(Gig.created_at.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_gigs_by_poster(self, poster_id: str) -> int:
        stmt = select(func.count(Gig.gig_id)).where(Gig.poster_id == poster_id)
        return (await self.db.execute(stmt)).scalar_one()

    async def count_open_gigs(self) -> int:
        stmt = select(func.count(Gig.gig_id)).where(Gig.status == GigStatusEnum.open)
        return (await self.db.execute(stmt)).scalar_one()

    async def delete_gig(self, gig: Gig) -> None:
        # 先載入要連帶刪除的子資料，避免 async session 觸發 lazy load
        await self.db.refresh(gig, attribute_names=["applications", "ratings"])
        await self.db.delete(gig)
        await self.db.commit()
