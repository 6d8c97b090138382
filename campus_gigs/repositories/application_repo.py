# campus_gigs/repositories/application_repo.py

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload, selectinload
from typing import List, Optional

from campus_gigs.models.application import GigApplication, ApplicationStatusEnum
from campus_gigs.models.gig import Gig


class ApplicationRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_application_by_id(self, application_id: str) -> Optional[GigApplication]:
        """
        透過 ID 獲取單一申請，並載入申請者 (回傳給前端用)
        """
        stmt = (
            select(GigApplication)
            .where(GigApplication.application_id == application_id)
            .options(joinedload(GigApplication.applicant))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_application_by_id_with_gig(self, application_id: str) -> Optional[GigApplication]:
        """
        透過 ID 獲取單一申請，並載入關聯的 Gig (權限檢查需要 gig.poster_id)
        """
        stmt = (
            select(GigApplication)
            .where(GigApplication.application_id == application_id)
            .options(joinedload(GigApplication.gig))
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def check_existing_application(self, gig_id: str, applicant_id: str) -> Optional[GigApplication]:
        """
        檢查特定使用者是否已申請過特定 Gig
        """
        stmt = select(GigApplication).where(
            GigApplication.gig_id == gig_id,
            GigApplication.applicant_id == applicant_id,
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_application(self, application: GigApplication) -> None:
        """
        新增申請。違反唯一性時 commit 會拋出 IntegrityError，由 Service 轉成 Conflict。
        """
        self.db.add(application)
        await self.db.commit()

    async def update_application(self, application: GigApplication) -> None:
        await self.db.commit()

    async def list_applications_by_applicant(self, applicant_id: str) -> List[GigApplication]:
        """
        「我的申請」：依申請時間降序，並載入 Gig 摘要
        """
        stmt = (
            select(GigApplication)
            .where(GigApplication.applicant_id == applicant_id)
            .options(selectinload(GigApplication.gig))
            .order_by(GigApplication.applied_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_applications_by_applicant(self, applicant_id: str) -> int:
        stmt = select(func.count(GigApplication.application_id)).where(
            GigApplication.applicant_id == applicant_id
        )
        return (await self.db.execute(stmt)).scalar_one()

    async def has_applied_to_poster(self, applicant_id: str, poster_id: str) -> bool:
        """
        applicant 是否曾申請過 poster 刊登的任何 Gig (不論申請狀態)
        """
        stmt = (
            select(GigApplication.application_id)
            .join(Gig, Gig.gig_id == GigApplication.gig_id)
            .where(GigApplication.applicant_id == applicant_id, Gig.poster_id == poster_id)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.first() is not None

    async def is_accepted_applicant(self, gig_id: str, user_id: str) -> bool:
        stmt = (
            select(GigApplication.application_id)
            .where(
                GigApplication.gig_id == gig_id,
                GigApplication.applicant_id == user_id,
                GigApplication.status == ApplicationStatusEnum.accepted,
            )
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.first() is not None
