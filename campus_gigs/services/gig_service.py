# campus_gigs/services/gig_service.py

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.exceptions import ForbiddenError, NotFoundError
from campus_gigs.models.gig import Gig
from campus_gigs.models.user import User
from campus_gigs.repositories.gig_repo import GigRepository
from campus_gigs.repositories.rating_repo import RatingRepository
from campus_gigs.schemas.gig_schema import GigCreate, GigFilter
from campus_gigs.utils.rating_summary import summarize_scores
from campus_gigs.utils.skill_match import skill_matches

logger = logging.getLogger(__name__)


class GigService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.gig_repo = GigRepository(db)
        self.rating_repo = RatingRepository(db)

    async def create_gig(self, gig_data: GigCreate, user: User) -> Gig:
        new_gig = Gig(**gig_data.model_dump(), poster_id=user.user_id)
        created = await self.gig_repo.create_gig(new_gig)
        logger.info(f"Gig created: {created.gig_id} by {user.user_id}")
        return created

    async def list_gigs(self, filters: GigFilter) -> dict:
        """
        依篩選條件列出 Gig，每筆附上申請數。

        有 skill 條件時，技能需要模糊比對，只能在 Python 端篩選後再分頁。
        """
        if filters.skill:
            candidates = await self.gig_repo.list_all_gigs(filters.category, filters.status)
            matched = [g for g in candidates if skill_matches(filters.skill, g.skills_needed)]
            total = len(matched)
            gigs = matched[filters.skip: filters.skip + filters.take]
        else:
            gigs, total = await self.gig_repo.list_gigs(
                filters.category, filters.status, filters.skip, filters.take
            )

        counts = await self.gig_repo.count_applications_by_gig_ids([g.gig_id for g in gigs])
        items = []
        for gig in gigs:
            # 直接把 ORM 物件的欄位搬到 dict，再加上計算出來的欄位
            item = {c.name: getattr(gig, c.name) for c in Gig.__table__.columns}
            item["poster"] = gig.poster
            item["application_count"] = counts.get(gig.gig_id, 0)
            items.append(item)

        return {"gigs": items, "total": total, "skip": filters.skip, "take": filters.take}

    async def get_gig_detail(self, gig_id: str) -> dict:
        """
        Gig 詳情：每位申請者附上收到的評價平均與數量
        """
        gig = await self.gig_repo.get_gig_with_applications(gig_id)
        if not gig:
            raise NotFoundError("Gig not found")

        applicant_ids = [a.applicant_id for a in gig.applications]
        scores = await self.rating_repo.list_scores_by_reviewee_ids(applicant_ids)

        applications = []
        for application in sorted(gig.applications, key=lambda a: a.applied_at, reverse=True):
            applicant = application.applicant
            rating_avg, rating_count = summarize_scores(scores.get(applicant.user_id, []))
            applications.append({
                "application_id": application.application_id,
                "applicant_id": application.applicant_id,
                "cover_letter": application.cover_letter,
                "status": application.status,
                "applied_at": application.applied_at,
                "responded_at": application.responded_at,
                "applicant": {
                    "user_id": applicant.user_id,
                    "name": applicant.name,
                    "avatar_url": applicant.avatar_url,
                    "university": applicant.university,
                    "major": applicant.major,
                    "skills": applicant.skills or [],
                    "rating_avg": rating_avg,
                    "rating_count": rating_count,
                },
            })

        detail = {c.name: getattr(gig, c.name) for c in Gig.__table__.columns}
        detail["poster"] = gig.poster
        detail["applications"] = applications
        detail["application_count"] = len(applications)
        return detail

    async def delete_gig(self, gig_id: str, user: User) -> None:
        gig = await self.gig_repo.get_gig_by_id(gig_id)
        if not gig:
            raise NotFoundError("Gig not found")
        if gig.poster_id != user.user_id:
            raise ForbiddenError("Only the poster can delete this gig")
        await self.gig_repo.delete_gig(gig)
        logger.info(f"Gig deleted: {gig_id} by {user.user_id}")
