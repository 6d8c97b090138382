# campus_gigs/repositories/rating_repo.py

from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import joinedload

from campus_gigs.models.rating import Rating


class RatingRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_rating(self, gig_id: str, reviewer_id: str, reviewee_id: str) -> Optional[Rating]:
        """
        檢查同一組 (Gig, 評價者, 被評價者) 是否已經評過
        """
        stmt = select(Rating).where(
            Rating.gig_id == gig_id,
            Rating.reviewer_id == reviewer_id,
            Rating.reviewee_id == reviewee_id,
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_rating(self, rating: Rating) -> None:
        """違反唯一性時 commit 會拋出 IntegrityError"""
        self.db.add(rating)
        await self.db.commit()

    async def get_rating_by_id(self, rating_id: str) -> Optional[Rating]:
        stmt = (
            select(Rating)
            .where(Rating.rating_id == rating_id)
            .options(joinedload(Rating.reviewer), joinedload(Rating.gig))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_ratings_for_user(self, reviewee_id: str) -> List[Rating]:
        """
        某位使用者收到的所有評價，依時間降序，附上評價者與 Gig
        """
        stmt = (
            select(Rating)
            .where(Rating.reviewee_id == reviewee_id)
            .options(joinedload(Rating.reviewer), joinedload(Rating.gig))
            .order_by(Rating.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_scores_by_reviewee_ids(self, reviewee_ids: List[str]) -> Dict[str, List[int]]:
        """
        一次取得多位使用者收到的所有分數，回傳 {user_id: [score, ...]}
        """
        scores: Dict[str, List[int]] = defaultdict(list)
        if not reviewee_ids:
            return scores
        stmt = select(Rating.reviewee_id, Rating.score).where(Rating.reviewee_id.in_(reviewee_ids))
        result = await self.db.execute(stmt)
        for reviewee_id, score in result.all():
            scores[reviewee_id].append(score)
        return scores
