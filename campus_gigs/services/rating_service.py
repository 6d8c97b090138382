# campus_gigs/services/rating_service.py

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.exceptions import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from campus_gigs.models.gig import Gig
from campus_gigs.models.notification import NotificationTypeEnum
from campus_gigs.models.rating import Rating
from campus_gigs.models.user import User
from campus_gigs.repositories.application_repo import ApplicationRepository
from campus_gigs.repositories.gig_repo import GigRepository
from campus_gigs.repositories.rating_repo import RatingRepository
from campus_gigs.repositories.user_repo import UserRepository
from campus_gigs.services.notification_service import NotificationService
from campus_gigs.utils.rating_summary import summarize_scores

logger = logging.getLogger(__name__)


class RatingService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.rating_repo = RatingRepository(db)
        self.gig_repo = GigRepository(db)
        self.application_repo = ApplicationRepository(db)
        self.user_repo = UserRepository(db)
        self.notification_service = NotificationService(db)

    async def can_rate(self, reviewer_id: str, gig: Gig) -> bool:
        """
        只有 Gig 的刊登者，或被接受的申請者，可以在這個 Gig 上評價別人
        """
        if gig.poster_id == reviewer_id:
            return True
        return await self.application_repo.is_accepted_applicant(gig.gig_id, reviewer_id)

    async def submit_rating(
        self,
        reviewer: User,
        gig_id: str,
        reviewee_id: str,
        score: int,
        comment: Optional[str] = None,
    ) -> Rating:
        if reviewer.user_id == reviewee_id:
            raise InvalidArgumentError("You cannot rate yourself")

        gig = await self.gig_repo.get_gig_by_id(gig_id)
        if not gig:
            raise NotFoundError("Gig not found")

        if not await self.user_repo.get_user_by_id(reviewee_id):
            raise NotFoundError("User not found")

        if not await self.can_rate(reviewer.user_id, gig):
            raise ForbiddenError("You are not eligible to rate on this gig")

        existing = await self.rating_repo.get_rating(gig_id, reviewer.user_id, reviewee_id)
        if existing:
            raise ConflictError("You have already rated this user for this gig")

        reviewer_id = reviewer.user_id
        reviewer_name = reviewer.name
        gig_title = gig.title

        new_rating = Rating(
            gig_id=gig_id,
            reviewer_id=reviewer_id,
            reviewee_id=reviewee_id,
            score=score,
            comment=comment,
        )
        try:
            await self.rating_repo.create_rating(new_rating)
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"Duplicate rating (gig={gig_id}, reviewer={reviewer_id}, reviewee={reviewee_id})")
            raise ConflictError("You have already rated this user for this gig")

        rating_id = new_rating.rating_id

        await self.notification_service.notify(
            user_id=reviewee_id,
            type=NotificationTypeEnum.rating_received,
            title="New Rating",
            message=f'{reviewer_name} rated you {score}/5 stars for "{gig_title}"',
            link_url=f"/people/{reviewee_id}",
            gig_id=gig_id,
        )

        return await self.rating_repo.get_rating_by_id(rating_id)

    async def get_ratings_for(self, user_id: str) -> dict:
        """
        某位使用者收到的所有評價、評價數與平均 (取到小數第一位，無評價時為 0)
        """
        ratings = await self.rating_repo.list_ratings_for_user(user_id)
        average, count = summarize_scores([r.score for r in ratings])
        return {"ratings": ratings, "count": count, "average": average}
