# campus_gigs/routers/rating_router.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_gigs.core.database import get_db
from campus_gigs.core.security import get_current_user
from campus_gigs.models.user import User
from campus_gigs.schemas.rating_schema import RatingCreate, RatingOut, RatingSummaryOut
from campus_gigs.services.rating_service import RatingService

router = APIRouter(
    prefix="/ratings",
    tags=["Ratings"]
)


@router.post("", response_model=RatingOut, status_code=status.HTTP_201_CREATED)
async def submit_rating(
    rating_data: RatingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    在某個 Gig 上評價另一位使用者 (1 ~ 5 分)。

    - 只有刊登者或被接受的申請者可以評價 (403)
    - 同一個 Gig 上對同一個人只能評一次 (409)
    """
    service = RatingService(db)
    return await service.submit_rating(
        reviewer=current_user,
        gig_id=rating_data.gig_id,
        reviewee_id=rating_data.reviewee_id,
        score=rating_data.score,
        comment=rating_data.comment
    )


@router.get("", response_model=RatingSummaryOut)
async def get_ratings_for_user(
    user_id: str = Query(...),
    db: AsyncSession = Depends(get_db)
):
    """
    某位使用者收到的評價列表、數量與平均分數 (無評價時平均為 0)
    """
    service = RatingService(db)
    return await service.get_ratings_for(user_id)
