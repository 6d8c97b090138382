import uuid

import pytest
from sqlalchemy import select

from campus_gigs.core.exceptions import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from campus_gigs.models.application import ApplicationStatusEnum
from campus_gigs.models.notification import Notification
from campus_gigs.models.rating import Rating
from campus_gigs.services.rating_service import RatingService


@pytest.fixture
async def accepted_gig(make_user, make_gig, make_application):
    poster = await make_user("Poster")
    worker = await make_user("Worker")
    gig = await make_gig(poster, title="Tutor calculus")
    await make_application(gig, worker, status=ApplicationStatusEnum.accepted)
    return poster, worker, gig


async def test_poster_and_accepted_applicant_can_rate(db_session, accepted_gig, make_user, make_application):
    poster, worker, gig = accepted_gig
    pending = await make_user("Pending")
    await make_application(gig, pending)
    service = RatingService(db_session)

    assert await service.can_rate(poster.user_id, gig)
    assert await service.can_rate(worker.user_id, gig)
    assert not await service.can_rate(pending.user_id, gig)


async def test_poster_rates_worker_and_worker_is_notified(db_session, accepted_gig):
    poster, worker, gig = accepted_gig

    rating = await RatingService(db_session).submit_rating(
        reviewer=poster, gig_id=gig.gig_id, reviewee_id=worker.user_id, score=5, comment="Great!"
    )

    assert rating.score == 5
    assert rating.reviewer.name == "Poster"
    assert rating.gig.title == "Tutor calculus"

    result = await db_session.execute(select(Notification).where(Notification.user_id == worker.user_id))
    notification = result.scalars().one()
    assert notification.type == "rating_received"
    assert notification.title == "New Rating"
    assert notification.message == 'Poster rated you 5/5 stars for "Tutor calculus"'


async def test_accepted_worker_can_rate_poster(db_session, accepted_gig):
    poster, worker, gig = accepted_gig
    rating = await RatingService(db_session).submit_rating(worker, gig.gig_id, poster.user_id, 4)
    assert rating.reviewee_id == poster.user_id


async def test_self_rating_is_invalid(db_session, accepted_gig):
    poster, _, gig = accepted_gig
    with pytest.raises(InvalidArgumentError):
        await RatingService(db_session).submit_rating(poster, gig.gig_id, poster.user_id, 5)


async def test_rating_on_missing_gig_is_not_found(db_session, accepted_gig):
    poster, worker, _ = accepted_gig
    with pytest.raises(NotFoundError):
        await RatingService(db_session).submit_rating(poster, str(uuid.uuid4()), worker.user_id, 5)


async def test_outsider_cannot_rate(db_session, accepted_gig, make_user):
    _, worker, gig = accepted_gig
    outsider = await make_user("Outsider")
    with pytest.raises(ForbiddenError):
        await RatingService(db_session).submit_rating(outsider, gig.gig_id, worker.user_id, 1)


async def test_second_rating_for_same_pair_conflicts(db_session, accepted_gig):
    poster, worker, gig = accepted_gig
    service = RatingService(db_session)

    await service.submit_rating(poster, gig.gig_id, worker.user_id, 5)
    with pytest.raises(ConflictError):
        await service.submit_rating(poster, gig.gig_id, worker.user_id, 3)


async def test_ratings_summary(db_session, accepted_gig, make_user, make_gig, make_application):
    poster, worker, gig = accepted_gig
    other_poster = await make_user("Second Poster")
    other_gig = await make_gig(other_poster, title="Move boxes")
    await make_application(other_gig, worker, status=ApplicationStatusEnum.accepted)

    service = RatingService(db_session)
    await service.submit_rating(poster, gig.gig_id, worker.user_id, 5)
    await service.submit_rating(other_poster, other_gig.gig_id, worker.user_id, 4)

    summary = await service.get_ratings_for(worker.user_id)

    assert summary["count"] == 2
    assert summary["average"] == 4.5
    assert {r.gig.title for r in summary["ratings"]} == {"Tutor calculus", "Move boxes"}


async def test_ratings_summary_without_ratings(db_session, make_user):
    nobody = await make_user("New")
    summary = await RatingService(db_session).get_ratings_for(nobody.user_id)
    assert summary == {"ratings": [], "count": 0, "average": 0}


@pytest.mark.parametrize("scores, expected", [([4, 5, 3], 4.0), ([4, 5, 4, 4], 4.3)])
async def test_ratings_average_rounds_half_up(db_session, make_user, make_gig, scores, expected):
    worker = await make_user("Worker")
    poster = await make_user("Poster")
    gig = await make_gig(poster)
    for i, score in enumerate(scores):
        reviewer = await make_user(f"Reviewer {i}")
        db_session.add(Rating(gig_id=gig.gig_id, reviewer_id=reviewer.user_id,
                              reviewee_id=worker.user_id, score=score))
    await db_session.commit()

    summary = await RatingService(db_session).get_ratings_for(worker.user_id)

    assert summary["count"] == len(scores)
    assert summary["average"] == expected
