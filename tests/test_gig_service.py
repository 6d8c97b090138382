import uuid

import pytest

from campus_gigs.core.exceptions import ForbiddenError, NotFoundError
from campus_gigs.models.gig import GigStatusEnum
from campus_gigs.models.rating import Rating
from campus_gigs.schemas.gig_schema import GigCreate, GigFilter
from campus_gigs.services.gig_service import GigService


async def test_create_gig_keeps_skill_list(db_session, make_user):
    poster = await make_user("Poster")
    data = GigCreate(
        title="Build a landing page",
        description="Simple landing page for the robotics club.",
        category="web",
        skills_needed=["HTML", "CSS"],
        budget=150,
        duration="3 days",
        attachments=["https://blob.example/brief.pdf"],
    )

    gig = await GigService(db_session).create_gig(data, poster)

    assert gig.skills_needed == ["HTML", "CSS"]
    assert gig.attachments == ["https://blob.example/brief.pdf"]
    assert gig.status == GigStatusEnum.open
    assert gig.poster.name == "Poster"


async def test_list_filters_by_category_and_counts_applications(
    db_session, make_user, make_gig, make_application
):
    poster = await make_user("Poster")
    applicant = await make_user("Applicant")
    web = await make_gig(poster, title="Web gig", category="web")
    await make_gig(poster, title="Design gig", category="design")
    await make_gig(poster, title="Closed web gig", category="web", status=GigStatusEnum.closed)
    await make_application(web, applicant)

    listing = await GigService(db_session).list_gigs(GigFilter(category="web"))

    assert listing["total"] == 1
    assert listing["gigs"][0]["title"] == "Web gig"
    assert listing["gigs"][0]["application_count"] == 1


async def test_list_filters_by_fuzzy_skill(db_session, make_user, make_gig):
    poster = await make_user("Poster")
    await make_gig(poster, title="Python gig", skills_needed=["Python", "Pandas"])
    await make_gig(poster, title="Design gig", skills_needed=["Figma"])

    listing = await GigService(db_session).list_gigs(GigFilter(skill="pythn"))

    assert [g["title"] for g in listing["gigs"]] == ["Python gig"]
    assert listing["total"] == 1


async def test_detail_includes_applicant_rating_summary(
    db_session, make_user, make_gig, make_application
):
    poster = await make_user("Poster")
    applicant = await make_user("Applicant", skills=["React"])
    earlier_poster = await make_user("Earlier Poster")
    earlier_gig = await make_gig(earlier_poster, title="Earlier gig")
    gig = await make_gig(poster)
    await make_application(gig, applicant)
    db_session.add_all([
        Rating(gig_id=earlier_gig.gig_id, reviewer_id=earlier_poster.user_id,
               reviewee_id=applicant.user_id, score=5),
        Rating(gig_id=earlier_gig.gig_id, reviewer_id=poster.user_id,
               reviewee_id=applicant.user_id, score=4),
    ])
    await db_session.commit()

    detail = await GigService(db_session).get_gig_detail(gig.gig_id)

    assert detail["application_count"] == 1
    summary = detail["applications"][0]["applicant"]
    assert summary["skills"] == ["React"]
    assert summary["rating_avg"] == 4.5
    assert summary["rating_count"] == 2


async def test_detail_of_missing_gig_is_not_found(db_session):
    with pytest.raises(NotFoundError):
        await GigService(db_session).get_gig_detail(str(uuid.uuid4()))


async def test_only_poster_can_delete(db_session, make_user, make_gig, make_application):
    poster = await make_user("Poster")
    other = await make_user("Other")
    gig = await make_gig(poster)
    await make_application(gig, other)
    service = GigService(db_session)

    with pytest.raises(ForbiddenError):
        await service.delete_gig(gig.gig_id, other)

    await service.delete_gig(gig.gig_id, poster)
    with pytest.raises(NotFoundError):
        await service.get_gig_detail(gig.gig_id)
