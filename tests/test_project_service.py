import uuid

import pytest
from sqlalchemy import select

from campus_gigs.core.exceptions import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from campus_gigs.models.notification import Notification
from campus_gigs.models.project import (
    DiscussionReply,
    MemberRoleEnum,
    ProjectDiscussion,
    ProjectFile,
    ProjectVisibilityEnum,
)
from campus_gigs.schemas.project_schema import (
    DiscussionCreate,
    DiscussionReplyCreate,
    DiscussionUpdate,
    ProjectCreate,
    ProjectFileCreate,
    ProjectFilter,
)
from campus_gigs.services.project_service import ProjectService

PRIVATE = ProjectVisibilityEnum.private


async def test_creator_becomes_first_member(db_session, make_user):
    creator = await make_user("Creator")
    data = ProjectCreate(
        title="Campus Study Planner",
        description="A planner app that syncs with the course calendar.",
        category="software",
        skills_needed=["Python", "Vue"],
    )

    project = await ProjectService(db_session).create_project(data, creator)

    assert project["max_members"] == 5
    assert project["member_count"] == 1
    assert [(m.user_id, m.role) for m in project["members"]] == [(creator.user_id, MemberRoleEnum.creator)]


async def test_join_adds_member_and_notifies_creator(db_session, make_user, make_project):
    creator = await make_user("Creator")
    joiner = await make_user("Joiner")
    project = await make_project(creator, title="Robot Club")

    detail = await ProjectService(db_session).join_project(project.project_id, joiner)

    assert {m.user_id for m in detail["members"]} == {creator.user_id, joiner.user_id}
    assert detail["member_count"] == 2

    result = await db_session.execute(select(Notification).where(Notification.user_id == creator.user_id))
    notification = result.scalars().one()
    assert notification.type == "project_invite"
    assert notification.message == "Joiner joined your project: Robot Club"
    assert notification.link_url == f"/project/{project.project_id}"


async def test_join_missing_project_is_not_found(db_session, make_user):
    joiner = await make_user()
    with pytest.raises(NotFoundError):
        await ProjectService(db_session).join_project(str(uuid.uuid4()), joiner)


async def test_join_twice_conflicts(db_session, make_user, make_project):
    creator = await make_user("Creator")
    member = await make_user("Member")
    project = await make_project(creator, members=[member])

    with pytest.raises(ConflictError):
        await ProjectService(db_session).join_project(project.project_id, member)


async def test_join_full_project_conflicts(db_session, make_user, make_project):
    creator = await make_user("Creator")
    member = await make_user("Member")
    latecomer = await make_user("Latecomer")
    project = await make_project(creator, members=[member], max_members=2)

    with pytest.raises(ConflictError):
        await ProjectService(db_session).join_project(project.project_id, latecomer)


async def test_private_project_detail_is_members_only(db_session, make_user, make_project):
    creator = await make_user("Creator")
    member = await make_user("Member")
    outsider = await make_user("Outsider")
    project = await make_project(creator, members=[member], visibility=PRIVATE)
    service = ProjectService(db_session)

    assert (await service.get_project_detail(project.project_id, member))["title"] == project.title
    with pytest.raises(ForbiddenError):
        await service.get_project_detail(project.project_id, outsider)
    with pytest.raises(ForbiddenError):
        await service.get_project_detail(project.project_id, None)


async def test_list_shows_private_projects_only_to_members(db_session, make_user, make_project):
    creator = await make_user("Creator")
    member = await make_user("Member")
    await make_project(creator, title="Public Project")
    await make_project(creator, members=[member], visibility=PRIVATE, title="Secret Project")
    service = ProjectService(db_session)

    anonymous = await service.list_projects(ProjectFilter(), None)
    as_member = await service.list_projects(ProjectFilter(), member)

    assert [p["title"] for p in anonymous["projects"]] == ["Public Project"]
    assert {p["title"] for p in as_member["projects"]} == {"Public Project", "Secret Project"}
    assert as_member["total"] == 2


async def test_only_creator_can_delete(db_session, make_user, make_project):
    creator = await make_user("Creator")
    member = await make_user("Member")
    project = await make_project(creator, members=[member])
    service = ProjectService(db_session)

    with pytest.raises(ForbiddenError):
        await service.delete_project(project.project_id, member)

    await service.delete_project(project.project_id, creator)
    with pytest.raises(NotFoundError):
        await service.get_project_detail(project.project_id, creator)


async def test_discussions_pinned_first_then_newest(db_session, make_user, make_project, at):
    creator = await make_user("Creator")
    project = await make_project(creator)
    db_session.add_all([
        ProjectDiscussion(project_id=project.project_id, author_id=creator.user_id,
                          title="Old", body="...", created_at=at(1)),
        ProjectDiscussion(project_id=project.project_id, author_id=creator.user_id,
                          title="Rules", body="...", pinned=True, created_at=at(0)),
        ProjectDiscussion(project_id=project.project_id, author_id=creator.user_id,
                          title="New", body="...", created_at=at(2)),
    ])
    await db_session.commit()

    discussions = await ProjectService(db_session).list_discussions(project.project_id, None)

    assert [d.title for d in discussions] == ["Rules", "New", "Old"]


async def test_private_project_discussions_need_membership(db_session, make_user, make_project):
    creator = await make_user("Creator")
    outsider = await make_user("Outsider")
    project = await make_project(creator, visibility=PRIVATE)
    service = ProjectService(db_session)
    post = DiscussionCreate(title="Hello", body="Can I help?")

    with pytest.raises(ForbiddenError):
        await service.list_discussions(project.project_id, outsider)
    with pytest.raises(ForbiddenError):
        await service.create_discussion(project.project_id, post, outsider)

    created = await service.create_discussion(project.project_id, post, creator)
    assert created.author.name == "Creator"


@pytest.fixture
async def discussion(db_session, make_user, make_project):
    creator = await make_user("Creator")
    project = await make_project(creator, title="Robot Club")
    created = await ProjectService(db_session).create_discussion(
        project.project_id, DiscussionCreate(title="Kickoff", body="When do we meet?"), creator
    )
    return creator, project, created


async def test_replies_are_listed_oldest_first(db_session, make_user, discussion):
    creator, project, topic = discussion
    helper = await make_user("Helper")
    service = ProjectService(db_session)

    await service.reply_to_discussion(project.project_id, topic.discussion_id,
                                      DiscussionReplyCreate(body="  Friday works  "), helper)
    await service.reply_to_discussion(project.project_id, topic.discussion_id,
                                      DiscussionReplyCreate(body="See you then"), creator)

    [listed] = await service.list_discussions(project.project_id, None)
    assert listed.reply_count == 2
    assert [r.body for r in listed.replies] == ["Friday works", "See you then"]
    assert listed.replies[0].author.name == "Helper"


async def test_blank_reply_is_invalid(db_session, discussion):
    creator, project, topic = discussion
    with pytest.raises(InvalidArgumentError):
        await ProjectService(db_session).reply_to_discussion(
            project.project_id, topic.discussion_id, DiscussionReplyCreate(body="   "), creator
        )


async def test_closed_discussion_rejects_replies(db_session, make_user, discussion):
    creator, project, topic = discussion
    service = ProjectService(db_session)

    closed = await service.update_discussion(
        project.project_id, topic.discussion_id, DiscussionUpdate(closed=True), creator
    )
    assert closed.closed is True
    assert closed.pinned is False

    with pytest.raises(InvalidArgumentError):
        await service.reply_to_discussion(
            project.project_id, topic.discussion_id, DiscussionReplyCreate(body="Too late"), creator
        )


async def test_only_creator_or_author_can_pin_or_delete(db_session, make_user, discussion):
    creator, project, topic = discussion
    outsider = await make_user("Outsider")
    service = ProjectService(db_session)

    with pytest.raises(ForbiddenError):
        await service.update_discussion(project.project_id, topic.discussion_id, DiscussionUpdate(pinned=True), outsider)
    with pytest.raises(ForbiddenError):
        await service.delete_discussion(project.project_id, topic.discussion_id, outsider)

    pinned = await service.update_discussion(
        project.project_id, topic.discussion_id, DiscussionUpdate(pinned=True), creator
    )
    assert pinned.pinned is True


async def test_deleting_discussion_removes_its_replies(db_session, make_user, discussion):
    creator, project, topic = discussion
    helper = await make_user("Helper")
    service = ProjectService(db_session)
    await service.reply_to_discussion(project.project_id, topic.discussion_id,
                                      DiscussionReplyCreate(body="On it"), helper)

    await service.delete_discussion(project.project_id, topic.discussion_id, creator)

    assert await service.list_discussions(project.project_id, None) == []
    result = await db_session.execute(select(DiscussionReply))
    assert result.scalars().all() == []


async def test_discussion_of_another_project_is_not_found(db_session, make_user, make_project, discussion):
    creator, _, topic = discussion
    other = await make_project(creator, title="Other Project")

    with pytest.raises(NotFoundError):
        await ProjectService(db_session).reply_to_discussion(
            other.project_id, topic.discussion_id, DiscussionReplyCreate(body="hi"), creator
        )


async def test_files_are_sorted_by_path_then_newest(db_session, make_user, make_project, at):
    creator = await make_user("Creator")
    project = await make_project(creator)
    db_session.add_all([
        ProjectFile(project_id=project.project_id, uploaded_by_id=creator.user_id, name="old.png",
                    url="https://blob.example/old.png", path="/design", created_at=at(1)),
        ProjectFile(project_id=project.project_id, uploaded_by_id=creator.user_id, name="new.png",
                    url="https://blob.example/new.png", path="/design", created_at=at(2)),
        ProjectFile(project_id=project.project_id, uploaded_by_id=creator.user_id, name="README.md",
                    url="https://blob.example/readme", path="/", created_at=at(0)),
    ])
    await db_session.commit()

    files = await ProjectService(db_session).list_files(project.project_id, None)

    assert [f.name for f in files] == ["README.md", "new.png", "old.png"]


async def test_add_file_keeps_metadata_defaults(db_session, make_user, make_project):
    creator = await make_user("Creator")
    project = await make_project(creator)

    created = await ProjectService(db_session).add_file(
        project.project_id, ProjectFileCreate(name="brief.pdf", url="https://blob.example/brief.pdf"), creator
    )

    assert created.size == 0
    assert created.mime_type == "application/octet-stream"
    assert created.path == "/"
    assert created.uploaded_by.name == "Creator"


async def test_private_project_files_need_membership(db_session, make_user, make_project):
    creator = await make_user("Creator")
    outsider = await make_user("Outsider")
    project = await make_project(creator, visibility=PRIVATE)
    service = ProjectService(db_session)

    with pytest.raises(ForbiddenError):
        await service.list_files(project.project_id, outsider)
    with pytest.raises(ForbiddenError):
        await service.add_file(project.project_id, ProjectFileCreate(name="x", url="https://blob.example/x"), outsider)


async def test_only_creator_or_uploader_can_delete_file(db_session, make_user, make_project):
    creator = await make_user("Creator")
    uploader = await make_user("Uploader")
    bystander = await make_user("Bystander")
    project = await make_project(creator, members=[uploader, bystander])
    service = ProjectService(db_session)
    data = ProjectFileCreate(name="notes.txt", url="https://blob.example/notes.txt")
    first = await service.add_file(project.project_id, data, uploader)
    second = await service.add_file(project.project_id, data, uploader)

    with pytest.raises(ForbiddenError):
        await service.delete_file(project.project_id, first.file_id, bystander)
    with pytest.raises(NotFoundError):
        await service.delete_file(str(uuid.uuid4()), first.file_id, uploader)

    await service.delete_file(project.project_id, first.file_id, uploader)
    await service.delete_file(project.project_id, second.file_id, creator)
    assert await service.list_files(project.project_id, creator) == []


async def test_deleting_project_removes_its_files(db_session, make_user, make_project):
    creator = await make_user("Creator")
    project = await make_project(creator)
    service = ProjectService(db_session)
    await service.add_file(project.project_id, ProjectFileCreate(name="a", url="https://blob.example/a"), creator)

    await service.delete_project(project.project_id, creator)

    result = await db_session.execute(select(ProjectFile))
    assert result.scalars().all() == []
