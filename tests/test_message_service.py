import uuid

import pytest
from sqlalchemy import select

from campus_gigs.core.config import settings
from campus_gigs.core.exceptions import InvalidArgumentError, NotFoundError
from campus_gigs.models.message import Message
from campus_gigs.models.notification import Notification
from campus_gigs.services.gig_service import GigService
from campus_gigs.services.message_service import MessageService
from campus_gigs.services.project_service import ProjectService


@pytest.fixture
def make_message(db_session):
    async def _make(sender, recipient, content, created_at, is_read=False, gig_id=None) -> Message:
        message = Message(
            sender_id=sender.user_id,
            recipient_id=recipient.user_id,
            content=content,
            created_at=created_at,
            is_read=is_read,
            gig_id=gig_id,
        )
        db_session.add(message)
        await db_session.commit()
        return message

    return _make


async def test_conversations_are_grouped_by_partner_newest_first(db_session, make_user, make_message, at):
    me = await make_user("Me")
    bob = await make_user("Bob")
    cara = await make_user("Cara")

    await make_message(bob, me, "hi from bob", at(1))
    await make_message(me, cara, "hi cara", at(2))
    await make_message(me, bob, "reply to bob", at(3))

    conversations = await MessageService(db_session).list_conversations(me)

    assert [c.partner_id for c in conversations] == [bob.user_id, cara.user_id]
    assert conversations[0].partner.name == "Bob"
    assert conversations[0].last_message.content == "reply to bob"
    assert conversations[1].last_message.content == "hi cara"


async def test_unread_count_only_counts_messages_addressed_to_me(db_session, make_user, make_message, at):
    me = await make_user("Me")
    bob = await make_user("Bob")

    await make_message(bob, me, "one", at(1))
    await make_message(bob, me, "two", at(2))
    await make_message(bob, me, "old", at(0), is_read=True)
    await make_message(me, bob, "my unread reply", at(3))

    conversations = await MessageService(db_session).list_conversations(me)

    assert len(conversations) == 1
    assert conversations[0].unread_count == 2


async def test_scoped_messages_are_not_conversations(db_session, make_user, make_gig, make_message, at):
    me = await make_user("Me")
    bob = await make_user("Bob")
    gig = await make_gig(bob)

    await make_message(bob, me, "about the gig", at(1), gig_id=gig.gig_id)

    assert await MessageService(db_session).list_conversations(me) == []


async def test_thread_is_ascending_and_marks_incoming_as_read(db_session, make_user, make_message, at):
    me = await make_user("Me")
    bob = await make_user("Bob")

    await make_message(bob, me, "first", at(1))
    await make_message(me, bob, "second", at(2))
    await make_message(bob, me, "third", at(3))

    service = MessageService(db_session)
    thread = await service.get_thread(me, bob.user_id)

    assert [m.content for m in thread] == ["first", "second", "third"]
    # 回傳的是標記前的狀態
    assert [m.is_read for m in thread] == [False, False, False]

    conversations = await service.list_conversations(me)
    assert conversations[0].unread_count == 0

    # 我傳出的訊息不會因為我讀了對話而變成已讀
    result = await db_session.execute(select(Message).where(Message.content == "second"))
    assert result.scalars().one().is_read is False


async def test_send_message_creates_message_and_notification(db_session, make_user):
    me = await make_user("Me")
    bob = await make_user("Bob")

    message = await MessageService(db_session).send_message(me, bob.user_id, "Hello Bob")

    assert message.content == "Hello Bob"
    assert message.sender.name == "Me"
    assert message.is_read is False

    result = await db_session.execute(select(Notification).where(Notification.user_id == bob.user_id))
    notification = result.scalars().one()
    assert notification.type == "message"
    assert notification.title == "New Message"
    assert notification.message == "Me sent you a message"
    assert notification.link_url == "/messages"


async def test_cannot_message_yourself(db_session, make_user):
    me = await make_user("Me")
    with pytest.raises(InvalidArgumentError):
        await MessageService(db_session).send_message(me, me.user_id, "note to self")


async def test_message_to_missing_recipient_is_not_found(db_session, make_user):
    me = await make_user("Me")
    with pytest.raises(NotFoundError):
        await MessageService(db_session).send_message(me, str(uuid.uuid4()), "hello?")


async def test_message_longer_than_limit_is_rejected(db_session, make_user):
    me = await make_user("Me")
    bob = await make_user("Bob")
    with pytest.raises(InvalidArgumentError):
        await MessageService(db_session).send_message(
            me, bob.user_id, "x" * (settings.MESSAGE_MAX_LENGTH + 1)
        )


async def test_message_to_missing_gig_is_not_found(db_session, make_user):
    me = await make_user("Me")
    bob = await make_user("Bob")

    with pytest.raises(NotFoundError):
        await MessageService(db_session).send_message(me, bob.user_id, "hi", gig_id=str(uuid.uuid4()))

    result = await db_session.execute(select(Message))
    assert result.scalars().all() == []


async def test_message_to_missing_project_is_not_found(db_session, make_user):
    me = await make_user("Me")
    bob = await make_user("Bob")

    with pytest.raises(NotFoundError):
        await MessageService(db_session).send_message(me, bob.user_id, "hi", project_id=str(uuid.uuid4()))


async def test_whitespace_only_message_is_invalid(db_session, make_user):
    me = await make_user("Me")
    bob = await make_user("Bob")
    with pytest.raises(InvalidArgumentError):
        await MessageService(db_session).send_message(me, bob.user_id, "   ")


async def test_deleting_gig_removes_its_messages_instead_of_turning_them_private(
    db_session, make_user, make_gig
):
    owner = await make_user("Owner")
    bob = await make_user("Bob")
    gig = await make_gig(owner)
    service = MessageService(db_session)
    await service.send_message(bob, owner.user_id, "about your gig", gig_id=gig.gig_id)
    assert await service.list_conversations(owner) == []

    await GigService(db_session).delete_gig(gig.gig_id, owner)

    assert await service.list_conversations(owner) == []
    assert await service.get_thread(owner, bob.user_id) == []
    result = await db_session.execute(select(Message).where(Message.sender_id == bob.user_id))
    assert result.scalars().all() == []


async def test_deleting_project_removes_its_messages(db_session, make_user, make_project):
    owner = await make_user("Owner")
    bob = await make_user("Bob")
    project = await make_project(owner, members=[bob])
    service = MessageService(db_session)
    await service.send_message(bob, owner.user_id, "about the project", project_id=project.project_id)

    await ProjectService(db_session).delete_project(project.project_id, owner)

    assert await service.list_conversations(owner) == []
    result = await db_session.execute(select(Message).where(Message.sender_id == bob.user_id))
    assert result.scalars().all() == []


async def test_reading_a_thread_only_changes_the_readers_unread_count(db_session, make_user):
    alice = await make_user("Alice")
    bob = await make_user("Bob")
    service = MessageService(db_session)
    await service.send_message(alice, bob.user_id, "hi")

    def view(conversations):
        return [(c.partner_id, c.last_message.content, c.unread_count) for c in conversations]

    alice_before = view(await service.list_conversations(alice))
    assert view(await service.list_conversations(bob)) == [(alice.user_id, "hi", 1)]

    thread = await service.get_thread(bob, alice.user_id)

    assert [m.content for m in thread] == ["hi"]
    assert view(await service.list_conversations(bob)) == [(alice.user_id, "hi", 0)]
    assert view(await service.list_conversations(alice)) == alice_before == [(bob.user_id, "hi", 0)]
