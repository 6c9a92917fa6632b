import pytest

from community_api.db.dao import CommentDAO
from community_api.db.models import Comment
from community_api.models import CommentCreate
from community_api.services.comment_service import comment_service
from community_api.utils.exceptions import NotFoundError, PermissionDeniedError, ValidationError


async def _post(session, user, content, game_id=1942, parent_id=None):
    response = await comment_service.create_comment(
        session, user.id, game_id, CommentCreate(content=content, parentCommentId=parent_id)
    )
    await session.commit()
    return response.data


async def test_reply_increments_parent(session, make_user):
    owner = await make_user("owner")
    replier = await make_user("replier")
    root = await _post(session, owner, "Any tips for the final boss?")

    reply = await _post(session, replier, "Dodge left", parent_id=root["id"])
    assert reply["parentCommentId"] == root["id"]

    parent = await CommentDAO.get_by_id(session, root["id"])
    assert parent.replies_count == 1

    listing = await comment_service.get_comments_by_game(session, 1942)
    assert {c["id"] for c in listing.data["comments"]} == {root["id"], reply["id"]}
    assert listing.data["total"] == 2


async def test_nested_replies(session, make_user):
    owner = await make_user("owner")
    replier = await make_user("replier")
    root = await _post(session, owner, "Root")
    first = await _post(session, replier, "First", parent_id=root["id"])
    nested = await _post(session, owner, "Nested", parent_id=first["id"])

    direct = await comment_service.get_replies(session, root["id"])
    assert [r["id"] for r in direct.data["replies"]] == [first["id"]]

    deeper = await comment_service.get_replies(session, first["id"])
    assert [r["id"] for r in deeper.data["replies"]] == [nested["id"]]
    assert deeper.data["total"] == 1


async def test_reply_to_other_game(session, make_user):
    owner = await make_user("owner")
    root = await _post(session, owner, "Root", game_id=1942)

    with pytest.raises(ValidationError) as exc_info:
        await _post(session, owner, "Wrong game", game_id=1000, parent_id=root["id"])
    assert exc_info.value.code == "PARENT_GAME_MISMATCH"


async def test_reply_to_missing_parent(session, make_user):
    owner = await make_user("owner")
    with pytest.raises(NotFoundError):
        await _post(session, owner, "Orphan", parent_id="comment_missing")


async def test_deleted_reply_leaves_count(session, make_user):
    owner = await make_user("owner")
    replier = await make_user("replier")
    root = await _post(session, owner, "Root")
    reply = await _post(session, replier, "Reply", parent_id=root["id"])

    await comment_service.delete_comment(session, reply["id"], replier.id)
    await session.commit()

    parent = await CommentDAO.get_by_id(session, root["id"])
    assert parent.replies_count == 0
    replies = await comment_service.get_replies(session, root["id"])
    assert replies.data["replies"] == []


async def test_thread_owner_pins_reply(session, make_user):
    owner = await make_user("owner")
    replier = await make_user("replier")
    root = await _post(session, owner, "Root")
    reply = await _post(session, replier, "Reply", parent_id=root["id"])

    pinned = await comment_service.toggle_pin(session, reply["id"], owner.id)
    assert pinned.data["isPinned"] is True
    assert pinned.data["pinnedByUserId"] == owner.id

    unpinned = await comment_service.toggle_pin(session, reply["id"], owner.id)
    assert unpinned.data["isPinned"] is False
    assert unpinned.data["pinnedAt"] is None


async def test_pin_rules(session, make_user):
    owner = await make_user("owner")
    replier = await make_user("replier")
    root = await _post(session, owner, "Root")
    reply = await _post(session, replier, "Reply", parent_id=root["id"])

    with pytest.raises(PermissionDeniedError):
        await comment_service.toggle_pin(session, reply["id"], replier.id)

    with pytest.raises(ValidationError):
        await comment_service.toggle_pin(session, root["id"], owner.id)


async def test_replies_count_matches_live_replies(session, make_user):
    owner = await make_user("owner")
    replier = await make_user("replier")
    root = await _post(session, owner, "Root")
    replies = [await _post(session, replier, f"Reply {i}", parent_id=root["id"]) for i in range(3)]

    await comment_service.delete_comment(session, replies[1]["id"], replier.id)
    await session.commit()

    parent = await CommentDAO.get_by_id(session, root["id"])
    assert parent.replies_count == await CommentDAO.count_replies(session, root["id"]) == 2


def test_pinned_by_references_users():
    column = Comment.__table__.c.pinned_by_user_id
    assert {fk.target_fullname for fk in column.foreign_keys} == {"users.id"}
