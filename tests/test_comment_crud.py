from datetime import datetime, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from community_api.db.dao import CommentDAO
from community_api.models import CommentCreate, CommentUpdate
from community_api.services.comment_service import comment_service
from community_api.utils.exceptions import NotFoundError, PermissionDeniedError, ValidationError


async def _post(session, user, content, game_id=1942, **fields):
    response = await comment_service.create_comment(
        session, user.id, game_id, CommentCreate(content=content, **fields)
    )
    await session.commit()
    return response.data


async def test_create_comment_defaults(session, make_user):
    author = await make_user("author")
    data = await _post(
        session, author, "Great game!",
        commentType="tip", platform="PC", difficultyLevel="hard", playtimeHours=40
    )

    assert data["isEdited"] is False
    assert data["likesCount"] == 0
    assert data["repliesCount"] == 0
    assert data["commentType"] == "tip"
    assert data["difficultyLevel"] == "hard"
    assert data["author"]["displayName"] == "Player author"
    assert data["userVote"] is None


def test_create_comment_validation():
    with pytest.raises(PydanticValidationError):
        CommentCreate(content="")
    with pytest.raises(PydanticValidationError):
        CommentCreate(content="x" * 5001)
    with pytest.raises(PydanticValidationError):
        CommentCreate(content="ok", commentType="rant")
    with pytest.raises(PydanticValidationError):
        CommentCreate(content="ok", unknownField=True)


async def test_listing_newest_first_and_paginated(session, make_user):
    author = await make_user("author")
    ids = [(await _post(session, author, f"Comment {i}"))["id"] for i in range(3)]

    base = datetime(2024, 1, 1)
    for offset, comment_id in enumerate(ids):
        comment = await CommentDAO.get_by_id(session, comment_id)
        comment.created_at = base + timedelta(minutes=offset)
    await session.commit()

    first_page = await comment_service.get_comments_by_game(session, 1942, page=1, limit=2)
    assert [c["id"] for c in first_page.data["comments"]] == [ids[2], ids[1]]
    assert first_page.data["total"] == 3

    second_page = await comment_service.get_comments_by_game(session, 1942, page=2, limit=2)
    assert [c["id"] for c in second_page.data["comments"]] == [ids[0]]


async def test_listing_rejects_bad_pagination(session):
    with pytest.raises(ValidationError):
        await comment_service.get_comments_by_game(session, 1942, page=0)
    with pytest.raises(ValidationError):
        await comment_service.get_comments_by_game(session, 1942, limit=101)


async def test_update_marks_edited(session, make_user):
    author = await make_user("author")
    other = await make_user("other")
    created = await _post(session, author, "First take")

    with pytest.raises(PermissionDeniedError):
        await comment_service.update_comment(session, created["id"], other.id, CommentUpdate(content="Hijack"))

    updated = await comment_service.update_comment(
        session, created["id"], author.id, CommentUpdate(content="Second take", isSpoiler=True)
    )
    assert updated.data["content"] == "Second take"
    assert updated.data["isEdited"] is True
    assert updated.data["isSpoiler"] is True


async def test_soft_delete(session, make_user):
    author = await make_user("author")
    other = await make_user("other")
    created = await _post(session, author, "Soon gone")

    with pytest.raises(PermissionDeniedError):
        await comment_service.delete_comment(session, created["id"], other.id)

    await comment_service.delete_comment(session, created["id"], author.id)
    await session.commit()

    count = await comment_service.get_comments_count(session, 1942)
    assert count.data == {"gameId": 1942, "count": 0}

    with pytest.raises(NotFoundError):
        await comment_service.get_comment(session, created["id"])

    # The row stays for the rows that reference it
    tombstone = await CommentDAO.get_by_id(session, created["id"], include_deleted=True)
    assert tombstone.is_deleted


async def test_user_comment_history(session, make_user):
    author = await make_user("author")
    other = await make_user("other")
    await _post(session, author, "On one game", game_id=1)
    await _post(session, author, "On another", game_id=2)
    await _post(session, other, "Not mine", game_id=1)

    history = await comment_service.get_user_comments(session, author.id)
    assert history.data["total"] == 2
    assert {c["igdbGameId"] for c in history.data["comments"]} == {1, 2}
