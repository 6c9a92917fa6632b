"""
Comment routes
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.models import (
    ApiResponse, CommentCreate, CommentUpdate, VoteRequest, ReactionRequest,
    RequestIdentity, identity_user_id
)
from community_api.api.deps import get_current_user, get_db_session, get_request_identity
from community_api.config.settings import settings
from community_api.db.models.user import User
from community_api.services.comment_service import comment_service

router = APIRouter()


# ==================== Game comments ====================

@router.get("/games/{game_id}/comments", response_model=ApiResponse)
async def get_game_comments(
    game_id: int = Path(..., gt=0),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, description="Page size, defaults to DEFAULT_PAGE_SIZE"),
    identity: RequestIdentity = Depends(get_request_identity),
    session: AsyncSession = Depends(get_db_session)
):
    """
    Comments of a game

    - public, newest first
    - userVote is included for authenticated callers
    """
    return await comment_service.get_comments_by_game(
        session, game_id, page, settings.DEFAULT_PAGE_SIZE if limit is None else limit, identity_user_id(identity)
    )


@router.post("/games/{game_id}/comments", response_model=ApiResponse, status_code=201)
async def create_comment(
    data: CommentCreate,
    game_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    Post a comment

    - login required
    - parentCommentId makes it a reply (same game only)
    """
    return await comment_service.create_comment(session, current_user.id, game_id, data)


@router.get("/games/{game_id}/comments/count", response_model=ApiResponse)
async def get_comments_count(
    game_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_db_session)
):
    return await comment_service.get_comments_count(session, game_id)


@router.get("/user/comments", response_model=ApiResponse)
async def get_my_comments(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, description="Page size, defaults to DEFAULT_PAGE_SIZE"),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """The caller's comment history"""
    return await comment_service.get_user_comments(
        session, current_user.id, page, settings.DEFAULT_PAGE_SIZE if limit is None else limit
    )


# ==================== Single comment ====================

@router.get("/comments/{comment_id}", response_model=ApiResponse)
async def get_comment(
    comment_id: str,
    identity: RequestIdentity = Depends(get_request_identity),
    session: AsyncSession = Depends(get_db_session)
):
    return await comment_service.get_comment(session, comment_id, identity_user_id(identity))


@router.put("/comments/{comment_id}", response_model=ApiResponse)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    Edit a comment

    - author only
    - marks the comment as edited
    """
    return await comment_service.update_comment(session, comment_id, current_user.id, data)


@router.delete("/comments/{comment_id}", response_model=ApiResponse)
async def delete_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    Delete a comment

    - author only
    - soft delete, replies and votes stay intact
    """
    return await comment_service.delete_comment(session, comment_id, current_user.id)


@router.post("/comments/{comment_id}/pin", response_model=ApiResponse)
async def toggle_pin(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """Pin / unpin a reply in your own thread"""
    return await comment_service.toggle_pin(session, comment_id, current_user.id)


# ==================== Votes ====================

@router.post("/comments/{comment_id}/vote", response_model=ApiResponse)
async def vote_comment(
    comment_id: str,
    data: VoteRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    Like / dislike a comment

    - same vote twice removes it
    - the opposite vote switches it
    """
    return await comment_service.vote_comment(session, comment_id, current_user.id, data.voteType)


@router.delete("/comments/{comment_id}/vote", response_model=ApiResponse)
async def remove_vote(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """Withdraw your vote (action "no_vote" when there is none)"""
    return await comment_service.remove_vote(session, comment_id, current_user.id)


# ==================== Reactions ====================

@router.post("/comments/{comment_id}/reactions", response_model=ApiResponse)
async def add_reaction(
    comment_id: str,
    data: ReactionRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    Toggle a reaction

    - fire, hundred, pro_tip, helpful, funny, rip
    - several types can be held at once
    """
    return await comment_service.add_reaction(session, comment_id, current_user.id, data.reactionType)


@router.get("/comments/{comment_id}/reactions", response_model=ApiResponse)
async def get_reactions(
    comment_id: str,
    identity: RequestIdentity = Depends(get_request_identity),
    session: AsyncSession = Depends(get_db_session)
):
    return await comment_service.get_reactions(session, comment_id, identity_user_id(identity))


# ==================== Replies ====================

@router.get("/comments/{comment_id}/replies", response_model=ApiResponse)
async def get_replies(
    comment_id: str,
    identity: RequestIdentity = Depends(get_request_identity),
    session: AsyncSession = Depends(get_db_session)
):
    """Direct replies, oldest first"""
    return await comment_service.get_replies(session, comment_id, identity_user_id(identity))
