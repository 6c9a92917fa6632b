"""
Comment service

Game comments with nested replies, like/dislike votes, multi-type
reactions and the denormalized counters that go with them
"""

from datetime import datetime
from typing import Dict, List, Optional, Union

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.config.settings import settings
from community_api.db.dao import CommentDAO, InteractionDAO
from community_api.db.models.comment import Comment
from community_api.models import (
    ApiResponse, CommentCreate, CommentUpdate, ReactionType, VoteAction, VoteType
)
from community_api.utils.exceptions import (
    NotFoundError, PermissionDeniedError, ValidationError, ConflictError
)

VOTE_COUNTERS = {
    VoteType.LIKE.value: "likes_count",
    VoteType.DISLIKE.value: "dislikes_count",
}

VOTE_ACTIONS = {
    VoteType.LIKE.value: VoteAction.LIKED.value,
    VoteType.DISLIKE.value: VoteAction.DISLIKED.value,
}


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_comment(comment: Comment, user_vote: Union[str, None, bool] = False) -> dict:
    """
    Comment payload returned by every comment endpoint

    Args:
        comment: comment with its author loaded
        user_vote: caller's vote; False leaves the key out (anonymous caller)
    """
    author = comment.user
    data = {
        "id": comment.id,
        "igdbGameId": comment.igdb_game_id,
        "userId": comment.user_id,
        "parentCommentId": comment.parent_comment_id,
        "content": comment.content,
        "isEdited": comment.is_edited,
        "isSpoiler": comment.is_spoiler,
        "commentType": comment.comment_type,
        "platform": comment.platform,
        "difficultyLevel": comment.difficulty_level,
        "completionStatus": comment.completion_status,
        "playtimeHours": comment.playtime_hours,
        "isPinned": comment.is_pinned,
        "pinnedAt": _isoformat(comment.pinned_at),
        "author": {
            "id": author.id,
            "displayName": author.display_name or "Anonymous",
            "photoUrl": author.photo_url,
        } if author else None,
        "likesCount": comment.likes_count,
        "dislikesCount": comment.dislikes_count,
        "repliesCount": comment.replies_count,
        "helpfulCount": comment.helpful_count,
        "createdAt": _isoformat(comment.created_at),
        "updatedAt": _isoformat(comment.updated_at),
    }
    if user_vote is not False:
        data["userVote"] = user_vote
    return data


class CommentService:
    """Comment service"""

    # ==================== Helpers ====================

    @staticmethod
    async def _get_live_comment(session: AsyncSession, comment_id: str) -> Comment:
        comment = await CommentDAO.get_by_id(session, comment_id)
        if not comment:
            raise NotFoundError("Comment not found", code="COMMENT_NOT_FOUND")
        return comment

    @staticmethod
    def _validate_pagination(page: int, limit: int):
        if page < 1:
            raise ValidationError("page must be at least 1")
        if limit < 1 or limit > settings.MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {settings.MAX_PAGE_SIZE}")

    @staticmethod
    async def _serialize_many(
        session: AsyncSession,
        comments: List[Comment],
        current_user_id: Optional[str]
    ) -> List[dict]:
        if not current_user_id:
            return [serialize_comment(c) for c in comments]

        votes = await InteractionDAO.get_user_votes(
            session, current_user_id, [c.id for c in comments]
        )
        return [serialize_comment(c, votes.get(c.id)) for c in comments]

    # ==================== CRUD ====================

    @staticmethod
    async def create_comment(
        session: AsyncSession,
        user_id: str,
        game_id: int,
        data: CommentCreate
    ) -> ApiResponse:
        """
        Post a comment or a reply

        Args:
            session: database session
            user_id: author ID
            game_id: IGDB game ID
            data: comment payload

        Returns:
            API response with the new comment

        Raises:
            NotFoundError: parent comment missing or deleted
            ValidationError: parent comment belongs to another game
        """
        parent = None
        if data.parentCommentId:
            parent = await CommentDAO.get_by_id(session, data.parentCommentId)
            if not parent:
                raise NotFoundError("Parent comment not found", code="PARENT_NOT_FOUND")
            if parent.igdb_game_id != game_id:
                raise ValidationError(
                    "Cannot reply to comment from different game",
                    code="PARENT_GAME_MISMATCH"
                )

        comment = await CommentDAO.create(
            session,
            user_id=user_id,
            igdb_game_id=game_id,
            content=data.content,
            parent_comment_id=parent.id if parent else None,
            is_spoiler=data.isSpoiler,
            comment_type=data.commentType.value,
            platform=data.platform,
            difficulty_level=data.difficultyLevel.value if data.difficultyLevel else None,
            completion_status=data.completionStatus.value if data.completionStatus else None,
            playtime_hours=data.playtimeHours,
        )

        if parent:
            await CommentDAO.adjust_counter(session, parent.id, "replies_count", 1)
            await session.refresh(parent)

        await session.refresh(comment)
        logger.info(f"💬 User {user_id} commented on game {game_id} ({comment.id})")

        return ApiResponse(
            success=True,
            message="Comment created",
            data=serialize_comment(comment, None)
        )

    @staticmethod
    async def get_comments_by_game(
        session: AsyncSession,
        game_id: int,
        page: int = 1,
        limit: int = 20,
        current_user_id: Optional[str] = None
    ) -> ApiResponse:
        """
        Live comments of a game, newest first

        Args:
            session: database session
            game_id: IGDB game ID
            page: page number (from 1)
            limit: page size
            current_user_id: caller, used to attach userVote

        Returns:
            API response with comments, total, page and limit
        """
        CommentService._validate_pagination(page, limit)

        comments, total = await CommentDAO.get_game_comments(
            session, game_id, limit=limit, offset=(page - 1) * limit
        )

        return ApiResponse(
            success=True,
            data={
                "comments": await CommentService._serialize_many(session, comments, current_user_id),
                "total": total,
                "page": page,
                "limit": limit,
            }
        )

    @staticmethod
    async def get_comment(
        session: AsyncSession,
        comment_id: str,
        current_user_id: Optional[str] = None
    ) -> ApiResponse:
        comment = await CommentService._get_live_comment(session, comment_id)
        serialized = await CommentService._serialize_many(session, [comment], current_user_id)
        return ApiResponse(success=True, data=serialized[0])

    @staticmethod
    async def get_comments_count(session: AsyncSession, game_id: int) -> ApiResponse:
        count = await CommentDAO.count_game_comments(session, game_id)
        return ApiResponse(success=True, data={"gameId": game_id, "count": count})

    @staticmethod
    async def get_user_comments(
        session: AsyncSession,
        user_id: str,
        page: int = 1,
        limit: int = 20
    ) -> ApiResponse:
        """A user's own comment history"""
        CommentService._validate_pagination(page, limit)

        comments, total = await CommentDAO.get_user_comments(
            session, user_id, limit=limit, offset=(page - 1) * limit
        )

        return ApiResponse(
            success=True,
            data={
                "comments": await CommentService._serialize_many(session, comments, user_id),
                "total": total,
                "page": page,
                "limit": limit,
            }
        )

    @staticmethod
    async def update_comment(
        session: AsyncSession,
        comment_id: str,
        user_id: str,
        data: CommentUpdate
    ) -> ApiResponse:
        """
        Edit a comment (author only)

        Sets isEdited; counters are left alone
        """
        comment = await CommentService._get_live_comment(session, comment_id)

        if comment.user_id != user_id:
            raise PermissionDeniedError("You can only edit your own comments")

        comment.content = data.content
        comment.is_edited = True
        if data.isSpoiler is not None:
            comment.is_spoiler = data.isSpoiler
        await session.flush()
        await session.refresh(comment)

        logger.info(f"✏️ User {user_id} edited comment {comment_id}")

        serialized = await CommentService._serialize_many(session, [comment], user_id)
        return ApiResponse(success=True, message="Comment updated", data=serialized[0])

    @staticmethod
    async def delete_comment(session: AsyncSession, comment_id: str, user_id: str) -> ApiResponse:
        """
        Soft delete a comment (author only)

        A deleted reply no longer counts towards its parent's repliesCount
        """
        comment = await CommentService._get_live_comment(session, comment_id)

        if comment.user_id != user_id:
            raise PermissionDeniedError("You can only delete your own comments")

        await CommentDAO.soft_delete(session, comment)

        if comment.parent_comment_id:
            await CommentDAO.adjust_counter(session, comment.parent_comment_id, "replies_count", -1)

        logger.info(f"🗑️ User {user_id} deleted comment {comment_id}")

        return ApiResponse(success=True, message="Comment deleted", data={"commentId": comment_id})

    @staticmethod
    async def toggle_pin(session: AsyncSession, comment_id: str, user_id: str) -> ApiResponse:
        """
        Pin or unpin a reply

        Only the author of the parent comment (the thread owner) may pin replies in their thread
        """
        comment = await CommentService._get_live_comment(session, comment_id)

        if not comment.parent_comment_id:
            raise ValidationError("Only replies can be pinned")

        parent = await CommentDAO.get_by_id(session, comment.parent_comment_id, include_deleted=True)
        if not parent or parent.user_id != user_id:
            raise PermissionDeniedError("Only the thread owner can pin replies")

        if comment.is_pinned:
            comment.is_pinned = False
            comment.pinned_at = None
            comment.pinned_by_user_id = None
        else:
            comment.is_pinned = True
            comment.pinned_at = datetime.utcnow()
            comment.pinned_by_user_id = user_id
        await session.flush()

        logger.info(f"📌 User {user_id} {'pinned' if comment.is_pinned else 'unpinned'} comment {comment_id}")

        return ApiResponse(
            success=True,
            data={
                "commentId": comment.id,
                "isPinned": comment.is_pinned,
                "pinnedAt": _isoformat(comment.pinned_at),
                "pinnedByUserId": comment.pinned_by_user_id,
            }
        )

    # ==================== Votes ====================

    @staticmethod
    async def apply_vote(
        session: AsyncSession,
        comment_id: str,
        user_id: str,
        vote_type: Union[VoteType, str]
    ) -> Dict:
        """
        Three-way vote toggle

        - no vote: insert it, increment its counter
        - same vote: delete it, decrement its counter ("removed")
        - other vote: decrement the old counter, flip the row, increment the new counter

        Row and counter changes share the request transaction. When a
        concurrent request inserts the first vote, the unique constraint
        rejects ours and the request is handled as a change of that vote.

        Returns:
            {"comment", "action", "previous_vote"}
        """
        vote_type = VoteType(vote_type).value
        comment = await CommentService._get_live_comment(session, comment_id)

        existing = await InteractionDAO.get_vote(session, comment_id, user_id)
        if existing is None:
            created = await InteractionDAO.create_vote(session, comment_id, user_id, vote_type)
            if created is None:
                logger.warning(f"⚠️ Concurrent vote on {comment_id} by {user_id}, retrying as a vote change")
                existing = await InteractionDAO.get_vote(session, comment_id, user_id)
                if existing is None:
                    raise ConflictError("Vote changed concurrently, please retry")

        previous_vote = existing.vote_type if existing else None

        if existing is None:
            await CommentDAO.adjust_counter(session, comment_id, VOTE_COUNTERS[vote_type], 1)
            action = VOTE_ACTIONS[vote_type]
        elif existing.vote_type == vote_type:
            await InteractionDAO.delete_vote(session, existing)
            await CommentDAO.adjust_counter(session, comment_id, VOTE_COUNTERS[vote_type], -1)
            action = VoteAction.REMOVED.value
        else:
            await CommentDAO.adjust_counter(session, comment_id, VOTE_COUNTERS[existing.vote_type], -1)
            await InteractionDAO.update_vote_type(session, existing, vote_type)
            await CommentDAO.adjust_counter(session, comment_id, VOTE_COUNTERS[vote_type], 1)
            action = VOTE_ACTIONS[vote_type]

        await session.refresh(comment)
        logger.info(f"👍 User {user_id} {action} comment {comment_id} (previous: {previous_vote})")

        return {"comment": comment, "action": action, "previous_vote": previous_vote}

    @staticmethod
    async def vote_comment(
        session: AsyncSession,
        comment_id: str,
        user_id: str,
        vote_type: Union[VoteType, str]
    ) -> ApiResponse:
        """Like / dislike a comment with toggle semantics"""
        result = await CommentService.apply_vote(session, comment_id, user_id, vote_type)
        comment = result["comment"]
        action = result["action"]

        return ApiResponse(
            success=True,
            data={
                "commentId": comment.id,
                "userVote": None if action == VoteAction.REMOVED.value else VoteType(vote_type).value,
                "likesCount": comment.likes_count,
                "dislikesCount": comment.dislikes_count,
                "action": action,
                "previousVote": result["previous_vote"],
            }
        )

    @staticmethod
    async def remove_vote(session: AsyncSession, comment_id: str, user_id: str) -> ApiResponse:
        """Withdraw the caller's vote, whichever it is"""
        await CommentService._get_live_comment(session, comment_id)

        existing = await InteractionDAO.get_vote(session, comment_id, user_id)
        if existing is None:
            return ApiResponse(
                success=True,
                data={
                    "commentId": comment_id,
                    "userVote": None,
                    "action": VoteAction.NO_VOTE.value,
                }
            )

        return await CommentService.vote_comment(session, comment_id, user_id, existing.vote_type)

    @staticmethod
    async def get_user_vote(session: AsyncSession, comment_id: str, user_id: str) -> Optional[str]:
        vote = await InteractionDAO.get_vote(session, comment_id, user_id)
        return vote.vote_type if vote else None

    # ==================== Reactions ====================

    @staticmethod
    async def react(
        session: AsyncSession,
        comment_id: str,
        user_id: str,
        reaction_type: Union[ReactionType, str]
    ) -> Dict:
        """
        Toggle one reaction type

        Types are independent of each other. helpfulCount is kept on the
        comment row for "helpful" only; the returned count is always the
        live count of the toggled type.

        Returns:
            {"added", "count"}
        """
        reaction_type = ReactionType(reaction_type).value
        await CommentService._get_live_comment(session, comment_id)

        existing = await InteractionDAO.get_reaction(session, comment_id, user_id, reaction_type)
        if existing is None:
            created = await InteractionDAO.create_reaction(session, comment_id, user_id, reaction_type)
            if created is None:
                existing = await InteractionDAO.get_reaction(session, comment_id, user_id, reaction_type)

        if existing is None:
            added = True
        else:
            await InteractionDAO.delete_reaction(session, existing)
            added = False

        if reaction_type == ReactionType.HELPFUL.value:
            await CommentDAO.adjust_counter(session, comment_id, "helpful_count", 1 if added else -1)

        count = await InteractionDAO.count_reactions(session, comment_id, reaction_type)
        logger.info(
            f"🔥 User {user_id} {'added' if added else 'removed'} {reaction_type} on comment {comment_id}"
        )

        return {"added": added, "count": count}

    @staticmethod
    async def add_reaction(
        session: AsyncSession,
        comment_id: str,
        user_id: str,
        reaction_type: Union[ReactionType, str]
    ) -> ApiResponse:
        result = await CommentService.react(session, comment_id, user_id, reaction_type)
        return ApiResponse(
            success=True,
            data={
                "commentId": comment_id,
                "reactionType": ReactionType(reaction_type).value,
                "added": result["added"],
                "count": result["count"],
            }
        )

    @staticmethod
    async def get_reactions(
        session: AsyncSession,
        comment_id: str,
        current_user_id: Optional[str] = None
    ) -> ApiResponse:
        """
        Live reaction counts of a comment grouped by type

        Returns:
            API response with [{reactionType, count, userHasReacted}]
        """
        await CommentService._get_live_comment(session, comment_id)

        counts = await InteractionDAO.get_reaction_counts(session, comment_id)
        user_types = set()
        if current_user_id:
            user_types = set(await InteractionDAO.get_user_reaction_types(session, comment_id, current_user_id))

        reactions = [
            {
                "reactionType": reaction_type.value,
                "count": counts[reaction_type.value],
                "userHasReacted": reaction_type.value in user_types,
            }
            for reaction_type in ReactionType
            if counts.get(reaction_type.value)
        ]

        return ApiResponse(success=True, data={"commentId": comment_id, "reactions": reactions})

    # ==================== Replies ====================

    @staticmethod
    async def get_replies(
        session: AsyncSession,
        comment_id: str,
        current_user_id: Optional[str] = None
    ) -> ApiResponse:
        """
        Direct live replies of a comment, oldest first

        Deeper levels are fetched by calling this again with a reply's ID
        """
        parent = await CommentDAO.get_by_id(session, comment_id, include_deleted=True)
        if not parent:
            raise NotFoundError("Comment not found", code="COMMENT_NOT_FOUND")

        replies = await CommentDAO.get_replies(session, comment_id)

        return ApiResponse(
            success=True,
            data={
                "parentCommentId": comment_id,
                "replies": await CommentService._serialize_many(session, replies, current_user_id),
                "total": len(replies),
            }
        )


# Global service instance
comment_service = CommentService()
