"""
Comment data access object
"""

from typing import Optional, List, Tuple
from sqlalchemy import select, update, func, and_, case
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime

from community_api.db.models.comment import Comment
from community_api.utils.id_generator import generate_comment_id

COUNTER_COLUMNS = ("likes_count", "dislikes_count", "replies_count", "helpful_count")


class CommentDAO:
    """Comment DAO"""

    @staticmethod
    async def create(
        session: AsyncSession,
        user_id: str,
        igdb_game_id: int,
        content: str,
        parent_comment_id: Optional[str] = None,
        **metadata
    ) -> Comment:
        """
        Create a comment

        Args:
            session: database session
            user_id: author ID
            igdb_game_id: IGDB game ID
            content: comment text
            parent_comment_id: parent comment ID (reply)
            **metadata: gamer metadata columns (is_spoiler, comment_type, platform, ...)

        Returns:
            Comment: the new comment
        """
        comment = Comment(
            id=generate_comment_id(),
            user_id=user_id,
            igdb_game_id=igdb_game_id,
            content=content,
            parent_comment_id=parent_comment_id,
            is_edited=False,
            likes_count=0,
            dislikes_count=0,
            replies_count=0,
            helpful_count=0,
            **{k: v for k, v in metadata.items() if v is not None}
        )

        session.add(comment)
        await session.flush()

        return comment

    @staticmethod
    async def get_by_id(
        session: AsyncSession,
        comment_id: str,
        include_deleted: bool = False
    ) -> Optional[Comment]:
        """Get a comment by ID (live rows only unless include_deleted)"""
        conditions = [Comment.id == comment_id]
        if not include_deleted:
            conditions.append(Comment.deleted_at.is_(None))

        result = await session.execute(
            select(Comment)
            .where(and_(*conditions))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_game_comments(
        session: AsyncSession,
        igdb_game_id: int,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Comment], int]:
        """
        Live comments of a game, newest first

        Args:
            session: database session
            igdb_game_id: IGDB game ID
            limit: page size
            offset: offset

        Returns:
            (comments, total)
        """
        condition = and_(
            Comment.igdb_game_id == igdb_game_id,
            Comment.deleted_at.is_(None)
        )

        result = await session.execute(
            select(Comment)
            .where(condition)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .execution_options(populate_existing=True)
            .limit(limit)
            .offset(offset)
        )
        comments = list(result.scalars().all())

        total = await session.execute(
            select(func.count(Comment.id)).where(condition)
        )
        return comments, total.scalar() or 0

    @staticmethod
    async def count_game_comments(session: AsyncSession, igdb_game_id: int) -> int:
        """Count live comments of a game"""
        result = await session.execute(
            select(func.count(Comment.id))
            .where(
                and_(
                    Comment.igdb_game_id == igdb_game_id,
                    Comment.deleted_at.is_(None)
                )
            )
        )
        return result.scalar() or 0

    @staticmethod
    async def get_replies(session: AsyncSession, parent_comment_id: str) -> List[Comment]:
        """
        Direct live replies of a comment, oldest first

        Args:
            session: database session
            parent_comment_id: parent comment ID

        Returns:
            Reply list
        """
        result = await session.execute(
            select(Comment)
            .where(
                and_(
                    Comment.parent_comment_id == parent_comment_id,
                    Comment.deleted_at.is_(None)
                )
            )
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    @staticmethod
    async def count_replies(session: AsyncSession, parent_comment_id: str) -> int:
        """Count live replies of a comment"""
        result = await session.execute(
            select(func.count(Comment.id))
            .where(
                and_(
                    Comment.parent_comment_id == parent_comment_id,
                    Comment.deleted_at.is_(None)
                )
            )
        )
        return result.scalar() or 0

    @staticmethod
    async def get_user_comments(
        session: AsyncSession,
        user_id: str,
        limit: int = 20,
        offset: int = 0
    ) -> Tuple[List[Comment], int]:
        """A user's live comments, newest first"""
        condition = and_(
            Comment.user_id == user_id,
            Comment.deleted_at.is_(None)
        )

        result = await session.execute(
            select(Comment)
            .where(condition)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .execution_options(populate_existing=True)
            .limit(limit)
            .offset(offset)
        )
        comments = list(result.scalars().all())

        total = await session.execute(
            select(func.count(Comment.id)).where(condition)
        )
        return comments, total.scalar() or 0

    @staticmethod
    async def adjust_counter(
        session: AsyncSession,
        comment_id: str,
        counter: str,
        delta: int
    ):
        """
        Increment or decrement a denormalized counter in SQL

        Decrements never go below zero. The in-session Comment instance is
        not synchronized; callers refresh it when they need the new value.

        Args:
            session: database session
            comment_id: comment ID
            counter: one of COUNTER_COLUMNS
            delta: +1 / -1
        """
        if counter not in COUNTER_COLUMNS:
            raise ValueError(f"Unknown counter column: {counter}")

        column = getattr(Comment, counter)
        if delta >= 0:
            new_value = column + delta
        else:
            new_value = case((column + delta > 0, column + delta), else_=0)

        await session.execute(
            update(Comment)
            .where(Comment.id == comment_id)
            .values({counter: new_value})
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    async def soft_delete(session: AsyncSession, comment: Comment) -> Comment:
        """
        Soft delete a comment

        The row stays in place so replies, votes and reactions keep valid references
        """
        comment.deleted_at = datetime.utcnow()
        await session.flush()
        return comment
