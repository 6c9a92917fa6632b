"""
Comment interaction data access object (votes, reactions)
"""

from typing import Dict, List, Optional
from sqlalchemy import select, delete, func, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.db.models.comment_vote import CommentVote
from community_api.db.models.comment_reaction import CommentReaction
from community_api.utils.id_generator import generate_vote_id, generate_reaction_id


class InteractionDAO:
    """Interaction DAO (votes, reactions)"""

    # ==================== Votes ====================

    @staticmethod
    async def get_vote(
        session: AsyncSession,
        comment_id: str,
        user_id: str
    ) -> Optional[CommentVote]:
        """Get a user's vote on a comment"""
        result = await session.execute(
            select(CommentVote).where(
                and_(
                    CommentVote.comment_id == comment_id,
                    CommentVote.user_id == user_id
                )
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_vote(
        session: AsyncSession,
        comment_id: str,
        user_id: str,
        vote_type: str
    ) -> Optional[CommentVote]:
        """
        Insert a vote row inside a savepoint

        Args:
            session: database session
            comment_id: comment ID
            user_id: voter ID
            vote_type: like / dislike

        Returns:
            The new vote, or None when the (comment, user) unique constraint
            rejected the insert because a concurrent request voted first
        """
        vote = CommentVote(
            id=generate_vote_id(),
            comment_id=comment_id,
            user_id=user_id,
            vote_type=vote_type,
        )

        try:
            async with session.begin_nested():
                session.add(vote)
                await session.flush()
        except IntegrityError:
            return None

        return vote

    @staticmethod
    async def update_vote_type(session: AsyncSession, vote: CommentVote, vote_type: str) -> CommentVote:
        """Flip an existing vote"""
        vote.vote_type = vote_type
        await session.flush()
        return vote

    @staticmethod
    async def delete_vote(session: AsyncSession, vote: CommentVote):
        """Delete a vote row"""
        await session.delete(vote)
        await session.flush()

    @staticmethod
    async def get_user_votes(
        session: AsyncSession,
        user_id: str,
        comment_ids: List[str]
    ) -> Dict[str, str]:
        """
        Batch lookup of a user's votes

        Returns:
            {comment_id: vote_type}
        """
        if not comment_ids:
            return {}

        result = await session.execute(
            select(CommentVote.comment_id, CommentVote.vote_type).where(
                and_(
                    CommentVote.user_id == user_id,
                    CommentVote.comment_id.in_(comment_ids)
                )
            )
        )
        return {row.comment_id: row.vote_type for row in result.all()}

    # ==================== Reactions ====================

    @staticmethod
    async def get_reaction(
        session: AsyncSession,
        comment_id: str,
        user_id: str,
        reaction_type: str
    ) -> Optional[CommentReaction]:
        """Get one (comment, user, type) reaction"""
        result = await session.execute(
            select(CommentReaction).where(
                and_(
                    CommentReaction.comment_id == comment_id,
                    CommentReaction.user_id == user_id,
                    CommentReaction.reaction_type == reaction_type
                )
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_reaction(
        session: AsyncSession,
        comment_id: str,
        user_id: str,
        reaction_type: str
    ) -> Optional[CommentReaction]:
        """
        Insert a reaction row inside a savepoint

        Returns:
            The new reaction, or None if the same triple already exists
        """
        reaction = CommentReaction(
            id=generate_reaction_id(),
            comment_id=comment_id,
            user_id=user_id,
            reaction_type=reaction_type,
        )

        try:
            async with session.begin_nested():
                session.add(reaction)
                await session.flush()
        except IntegrityError:
            return None

        return reaction

    @staticmethod
    async def delete_reaction(session: AsyncSession, reaction: CommentReaction):
        await session.delete(reaction)
        await session.flush()

    @staticmethod
    async def count_reactions(session: AsyncSession, comment_id: str, reaction_type: str) -> int:
        """Live count of one reaction type on a comment"""
        result = await session.execute(
            select(func.count(CommentReaction.id)).where(
                and_(
                    CommentReaction.comment_id == comment_id,
                    CommentReaction.reaction_type == reaction_type
                )
            )
        )
        return result.scalar() or 0

    @staticmethod
    async def get_reaction_counts(session: AsyncSession, comment_id: str) -> Dict[str, int]:
        """
        Grouped live counts per reaction type

        Returns:
            {reaction_type: count}, types without reactions are absent
        """
        result = await session.execute(
            select(CommentReaction.reaction_type, func.count(CommentReaction.id))
            .where(CommentReaction.comment_id == comment_id)
            .group_by(CommentReaction.reaction_type)
        )
        return {reaction_type: count for reaction_type, count in result.all()}

    @staticmethod
    async def get_user_reaction_types(
        session: AsyncSession,
        comment_id: str,
        user_id: str
    ) -> List[str]:
        """Reaction types a user currently holds on a comment"""
        result = await session.execute(
            select(CommentReaction.reaction_type).where(
                and_(
                    CommentReaction.comment_id == comment_id,
                    CommentReaction.user_id == user_id
                )
            )
        )
        return list(result.scalars().all())
