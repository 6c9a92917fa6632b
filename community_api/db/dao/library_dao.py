"""
Game library data access object
"""

from typing import Optional, List
from sqlalchemy import select, func, and_, case
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.db.models.user_game import UserGame
from community_api.utils.id_generator import generate_user_game_id


class LibraryDAO:
    """Library DAO"""

    @staticmethod
    async def get(session: AsyncSession, user_id: str, igdb_game_id: int) -> Optional[UserGame]:
        """Get a user's entry for one game"""
        result = await session.execute(
            select(UserGame).where(
                and_(
                    UserGame.user_id == user_id,
                    UserGame.igdb_game_id == igdb_game_id
                )
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        session: AsyncSession,
        user_id: str,
        igdb_game_id: int,
        **fields
    ) -> Optional[UserGame]:
        """
        Create a library entry

        Args:
            session: database session
            user_id: owner ID
            igdb_game_id: IGDB game ID
            **fields: is_saved, saved_at, is_played, ...

        Returns:
            UserGame, or None when a concurrent request created the entry first
        """
        entry = UserGame(
            id=generate_user_game_id(),
            user_id=user_id,
            igdb_game_id=igdb_game_id,
            **fields
        )

        try:
            async with session.begin_nested():
                session.add(entry)
                await session.flush()
        except IntegrityError:
            return None

        return entry

    @staticmethod
    async def get_saved(session: AsyncSession, user_id: str) -> List[UserGame]:
        """Saved entries, most recently saved first"""
        result = await session.execute(
            select(UserGame)
            .where(
                and_(
                    UserGame.user_id == user_id,
                    UserGame.is_saved.is_(True)
                )
            )
            .order_by(UserGame.saved_at.desc(), UserGame.id.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_stats(session: AsyncSession, user_id: str) -> dict:
        """
        Aggregate library statistics

        Returns:
            {"saved", "played", "total_play_time"}
        """
        result = await session.execute(
            select(
                func.sum(case((UserGame.is_saved.is_(True), 1), else_=0)),
                func.sum(case((UserGame.is_played.is_(True), 1), else_=0)),
                func.coalesce(func.sum(UserGame.play_time_hours), 0),
            ).where(UserGame.user_id == user_id)
        )
        saved, played, play_time = result.one()
        return {
            "saved": int(saved or 0),
            "played": int(played or 0),
            "total_play_time": int(play_time or 0),
        }

    @staticmethod
    async def delete(session: AsyncSession, entry: UserGame):
        await session.delete(entry)
        await session.flush()
