"""
Library service

Per-user saved / played flags on catalog games
"""

import asyncio
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.db.dao import LibraryDAO
from community_api.db.models.user_game import UserGame
from community_api.models import ApiResponse, GameStatusUpdate
from community_api.services.catalog_service import CatalogService, catalog_service
from community_api.utils.exceptions import ConflictError, NotFoundError


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_user_game(entry: UserGame) -> dict:
    return {
        "id": entry.id,
        "gameId": entry.igdb_game_id,
        "isSaved": entry.is_saved,
        "isPlayed": entry.is_played,
        "savedAt": _isoformat(entry.saved_at),
        "playedAt": _isoformat(entry.played_at),
        "playTimeHours": entry.play_time_hours,
        "createdAt": _isoformat(entry.created_at),
        "updatedAt": _isoformat(entry.updated_at),
    }


class LibraryService:
    """Game library service"""

    def __init__(self, catalog: CatalogService = None):
        self.catalog = catalog or catalog_service

    @staticmethod
    async def _get_entry(session: AsyncSession, user_id: str, game_id: int) -> UserGame:
        entry = await LibraryDAO.get(session, user_id, game_id)
        if not entry:
            raise NotFoundError("Game not found in library", code="LIBRARY_ENTRY_NOT_FOUND")
        return entry

    async def save_game(self, session: AsyncSession, user_id: str, game_id: int) -> ApiResponse:
        """
        Add a game to the library

        An unsaved entry is restored; an already saved one is a conflict

        Raises:
            ConflictError: the game is already saved
        """
        entry = await LibraryDAO.get(session, user_id, game_id)
        if entry is None:
            entry = await LibraryDAO.create(
                session, user_id, game_id,
                is_saved=True, is_played=False, saved_at=datetime.utcnow(),
            )
            if entry is None:
                raise ConflictError("Game already in library")
            logger.info(f"🎮 Saved game {game_id} to library for user {user_id}")
        elif not entry.is_saved:
            entry.is_saved = True
            entry.saved_at = datetime.utcnow()
            await session.flush()
            logger.info(f"🎮 Restored game {game_id} to library for user {user_id}")
        else:
            raise ConflictError("Game already in library")

        return ApiResponse(success=True, message="Game saved to library", data=serialize_user_game(entry))

    async def toggle_save(self, session: AsyncSession, user_id: str, game_id: int) -> ApiResponse:
        """
        Save / unsave toggle

        - not in library: create a saved entry
        - saved: unsave, savedAt cleared
        - unsaved: save, savedAt set to now
        """
        entry = await LibraryDAO.get(session, user_id, game_id)
        created = None
        if entry is None:
            created = await LibraryDAO.create(
                session, user_id, game_id,
                is_saved=True, is_played=False, saved_at=datetime.utcnow(),
            )
            entry = created or await self._get_entry(session, user_id, game_id)

        if created is not None:
            action_saved = True
        elif entry.is_saved:
            entry.is_saved = False
            entry.saved_at = None
            action_saved = False
        else:
            entry.is_saved = True
            entry.saved_at = datetime.utcnow()
            action_saved = True
        await session.flush()

        logger.info(f"🎮 User {user_id} {'saved' if action_saved else 'unsaved'} game {game_id}")

        return ApiResponse(
            success=True,
            data={
                "isSaved": entry.is_saved,
                "message": "🎮 Game added to your library!" if action_saved else "📤 Game removed from your library",
                "gameId": entry.igdb_game_id,
                "isPlayed": entry.is_played,
                "savedAt": _isoformat(entry.saved_at),
            }
        )

    async def toggle_played(self, session: AsyncSession, user_id: str, game_id: int) -> ApiResponse:
        """
        Played / unplayed toggle

        Raises:
            NotFoundError: the game is not in the library
        """
        entry = await self._get_entry(session, user_id, game_id)

        if entry.is_played:
            entry.is_played = False
            entry.played_at = None
        else:
            entry.is_played = True
            entry.played_at = datetime.utcnow()
        await session.flush()

        logger.info(f"✅ User {user_id} {'marked' if entry.is_played else 'unmarked'} game {game_id} as played")

        return ApiResponse(
            success=True,
            data={
                "isPlayed": entry.is_played,
                "isSaved": entry.is_saved,
                "message": "✅ Game marked as played!" if entry.is_played else "🔄 Game unmarked as played",
                "gameId": entry.igdb_game_id,
                "playedAt": _isoformat(entry.played_at),
            }
        )

    async def update_status(
        self,
        session: AsyncSession,
        user_id: str,
        game_id: int,
        data: GameStatusUpdate
    ) -> ApiResponse:
        """Partial update of isSaved / isPlayed / playTimeHours"""
        entry = await self._get_entry(session, user_id, game_id)

        if data.isSaved is not None:
            if data.isSaved and not entry.is_saved:
                entry.saved_at = datetime.utcnow()
            elif not data.isSaved:
                entry.saved_at = None
            entry.is_saved = data.isSaved

        if data.isPlayed is not None:
            if data.isPlayed and not entry.played_at:
                entry.played_at = datetime.utcnow()
            elif not data.isPlayed:
                entry.played_at = None
            entry.is_played = data.isPlayed

        if data.playTimeHours is not None:
            entry.play_time_hours = data.playTimeHours

        await session.flush()
        logger.info(f"📝 Updated game {game_id} status for user {user_id}")

        return ApiResponse(success=True, message="Game status updated", data=serialize_user_game(entry))

    async def remove_game(self, session: AsyncSession, user_id: str, game_id: int):
        """Hard delete a library entry"""
        entry = await self._get_entry(session, user_id, game_id)
        await LibraryDAO.delete(session, entry)
        logger.info(f"🗑️ Removed game {game_id} from library for user {user_id}")

    async def get_user_game(self, session: AsyncSession, user_id: str, game_id: int) -> ApiResponse:
        entry = await LibraryDAO.get(session, user_id, game_id)
        if entry is None:
            return ApiResponse(
                success=True,
                data={"inLibrary": False, "gameId": game_id, "isSaved": False, "isPlayed": False}
            )

        return ApiResponse(success=True, data={"inLibrary": True, **serialize_user_game(entry)})

    async def get_stats(self, session: AsyncSession, user_id: str) -> dict:
        stats = await LibraryDAO.get_stats(session, user_id)
        return {
            "total": stats["saved"],
            "saved": stats["saved"],
            "played": stats["played"],
            "totalPlayTime": stats["total_play_time"],
        }

    async def get_library_stats(self, session: AsyncSession, user_id: str) -> ApiResponse:
        return ApiResponse(success=True, data=await self.get_stats(session, user_id))

    async def get_enriched_library(self, session: AsyncSession, user_id: str) -> ApiResponse:
        """
        Saved games with their catalog data

        One catalog lookup per saved game, all awaited concurrently; a failed
        lookup leaves "game" as None instead of failing the whole list

        Returns:
            API response with games, total, savedCount and playedCount
        """
        entries = await LibraryDAO.get_saved(session, user_id)
        games = await asyncio.gather(
            *(self.catalog.try_get_game(entry.igdb_game_id) for entry in entries)
        )

        stats = await self.get_stats(session, user_id)

        return ApiResponse(
            success=True,
            data={
                "games": [
                    {**serialize_user_game(entry), "game": game}
                    for entry, game in zip(entries, games)
                ],
                "total": stats["total"],
                "savedCount": stats["saved"],
                "playedCount": stats["played"],
            }
        )


# Global service instance
library_service = LibraryService()
