"""
Game library routes (login required)
"""

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.models import ApiResponse, AddGameRequest, GameStatusUpdate
from community_api.api.deps import get_current_user, get_db_session
from community_api.db.models.user import User
from community_api.services.library_service import library_service

router = APIRouter()


@router.get("", response_model=ApiResponse)
async def get_library(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """Saved games with catalog data"""
    return await library_service.get_enriched_library(session, current_user.id)


@router.get("/stats", response_model=ApiResponse)
async def get_library_stats(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await library_service.get_library_stats(session, current_user.id)


@router.post("", response_model=ApiResponse, status_code=201)
async def save_game(
    data: AddGameRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """
    Add a game to the library

    - 409 when it is already saved
    """
    return await library_service.save_game(session, current_user.id, data.gameId)


@router.post("/{game_id}/save", response_model=ApiResponse)
async def toggle_save(
    game_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """Save / unsave toggle"""
    return await library_service.toggle_save(session, current_user.id, game_id)


@router.post("/{game_id}/played", response_model=ApiResponse)
async def toggle_played(
    game_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """Played / unplayed toggle"""
    return await library_service.toggle_played(session, current_user.id, game_id)


@router.get("/{game_id}", response_model=ApiResponse)
async def get_game_status(
    game_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await library_service.get_user_game(session, current_user.id, game_id)


@router.patch("/{game_id}", response_model=ApiResponse)
async def update_game_status(
    data: GameStatusUpdate,
    game_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    return await library_service.update_status(session, current_user.id, game_id, data)


@router.delete("/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_game(
    game_id: int = Path(..., gt=0),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session)
):
    """Remove a game from the library"""
    await library_service.remove_game(session, current_user.id, game_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
