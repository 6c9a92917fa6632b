"""
Game catalog routes
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.models import ApiResponse, RequestIdentity
from community_api.api.deps import get_db_session, get_request_identity
from community_api.services.catalog_service import catalog_service
from community_api.services.affiliate_service import affiliate_service

router = APIRouter()


@router.get("/search", response_model=ApiResponse)
async def search_games(
    q: str = Query(..., min_length=1, description="Search text"),
    limit: int = Query(10, ge=1, le=50)
):
    """Search the catalog (cached for an hour)"""
    games = await catalog_service.search_games(q, limit)
    return ApiResponse(success=True, data=games)


@router.get("/trending", response_model=ApiResponse)
async def get_trending_games(limit: int = Query(20, ge=1, le=100)):
    """Well rated releases of the last 90 days"""
    games = await catalog_service.get_trending_games(limit)
    return ApiResponse(success=True, data=games)


@router.get("/popular", response_model=ApiResponse)
async def get_popular_games(limit: int = Query(20, ge=1, le=100)):
    """Most rated games"""
    games = await catalog_service.get_popular_games(limit)
    return ApiResponse(success=True, data=games)


@router.get("/categories/{category}", response_model=ApiResponse)
async def get_games_by_category(
    category: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0)
):
    """
    Games of a category

    - popular, most-popular, trending, action, adventure, rpg, strategy, sports
    - any other name lists well rated games
    """
    games = await catalog_service.get_games_by_category(category, limit, offset)
    return ApiResponse(success=True, data=games)


@router.get("/{game_id}", response_model=ApiResponse)
async def get_game(
    game_id: int = Path(..., gt=0),
    identity: RequestIdentity = Depends(get_request_identity),
    session: AsyncSession = Depends(get_db_session)
):
    """
    Game details

    - public
    - is_saved / is_played are added for authenticated callers
    """
    return await catalog_service.get_game_detail(session, game_id, identity)


@router.get("/{game_id}/affiliate-links", response_model=ApiResponse)
async def get_affiliate_links(
    game_id: int = Path(..., gt=0),
    session: AsyncSession = Depends(get_db_session)
):
    """Active store links of a game"""
    return await affiliate_service.get_game_links(session, game_id)
