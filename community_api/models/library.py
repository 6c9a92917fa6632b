"""
Game library request models
"""

from typing import Optional
from pydantic import BaseModel, Field


class AddGameRequest(BaseModel):
    """Save a game to the library"""
    gameId: int = Field(..., gt=0, description="IGDB game ID")

    class Config:
        extra = "forbid"


class GameStatusUpdate(BaseModel):
    """Partial status update, omitted fields stay untouched"""
    isSaved: Optional[bool] = None
    isPlayed: Optional[bool] = None
    playTimeHours: Optional[int] = Field(None, ge=0, description="Hours played")

    class Config:
        extra = "forbid"
