"""
Comment request models and enums
"""

from typing import Optional
from pydantic import BaseModel, Field
from enum import Enum


class VoteType(str, Enum):
    """Vote type"""
    LIKE = "like"
    DISLIKE = "dislike"


class ReactionType(str, Enum):
    """Reaction type (a user may hold several at once)"""
    FIRE = "fire"
    HUNDRED = "hundred"
    PRO_TIP = "pro_tip"
    HELPFUL = "helpful"
    FUNNY = "funny"
    RIP = "rip"


class CommentType(str, Enum):
    DISCUSSION = "discussion"
    TIP = "tip"
    REVIEW = "review"
    BUG_REPORT = "bug_report"
    FAN_CONTENT = "fan_content"
    MEME = "meme"


class DifficultyLevel(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"
    VERY_HARD = "very_hard"
    NIGHTMARE = "nightmare"


class CompletionStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    HUNDRED_PERCENT = "hundred_percent"


class VoteAction(str, Enum):
    """Outcome of a vote toggle"""
    LIKED = "liked"
    DISLIKED = "disliked"
    REMOVED = "removed"
    NO_VOTE = "no_vote"


class CommentCreate(BaseModel):
    """Create comment request"""
    content: str = Field(..., min_length=1, max_length=5000, description="Comment text")
    parentCommentId: Optional[str] = Field(None, description="Parent comment ID (reply)")
    isSpoiler: bool = Field(False, description="Contains spoilers")
    commentType: CommentType = Field(CommentType.DISCUSSION, description="Comment type")
    platform: Optional[str] = Field(None, max_length=50, description="Platform played on")
    difficultyLevel: Optional[DifficultyLevel] = None
    completionStatus: Optional[CompletionStatus] = None
    playtimeHours: Optional[int] = Field(None, ge=0, description="Hours played")

    class Config:
        extra = "forbid"


class CommentUpdate(BaseModel):
    """Update comment request"""
    content: str = Field(..., min_length=1, max_length=1000, description="New comment text")
    isSpoiler: Optional[bool] = None

    class Config:
        extra = "forbid"


class VoteRequest(BaseModel):
    voteType: VoteType

    class Config:
        extra = "forbid"


class ReactionRequest(BaseModel):
    reactionType: ReactionType

    class Config:
        extra = "forbid"
