"""Pydantic models for the read-only data the matching engine consumes."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SkillLevel(str, Enum):
    """Proficiency level of a skill."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class SkillType(str, Enum):
    """Whether a skill is supplied or wanted."""

    OFFERING = "offering"
    SEEKING = "seeking"


class ExchangeStatus(str, Enum):
    """Lifecycle status of an exchange request."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ActivityKind(str, Enum):
    """Record kinds counted by the activity heuristic."""

    SKILLS = "skills"
    EXCHANGES = "exchanges"
    MESSAGES = "messages"


class UserRating(BaseModel):
    """Aggregated review rating of a user."""

    model_config = ConfigDict(frozen=True)

    average: float = Field(0.0, ge=0.0, le=5.0, description="Average review rating")
    count: int = Field(0, ge=0, description="Number of reviews")


class User(BaseModel):
    """A platform member as seen by the matching engine."""

    model_config = ConfigDict(frozen=True)

    id: int
    full_name: str = Field("", description="Display name")
    avatar: str = Field("", description="Avatar reference")
    location: str = Field("", description="Free-text location")
    rating: Optional[UserRating] = Field(None, description="Aggregated rating, if reviewed")


class Skill(BaseModel):
    """A skill a user offers or seeks."""

    model_config = ConfigDict(frozen=True)

    id: int
    user_id: int = Field(..., description="Owner id")
    title: str
    description: str = ""
    category: str
    # Kept as a plain string: unknown levels rank 0 instead of failing validation
    level: str = Field(..., description="beginner, intermediate, advanced or expert")
    skill_type: SkillType
    tags: str = Field("", description="Comma-separated tags")
    is_active: bool = True
    created_at: Optional[datetime] = None


class Exchange(BaseModel):
    """A request by one user for another user's skill."""

    model_config = ConfigDict(frozen=True)

    id: int
    requester_id: int
    skill_id: int
    status: ExchangeStatus = ExchangeStatus.PENDING
    category: Optional[str] = Field(None, description="Category of the requested skill")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Message(BaseModel):
    """A chat message; only timing and authorship matter here."""

    model_config = ConfigDict(frozen=True)

    id: int
    room_id: int
    sender_id: int
    created_at: datetime
