"""Skill, user and exchange models read by the matching engine."""

from skillswap.skills.models import (
    ActivityKind,
    Exchange,
    ExchangeStatus,
    Message,
    Skill,
    SkillLevel,
    SkillType,
    User,
    UserRating,
)

__all__ = [
    "ActivityKind",
    "Exchange",
    "ExchangeStatus",
    "Message",
    "Skill",
    "SkillLevel",
    "SkillType",
    "User",
    "UserRating",
]
