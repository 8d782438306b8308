"""Shared builders and fixtures for the matching tests."""

from datetime import datetime, timedelta
from typing import Optional

import pytest

from skillswap.errors import RepositoryUnavailable
from skillswap.skills.models import (
    Exchange,
    ExchangeStatus,
    Message,
    Skill,
    SkillType,
    User,
    UserRating,
)
from skillswap.storage.snapshot import SnapshotRepository

REFERENCE_TIME = datetime(2026, 3, 1, 12, 0, 0)
LONG_AGO = REFERENCE_TIME - timedelta(days=365)


def make_user(
    user_id: int,
    name: Optional[str] = None,
    location: str = "",
    rating: Optional[float] = None,
) -> User:
    """Helper to create test users."""
    return User(
        id=user_id,
        full_name=name or f"User {user_id}",
        avatar=f"avatar-{user_id}.png",
        location=location,
        rating=UserRating(average=rating, count=3) if rating is not None else None,
    )


def make_skill(
    skill_id: int,
    user_id: int,
    category: str,
    level: str,
    skill_type: str,
    title: str = "",
    description: str = "",
    tags: str = "",
    is_active: bool = True,
    created_at: datetime = LONG_AGO,
) -> Skill:
    """Helper to create test skills; old timestamps keep activity at zero."""
    return Skill(
        id=skill_id,
        user_id=user_id,
        title=title or f"Skill {skill_id}",
        description=description,
        category=category,
        level=level,
        skill_type=SkillType(skill_type),
        tags=tags,
        is_active=is_active,
        created_at=created_at,
    )


def seeking(skill_id: int, user_id: int, category: str, level: str, **kwargs) -> Skill:
    return make_skill(skill_id, user_id, category, level, "seeking", **kwargs)


def offering(skill_id: int, user_id: int, category: str, level: str, **kwargs) -> Skill:
    return make_skill(skill_id, user_id, category, level, "offering", **kwargs)


def make_exchange(
    exchange_id: int,
    requester_id: int,
    skill_id: int,
    status: str = "pending",
    created_at: datetime = LONG_AGO,
) -> Exchange:
    return Exchange(
        id=exchange_id,
        requester_id=requester_id,
        skill_id=skill_id,
        status=ExchangeStatus(status),
        created_at=created_at,
    )


def make_message(
    message_id: int,
    room_id: int,
    sender_id: int,
    created_at: datetime,
) -> Message:
    return Message(id=message_id, room_id=room_id, sender_id=sender_id, created_at=created_at)


class FailingRepository(SnapshotRepository):
    """Snapshot repository whose skill queries fail on demand.

    Args:
        failing_categories: Category-filtered queries touching these fail
        fail_offered_lookup: Every per-user offered-skill query fails
        failing_offerers: Offered-skill queries for these users fail
    """

    def __init__(self, *args, failing_categories=(), fail_offered_lookup=False,
                 failing_offerers=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.failing_categories = set(failing_categories)
        self.fail_offered_lookup = fail_offered_lookup
        self.failing_offerers = set(failing_offerers)

    def fetch_active_skills(self, user_id=None, skill_type=None, categories=None,
                            levels=None, exclude_user_id=None):
        if categories is not None and self.failing_categories & set(categories):
            raise RepositoryUnavailable("connection reset")
        if user_id is not None and skill_type == SkillType.OFFERING:
            if self.fail_offered_lookup or user_id in self.failing_offerers:
                raise RepositoryUnavailable("connection reset")
        return super().fetch_active_skills(
            user_id=user_id,
            skill_type=skill_type,
            categories=categories,
            levels=levels,
            exclude_user_id=exclude_user_id,
        )


@pytest.fixture
def reference_time() -> datetime:
    return REFERENCE_TIME
