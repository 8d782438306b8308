"""Seed a database from a YAML fixture document.

Fixture layout::

    users:
      - {id: 1, full_name: Ada, location: London, rating: {average: 4.5, count: 2}}
    skills:
      - {id: 10, user_id: 1, title: Python, category: Programming,
         level: advanced, skill_type: offering, tags: "python, django"}
    exchanges:
      - {id: 100, requester_id: 2, skill_id: 10, status: completed}
    chat_rooms:
      - {id: 1, user1_id: 1, user2_id: 2}
    messages:
      - {id: 1, chat_room_id: 1, sender_id: 2, content: Hi, created_at: 2026-01-01T10:00:00}
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

import yaml
from sqlalchemy import select
from sqlalchemy.orm import Session

from skillswap.skills.models import ExchangeStatus, SkillType
from skillswap.storage.models import (
    ChatRoomRow,
    ExchangeRow,
    MessageRow,
    SkillRow,
    UserRatingRow,
    UserRow,
)

logger = logging.getLogger(__name__)


def _timestamp(value: Any) -> datetime:
    if value is None:
        return datetime.utcnow()
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def load_fixture_data(data: Dict[str, Any], session: Session) -> Dict[str, int]:
    """Insert fixture records into the session.

    Args:
        data: Parsed fixture document
        session: Open session; the caller commits

    Returns:
        Number of rows added per table
    """
    counts = {"users": 0, "skills": 0, "exchanges": 0, "chat_rooms": 0, "messages": 0}

    for item in data.get("users") or []:
        user_id = item["id"]
        user = UserRow(
            id=user_id,
            email=item.get("email", f"user{user_id}@example.com"),
            username=item.get("username", f"user{user_id}"),
            full_name=item.get("full_name", f"User {user_id}"),
            bio=item.get("bio"),
            avatar=item.get("avatar"),
            location=item.get("location"),
            created_at=_timestamp(item.get("created_at")),
        )
        session.add(user)
        rating = item.get("rating")
        if rating:
            session.add(UserRatingRow(
                user_id=user_id,
                average_rating=float(rating.get("average", 0.0)),
                total_reviews=int(rating.get("count", 0)),
            ))
        counts["users"] += 1
    session.flush()

    for item in data.get("skills") or []:
        session.add(SkillRow(
            id=item["id"],
            user_id=item["user_id"],
            title=item["title"],
            description=item.get("description"),
            category=item["category"],
            level=item["level"],
            skill_type=SkillType(item["skill_type"]).value,
            tags=item.get("tags"),
            is_active=item.get("is_active", True),
            created_at=_timestamp(item.get("created_at")),
        ))
        counts["skills"] += 1
    session.flush()

    for item in data.get("exchanges") or []:
        created = _timestamp(item.get("created_at"))
        session.add(ExchangeRow(
            id=item["id"],
            requester_id=item["requester_id"],
            skill_id=item["skill_id"],
            message=item.get("message"),
            status=ExchangeStatus(item.get("status", "pending")).value,
            created_at=created,
            updated_at=_timestamp(item.get("updated_at", created)),
        ))
        counts["exchanges"] += 1
    session.flush()

    for item in data.get("chat_rooms") or []:
        session.add(ChatRoomRow(
            id=item["id"],
            user1_id=item["user1_id"],
            user2_id=item["user2_id"],
            exchange_id=item.get("exchange_id"),
        ))
        counts["chat_rooms"] += 1
    session.flush()

    for item in data.get("messages") or []:
        session.add(MessageRow(
            id=item["id"],
            chat_room_id=item["chat_room_id"],
            sender_id=item["sender_id"],
            content=item.get("content", ""),
            created_at=_timestamp(item.get("created_at")),
        ))
        counts["messages"] += 1
    session.flush()

    logger.info(f"Loaded fixture: {counts}")
    return counts

# Fixture section -> table it seeds
FIXTURE_TABLES = {
    "users": UserRow,
    "skills": SkillRow,
    "exchanges": ExchangeRow,
    "chat_rooms": ChatRoomRow,
    "messages": MessageRow,
}


def read_fixture(path: Path) -> Dict[str, Any]:
    """Parse a YAML fixture file.

    Raises:
        FileNotFoundError: If the fixture does not exist
    """
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def find_existing_rows(data: Dict[str, Any], session: Session) -> Dict[str, List[int]]:
    """Return the fixture ids already present in the database, per table."""
    existing: Dict[str, List[int]] = {}
    for section, row_class in FIXTURE_TABLES.items():
        ids = [item["id"] for item in data.get(section) or []]
        if not ids:
            continue
        found = session.scalars(
            select(row_class.id).where(row_class.id.in_(ids)).order_by(row_class.id)
        ).all()
        if found:
            existing[section] = list(found)
    return existing


def load_fixture(path: Path, session: Session) -> Dict[str, int]:
    """Load a YAML fixture file into the session.

    Raises:
        FileNotFoundError: If the fixture does not exist
    """
    data = read_fixture(path)
    if not data:
        return {}

    return load_fixture_data(data, session)
