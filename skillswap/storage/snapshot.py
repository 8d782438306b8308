"""In-memory repository over an immutable snapshot of platform data."""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from skillswap.skills.models import (
    ActivityKind,
    Exchange,
    ExchangeStatus,
    Message,
    Skill,
    SkillType,
    User,
)
from skillswap.storage.repository import SkillRepository, average_reply_hours


class SnapshotRepository(SkillRepository):
    """Serves repository queries from pre-loaded records.

    The records are copied into tuples on construction, so later changes
    to the caller's lists are not visible to the engine.
    """

    def __init__(
        self,
        users: Iterable[User] = (),
        skills: Iterable[Skill] = (),
        exchanges: Iterable[Exchange] = (),
        messages: Iterable[Message] = (),
    ):
        self._users: Dict[int, User] = {user.id: user for user in users}
        self._skills = tuple(sorted(skills, key=lambda s: s.id))
        self._skills_by_id: Dict[int, Skill] = {skill.id: skill for skill in self._skills}
        self._exchanges = tuple(sorted(exchanges, key=lambda e: e.id))
        self._messages = tuple(sorted(messages, key=lambda m: (m.created_at, m.id)))

    def fetch_user(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    def fetch_active_skills(
        self,
        user_id: Optional[int] = None,
        skill_type: Optional[SkillType] = None,
        categories: Optional[Iterable[str]] = None,
        levels: Optional[Iterable[str]] = None,
        exclude_user_id: Optional[int] = None,
    ) -> List[Skill]:
        category_set = set(categories) if categories is not None else None
        level_set = set(levels) if levels is not None else None

        results = []
        for skill in self._skills:
            if not skill.is_active:
                continue
            if user_id is not None and skill.user_id != user_id:
                continue
            if exclude_user_id is not None and skill.user_id == exclude_user_id:
                continue
            if skill_type is not None and skill.skill_type != skill_type:
                continue
            if category_set is not None and skill.category not in category_set:
                continue
            if level_set is not None and skill.level not in level_set:
                continue
            results.append(skill)
        return results

    def fetch_skill_levels(self, user_id: int, skill_type: SkillType) -> Set[str]:
        return {
            s.level for s in self._skills
            if s.user_id == user_id and s.skill_type == skill_type
        }

    def count_recent(self, kind: ActivityKind, user_id: int, since: datetime) -> int:
        if kind == ActivityKind.SKILLS:
            return sum(
                1 for s in self._skills
                if s.user_id == user_id and s.created_at is not None and s.created_at > since
            )
        if kind == ActivityKind.EXCHANGES:
            return sum(
                1 for e in self._exchanges
                if e.requester_id == user_id and e.created_at is not None and e.created_at > since
            )
        if kind == ActivityKind.MESSAGES:
            return sum(1 for m in self._messages if m.sender_id == user_id and m.created_at > since)
        raise ValueError(f"Unknown activity kind: {kind!r}")

    def _involves(self, exchange: Exchange, user_id: int) -> bool:
        if exchange.requester_id == user_id:
            return True
        skill = self._skills_by_id.get(exchange.skill_id)
        return skill is not None and skill.user_id == user_id

    def count_exchanges(self, user_id: int, status: Optional[ExchangeStatus] = None) -> int:
        return sum(
            1 for e in self._exchanges
            if self._involves(e, user_id) and (status is None or e.status == status)
        )

    def fetch_exchanges_by_requester(self, user_id: int) -> List[Exchange]:
        results = []
        for exchange in self._exchanges:
            if exchange.requester_id != user_id:
                continue
            skill = self._skills_by_id.get(exchange.skill_id)
            if skill is not None and exchange.category is None:
                exchange = exchange.model_copy(update={"category": skill.category})
            results.append(exchange)
        return results

    def average_response_hours(self, user_id: int, since: datetime) -> Optional[float]:
        by_room: Dict[int, List[Message]] = {}
        for message in self._messages:
            by_room.setdefault(message.room_id, []).append(message)

        return average_reply_hours(by_room, user_id, since)
