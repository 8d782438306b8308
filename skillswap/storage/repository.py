"""Read-only query interface the matching engine depends on."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
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

# Replies slower than this are not treated as responses
REPLY_WINDOW = timedelta(hours=24)


class SkillRepository(ABC):
    """Abstract source of users, skills, exchanges and messages.

    Implementations must be safe for concurrent reads. Any query that
    cannot be executed raises ``RepositoryUnavailable``.
    """

    @abstractmethod
    def fetch_user(self, user_id: int) -> Optional[User]:
        """Return the user with its aggregated rating, or None if absent."""

    @abstractmethod
    def fetch_active_skills(
        self,
        user_id: Optional[int] = None,
        skill_type: Optional[SkillType] = None,
        categories: Optional[Iterable[str]] = None,
        levels: Optional[Iterable[str]] = None,
        exclude_user_id: Optional[int] = None,
    ) -> List[Skill]:
        """Return active skills matching every filter that is given.

        Args:
            user_id: Only skills owned by this user
            skill_type: Only offering or only seeking skills
            categories: Only skills whose category is in this collection
            levels: Only skills whose level is in this collection
            exclude_user_id: Skip skills owned by this user

        Returns:
            Skills ordered by id
        """

    @abstractmethod
    def fetch_skill_levels(self, user_id: int, skill_type: SkillType) -> Set[str]:
        """Return the levels of all the user's skills of ``skill_type``, active or not."""

    @abstractmethod
    def count_recent(self, kind: ActivityKind, user_id: int, since: datetime) -> int:
        """Count skills posted, exchanges requested or messages sent after ``since``."""

    @abstractmethod
    def count_exchanges(self, user_id: int, status: Optional[ExchangeStatus] = None) -> int:
        """Count exchanges where the user is requester or owns the requested skill."""

    @abstractmethod
    def fetch_exchanges_by_requester(self, user_id: int) -> List[Exchange]:
        """Return the user's requested exchanges, each carrying the skill category."""

    @abstractmethod
    def average_response_hours(self, user_id: int, since: datetime) -> Optional[float]:
        """Average hours the user took to reply in chat rooms.

        Only replies within 24 hours to messages sent after ``since``
        count. Returns None when there is no such reply.
        """


def average_reply_hours(
    by_room: Dict[int, List[Message]],
    user_id: int,
    since: datetime,
) -> Optional[float]:
    """Average delay between incoming messages and the user's later replies.

    Every (incoming, reply) pair in the same room counts, as long as the
    incoming message is newer than ``since`` and the reply follows within
    24 hours.
    """
    delays: List[float] = []
    for messages in by_room.values():
        for incoming in messages:
            if incoming.sender_id == user_id or incoming.created_at <= since:
                continue
            for reply in messages:
                if reply.sender_id != user_id:
                    continue
                delay = reply.created_at - incoming.created_at
                if timedelta(0) < delay < REPLY_WINDOW:
                    delays.append(delay.total_seconds() / 3600)

    if not delays:
        return None
    return sum(delays) / len(delays)
