"""Repository backed by the SQL database."""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional, Set

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from skillswap.errors import RepositoryUnavailable
from skillswap.skills.models import (
    ActivityKind,
    Exchange,
    ExchangeStatus,
    Message,
    Skill,
    SkillType,
    User,
    UserRating,
)
from skillswap.storage.database import get_session_factory
from skillswap.storage.models import (
    ChatRoomRow,
    ExchangeRow,
    MessageRow,
    SkillRow,
    UserRow,
)
from skillswap.storage.repository import SkillRepository, average_reply_hours

logger = logging.getLogger(__name__)


def _to_user(row: UserRow) -> User:
    rating = None
    if row.rating is not None:
        rating = UserRating(average=row.rating.average_rating, count=row.rating.total_reviews)
    return User(
        id=row.id,
        full_name=row.full_name or "",
        avatar=row.avatar or "",
        location=row.location or "",
        rating=rating,
    )


def _to_skill(row: SkillRow) -> Skill:
    return Skill(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description or "",
        category=row.category,
        level=row.level,
        skill_type=SkillType(row.skill_type),
        tags=row.tags or "",
        is_active=row.is_active,
        created_at=row.created_at,
    )


class SqlAlchemyRepository(SkillRepository):
    """Reads matching inputs through short-lived SQLAlchemy sessions."""

    def __init__(self, session_factory: Optional[sessionmaker[Session]] = None):
        """Initialize the repository.

        Args:
            session_factory: Factory for read sessions. Defaults to the
                application-wide factory from ``storage.database``.
        """
        self._session_factory = session_factory or get_session_factory()

    @contextmanager
    def _session(self, query_name: str) -> Iterator[Session]:
        """Open a read session, translating driver errors."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            logger.error(f"Query {query_name} failed: {e}")
            raise RepositoryUnavailable(f"{query_name} failed: {e}") from e
        finally:
            session.close()

    def fetch_user(self, user_id: int) -> Optional[User]:
        with self._session("fetch_user") as session:
            row = session.get(UserRow, user_id)
            return _to_user(row) if row is not None else None

    def fetch_active_skills(
        self,
        user_id: Optional[int] = None,
        skill_type: Optional[SkillType] = None,
        categories: Optional[Iterable[str]] = None,
        levels: Optional[Iterable[str]] = None,
        exclude_user_id: Optional[int] = None,
    ) -> List[Skill]:
        stmt = select(SkillRow).where(SkillRow.is_active.is_(True))
        if user_id is not None:
            stmt = stmt.where(SkillRow.user_id == user_id)
        if exclude_user_id is not None:
            stmt = stmt.where(SkillRow.user_id != exclude_user_id)
        if skill_type is not None:
            stmt = stmt.where(SkillRow.skill_type == SkillType(skill_type).value)
        if categories is not None:
            stmt = stmt.where(SkillRow.category.in_(list(categories)))
        if levels is not None:
            stmt = stmt.where(SkillRow.level.in_(list(levels)))
        stmt = stmt.order_by(SkillRow.id)

        with self._session("fetch_active_skills") as session:
            return [_to_skill(row) for row in session.scalars(stmt)]

    def fetch_skill_levels(self, user_id: int, skill_type: SkillType) -> Set[str]:
        stmt = (
            select(SkillRow.level)
            .where(SkillRow.user_id == user_id, SkillRow.skill_type == SkillType(skill_type).value)
            .distinct()
        )

        with self._session("fetch_skill_levels") as session:
            return set(session.scalars(stmt))

    def count_recent(self, kind: ActivityKind, user_id: int, since: datetime) -> int:
        kind = ActivityKind(kind)
        if kind == ActivityKind.SKILLS:
            stmt = select(func.count(SkillRow.id)).where(
                SkillRow.user_id == user_id, SkillRow.created_at > since
            )
        elif kind == ActivityKind.EXCHANGES:
            stmt = select(func.count(ExchangeRow.id)).where(
                ExchangeRow.requester_id == user_id, ExchangeRow.created_at > since
            )
        else:
            stmt = select(func.count(MessageRow.id)).where(
                MessageRow.sender_id == user_id, MessageRow.created_at > since
            )

        with self._session(f"count_recent[{kind.value}]") as session:
            return session.scalar(stmt) or 0

    def count_exchanges(self, user_id: int, status: Optional[ExchangeStatus] = None) -> int:
        stmt = (
            select(func.count(ExchangeRow.id))
            .join(SkillRow, ExchangeRow.skill_id == SkillRow.id)
            .where(or_(ExchangeRow.requester_id == user_id, SkillRow.user_id == user_id))
        )
        if status is not None:
            stmt = stmt.where(ExchangeRow.status == ExchangeStatus(status).value)

        with self._session("count_exchanges") as session:
            return session.scalar(stmt) or 0

    def fetch_exchanges_by_requester(self, user_id: int) -> List[Exchange]:
        stmt = (
            select(ExchangeRow, SkillRow.category)
            .join(SkillRow, ExchangeRow.skill_id == SkillRow.id)
            .where(ExchangeRow.requester_id == user_id)
            .order_by(ExchangeRow.id)
        )

        with self._session("fetch_exchanges_by_requester") as session:
            return [
                Exchange(
                    id=row.id,
                    requester_id=row.requester_id,
                    skill_id=row.skill_id,
                    status=ExchangeStatus(row.status),
                    category=category,
                    created_at=row.created_at,
                    updated_at=row.updated_at,
                )
                for row, category in session.execute(stmt)
            ]

    def average_response_hours(self, user_id: int, since: datetime) -> Optional[float]:
        rooms = select(ChatRoomRow.id).where(
            or_(ChatRoomRow.user1_id == user_id, ChatRoomRow.user2_id == user_id)
        )
        stmt = (
            select(MessageRow)
            .where(MessageRow.chat_room_id.in_(rooms))
            .order_by(MessageRow.created_at, MessageRow.id)
        )

        with self._session("average_response_hours") as session:
            by_room: Dict[int, List[Message]] = {}
            for row in session.scalars(stmt):
                by_room.setdefault(row.chat_room_id, []).append(
                    Message(
                        id=row.id,
                        room_id=row.chat_room_id,
                        sender_id=row.sender_id,
                        created_at=row.created_at,
                    )
                )

        return average_reply_hours(by_room, user_id, since)
