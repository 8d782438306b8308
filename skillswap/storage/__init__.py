"""Storage module: repository interface and its SQL and in-memory backends."""

from skillswap.storage.database import get_engine, get_session, init_db
from skillswap.storage.repository import SkillRepository
from skillswap.storage.snapshot import SnapshotRepository
from skillswap.storage.sql_repository import SqlAlchemyRepository

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "SkillRepository",
    "SnapshotRepository",
    "SqlAlchemyRepository",
]
