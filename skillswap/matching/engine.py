"""Matching engine entry points.

Pipeline per request: candidate generation and reciprocal discovery feed
one pool, which is deduplicated, ranked and diversified.
"""

import logging
from datetime import datetime
from typing import List, Optional

from skillswap.config import MatchSettings
from skillswap.errors import UserNotFound
from skillswap.matching.candidates import CandidateGenerator
from skillswap.matching.models import Match, MatchLite
from skillswap.matching.ranking import Deduplicator, DiversityFilter, Ranker
from skillswap.matching.reciprocal import ReciprocalMatchFinder
from skillswap.matching.scorer import MatchScorer
from skillswap.storage.repository import SkillRepository

logger = logging.getLogger(__name__)


class MatchEngine:
    """Computes ranked skill exchange matches for a user.

    The engine holds no per-request state; one instance can serve any
    number of independent requests.
    """

    def __init__(self, repository: SkillRepository, settings: Optional[MatchSettings] = None):
        """Initialize the engine.

        Args:
            repository: Read-only source of users, skills and activity
            settings: Pipeline parameters (default: MatchSettings())
        """
        self.repository = repository
        self.settings = settings or MatchSettings()

        scorer = MatchScorer(repository, activity_window_days=self.settings.activity_window_days)
        self.generator = CandidateGenerator(repository, scorer, self.settings.min_score)
        self.reciprocal_finder = ReciprocalMatchFinder(repository, scorer, self.settings.min_score)
        self.deduplicator = Deduplicator()
        self.ranker = Ranker()
        self.diversity_filter = DiversityFilter(self.settings.max_matches_per_user)

    def compute_advanced_matches(
        self,
        user_id: int,
        reference_time: Optional[datetime] = None,
    ) -> List[Match]:
        """Compute ranked matches with their full score breakdown.

        Args:
            user_id: Requesting user
            reference_time: End of the activity window (default: now)

        Returns:
            Matches, most preferred first

        Raises:
            UserNotFound: If the user does not exist
            RepositoryUnavailable: If the user or their seeking skills
                cannot be read
        """
        if reference_time is None:
            reference_time = datetime.utcnow()

        requester = self.repository.fetch_user(user_id)
        if requester is None:
            raise UserNotFound(user_id)

        pool = self.generator.generate(requester, reference_time)
        pool.extend(self.reciprocal_finder.find(requester, reference_time))

        matches = self.deduplicator.deduplicate(pool)
        matches = self.ranker.rank(matches)
        matches = self.diversity_filter.apply(matches)

        logger.info(f"Computed {len(matches)} matches for user {user_id}")
        return matches

    def compute_matches(
        self,
        user_id: int,
        reference_time: Optional[datetime] = None,
    ) -> List[MatchLite]:
        """Compute ranked matches in the legacy format without breakdown."""
        return [m.to_lite() for m in self.compute_advanced_matches(user_id, reference_time)]
