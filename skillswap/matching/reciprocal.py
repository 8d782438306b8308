"""Reciprocal match discovery.

Starts from what the requester offers, finds users who want it, and
pairs those users' offerings with what the requester seeks.
"""

import logging
from datetime import datetime
from typing import List, Optional

from skillswap.errors import RepositoryUnavailable
from skillswap.matching.models import Match
from skillswap.matching.scorer import MatchScorer
from skillswap.matching.tables import expand_category
from skillswap.skills.models import Skill, SkillType, User
from skillswap.storage.repository import SkillRepository

logger = logging.getLogger(__name__)


class ReciprocalMatchFinder:
    """Finds users with bidirectional interest in the requester."""

    RECIPROCAL_BONUS = 35

    def __init__(self, repository: SkillRepository, scorer: MatchScorer, min_score: int = 20):
        self.repository = repository
        self.scorer = scorer
        self.min_score = min_score

    def find(self, requester: User, reference_time: Optional[datetime] = None) -> List[Match]:
        """Return reciprocal matches for the requester.

        Never raises on repository failures: a failed lookup drops only
        the branch it belongs to, and a failure to read the requester's
        offered skills yields an empty list.
        """
        try:
            offered_skills = self.repository.fetch_active_skills(
                user_id=requester.id, skill_type=SkillType.OFFERING
            )
        except RepositoryUnavailable as e:
            logger.warning(f"Reciprocal matching skipped for user {requester.id}: {e}")
            return []

        matches: List[Match] = []
        for offered_skill in offered_skills:
            try:
                interested = self.repository.fetch_active_skills(
                    skill_type=SkillType.SEEKING,
                    categories=expand_category(offered_skill.category),
                    exclude_user_id=requester.id,
                )
            except RepositoryUnavailable as e:
                logger.warning(f"Skipping offered skill {offered_skill.id}: {e}")
                continue

            # One pass per interested skill, so a user seeking several of
            # these categories contributes duplicates for the deduplicator
            for their_seeking in interested:
                try:
                    matches.extend(
                        self._matches_with(requester, their_seeking, reference_time)
                    )
                except RepositoryUnavailable as e:
                    logger.warning(f"Skipping user {their_seeking.user_id}: {e}")

        logger.info(f"Found {len(matches)} reciprocal matches for user {requester.id}")
        return matches

    def _matches_with(
        self,
        requester: User,
        their_seeking: Skill,
        reference_time: Optional[datetime],
    ) -> List[Match]:
        candidate = self.repository.fetch_user(their_seeking.user_id)
        if candidate is None:
            return []

        their_offering = self.repository.fetch_active_skills(
            user_id=candidate.id, skill_type=SkillType.OFFERING
        )
        my_seeking = self.repository.fetch_active_skills(
            user_id=requester.id, skill_type=SkillType.SEEKING
        )

        matches = []
        for offered in their_offering:
            for sought in my_seeking:
                if offered.category not in expand_category(sought.category):
                    continue

                match = self.scorer.score(requester, sought, offered, candidate, reference_time)
                match.match_score += self.RECIPROCAL_BONUS
                match.mutual_interest = True
                if match.match_score > self.min_score:
                    matches.append(match)

        return matches
