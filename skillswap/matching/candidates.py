"""Candidate generation from the requester's seeking skills."""

import logging
from datetime import datetime
from typing import List, Optional

from skillswap.errors import RepositoryUnavailable
from skillswap.matching.models import Match
from skillswap.matching.scorer import MatchScorer
from skillswap.matching.tables import compatible_levels, expand_category
from skillswap.skills.models import Skill, SkillType, User
from skillswap.storage.repository import SkillRepository

logger = logging.getLogger(__name__)


class CandidateGenerator:
    """Finds other users' offering skills that satisfy the requester's needs."""

    def __init__(self, repository: SkillRepository, scorer: MatchScorer, min_score: int = 20):
        """Initialize the generator.

        Args:
            repository: Source of skills and users
            scorer: Scorer applied to every (seeking, offered) pair
            min_score: Pairs scoring at or below this are dropped
        """
        self.repository = repository
        self.scorer = scorer
        self.min_score = min_score

    def generate(self, requester: User, reference_time: Optional[datetime] = None) -> List[Match]:
        """Score every eligible offering skill against each seeking skill.

        A failed lookup only drops the seeking skill being processed.

        Raises:
            RepositoryUnavailable: If the requester's seeking skills cannot be read
        """
        seeking_skills = self.repository.fetch_active_skills(
            user_id=requester.id, skill_type=SkillType.SEEKING
        )

        matches: List[Match] = []
        for seeking_skill in seeking_skills:
            try:
                matches.extend(self._matches_for(requester, seeking_skill, reference_time))
            except RepositoryUnavailable as e:
                logger.warning(
                    f"Skipping seeking skill {seeking_skill.id} for user {requester.id}: {e}"
                )

        logger.info(
            f"Generated {len(matches)} candidates from {len(seeking_skills)} seeking skills "
            f"for user {requester.id}"
        )
        return matches

    def _matches_for(
        self,
        requester: User,
        seeking_skill: Skill,
        reference_time: Optional[datetime],
    ) -> List[Match]:
        offered_skills = self.repository.fetch_active_skills(
            skill_type=SkillType.OFFERING,
            categories=expand_category(seeking_skill.category),
            levels=compatible_levels(seeking_skill.level),
            exclude_user_id=requester.id,
        )

        matches = []
        for offered_skill in offered_skills:
            candidate = self.repository.fetch_user(offered_skill.user_id)
            if candidate is None:
                logger.debug(f"Owner of skill {offered_skill.id} no longer exists")
                continue

            match = self.scorer.score(
                requester, seeking_skill, offered_skill, candidate, reference_time
            )
            if match.match_score > self.min_score:
                matches.append(match)

        return matches
