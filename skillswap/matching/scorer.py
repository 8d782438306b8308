"""Match score calculation for skill exchange candidates.

The aggregate score is the sum of:
- base score (category, level, title, description and tag similarity)
- reputation boost from the candidate's average rating
- location proximity
- recent activity
- exchange completion rate
- reciprocity boost when both users want what the other offers
- preference heuristic from the requester's exchange history

All components are additive integers and are not normalized.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from skillswap.matching.models import Match
from skillswap.matching.similarity import tag_similarity, text_similarity
from skillswap.matching.tables import expand_category, level_rank
from skillswap.skills.models import (
    ActivityKind,
    ExchangeStatus,
    Skill,
    SkillLevel,
    SkillType,
    User,
)
from skillswap.storage.repository import SkillRepository

logger = logging.getLogger(__name__)


class MatchScorer:
    """Calculates aggregate match scores and their breakdown."""

    # Base score points
    CATEGORY_POINTS = 50
    LEVEL_POINTS = 30
    EXACT_LEVEL_POINTS = 10
    TITLE_WEIGHT = 20
    DESCRIPTION_WEIGHT = 10
    TAG_WEIGHT = 15

    # Aggregate boosts
    RATING_MULTIPLIER = 5        # 5-star average -> 25 points
    LOCATION_EXACT_POINTS = 15
    LOCATION_PARTIAL_POINTS = 8
    LOCATION_MIN_WORD_LENGTH = 4
    COMPLETION_WEIGHT = 20
    NEUTRAL_COMPLETION_RATE = 0.5
    MUTUAL_INTEREST_POINTS = 30

    # (minimum activity count, points), checked in order
    ACTIVITY_STEPS = ((10, 15), (5, 10), (1, 5))
    MESSAGES_PER_ACTIVITY = 5

    # Preference heuristic
    CATEGORY_PREFERENCE_POINTS = 3
    CATEGORY_PREFERENCE_CAP = 15
    LEVEL_PROGRESSION_POINTS = 5

    DEFAULT_ACTIVITY_WINDOW_DAYS = 30

    def __init__(
        self,
        repository: SkillRepository,
        activity_window_days: int = DEFAULT_ACTIVITY_WINDOW_DAYS,
    ):
        """Initialize the scorer.

        Args:
            repository: Source of activity, exchange and skill data
            activity_window_days: Look-back window for activity and response time
        """
        self.repository = repository
        self.activity_window = timedelta(days=activity_window_days)

    def score(
        self,
        requester: User,
        seeking_skill: Skill,
        offered_skill: Skill,
        candidate: User,
        reference_time: Optional[datetime] = None,
    ) -> Match:
        """Score one (seeking, offered) pair for the requester.

        Args:
            requester: User the matches are computed for
            seeking_skill: Requester's seeking skill
            offered_skill: Candidate's offering skill
            candidate: Owner of ``offered_skill``
            reference_time: End of the activity window (default: now)

        Returns:
            Match with aggregate score and breakdown

        Raises:
            RepositoryUnavailable: If any lookup fails
        """
        if reference_time is None:
            reference_time = datetime.utcnow()
        since = reference_time - self.activity_window

        match = Match(
            user_id=candidate.id,
            user_name=candidate.full_name,
            user_avatar=candidate.avatar,
            offered_skill_id=offered_skill.id,
            offered_skill=offered_skill.title,
            seeking_skill_id=seeking_skill.id,
            seeking_skill=seeking_skill.title,
            match_score=self.base_score(seeking_skill, offered_skill),
        )

        if candidate.rating is not None:
            match.user_rating = candidate.rating.average
            match.match_score += int(candidate.rating.average * self.RATING_MULTIPLIER)

        match.location_score = self.location_score(requester.location, candidate.location)
        match.match_score += match.location_score

        match.activity_score = self._activity_score(candidate.id, since)
        match.match_score += match.activity_score

        match.completion_rate = self._completion_rate(candidate.id)
        match.match_score += int(match.completion_rate * self.COMPLETION_WEIGHT)

        match.response_time = self._response_time(candidate.id, since)

        match.mutual_interest = self._has_mutual_interest(requester.id, candidate.id)
        if match.mutual_interest:
            match.match_score += self.MUTUAL_INTEREST_POINTS

        match.recommendation_score = self._recommendation_score(requester.id, offered_skill)
        match.match_score += match.recommendation_score

        logger.debug(
            f"Scored offered skill {offered_skill.id} against seeking skill "
            f"{seeking_skill.id}: {match.match_score}"
        )
        return match

    def base_score(self, seeking_skill: Skill, offered_skill: Skill) -> int:
        """Score two skills on their own merits.

        Only an exact category match earns category points; related
        categories widen the search but are not rewarded here.
        """
        score = 0

        if seeking_skill.category == offered_skill.category:
            score += self.CATEGORY_POINTS

        sought_rank = level_rank(seeking_skill.level)
        offered_rank = level_rank(offered_skill.level)
        if offered_rank >= sought_rank:
            score += self.LEVEL_POINTS
            if offered_rank == sought_rank:
                score += self.EXACT_LEVEL_POINTS

        score += text_similarity(seeking_skill.title, offered_skill.title) * self.TITLE_WEIGHT // 100
        score += (
            text_similarity(seeking_skill.description, offered_skill.description)
            * self.DESCRIPTION_WEIGHT // 100
        )

        if seeking_skill.tags and offered_skill.tags:
            score += tag_similarity(seeking_skill.tags, offered_skill.tags) * self.TAG_WEIGHT // 100

        return score

    def location_score(self, location1: str, location2: str) -> int:
        """Score location proximity from free-text locations.

        Returns:
            15 for the same place, 8 for a shared word of 4+ letters, else 0
        """
        if not location1 or not location2:
            return 0

        location1 = location1.strip().lower()
        location2 = location2.strip().lower()

        if location1 == location2:
            return self.LOCATION_EXACT_POINTS

        # City or region in common, e.g. "san francisco" / "south san francisco"
        words2 = set(location2.split())
        for word in location1.split():
            if len(word) >= self.LOCATION_MIN_WORD_LENGTH and word in words2:
                return self.LOCATION_PARTIAL_POINTS

        return 0

    def activity_points(self, activity_count: int) -> int:
        """Map a recent activity count to score points."""
        for minimum, points in self.ACTIVITY_STEPS:
            if activity_count >= minimum:
                return points
        return 0

    def _activity_score(self, user_id: int, since: datetime) -> int:
        skills_posted = self.repository.count_recent(ActivityKind.SKILLS, user_id, since)
        exchanges = self.repository.count_recent(ActivityKind.EXCHANGES, user_id, since)
        messages = self.repository.count_recent(ActivityKind.MESSAGES, user_id, since)

        # Messages are cheap, so they weigh less
        total = skills_posted + exchanges + messages // self.MESSAGES_PER_ACTIVITY
        return self.activity_points(total)

    def _completion_rate(self, user_id: int) -> float:
        """Share of the user's exchanges that were completed.

        Users without exchanges get a neutral 0.5.
        """
        total = self.repository.count_exchanges(user_id)
        if total == 0:
            return self.NEUTRAL_COMPLETION_RATE

        completed = self.repository.count_exchanges(user_id, ExchangeStatus.COMPLETED)
        return completed / total

    def _response_time(self, user_id: int, since: datetime) -> str:
        avg_hours = self.repository.average_response_hours(user_id, since)
        return response_time_bucket(avg_hours)

    def _has_mutual_interest(self, requester_id: int, candidate_id: int) -> bool:
        """Check whether each user offers something the other seeks."""
        requester_seeking = self.repository.fetch_active_skills(
            user_id=requester_id, skill_type=SkillType.SEEKING
        )
        candidate_offering = self.repository.fetch_active_skills(
            user_id=candidate_id, skill_type=SkillType.OFFERING
        )
        candidate_serves_requester = any(
            offering.category in expand_category(seeking.category)
            for seeking in requester_seeking
            for offering in candidate_offering
        )
        if not candidate_serves_requester:
            return False

        requester_offering = self.repository.fetch_active_skills(
            user_id=requester_id, skill_type=SkillType.OFFERING
        )
        candidate_seeking = self.repository.fetch_active_skills(
            user_id=candidate_id, skill_type=SkillType.SEEKING
        )
        return any(
            seeking.category in expand_category(offering.category)
            for offering in requester_offering
            for seeking in candidate_seeking
        )

    def _recommendation_score(self, requester_id: int, offered_skill: Skill) -> int:
        """Score the offered skill against the requester's history.

        Rewards categories the requester has asked for before, and levels
        one step above any level the requester has sought.
        """
        score = 0

        history = self.repository.fetch_exchanges_by_requester(requester_id)
        category_count = sum(1 for e in history if e.category == offered_skill.category)
        if category_count:
            score += min(
                category_count * self.CATEGORY_PREFERENCE_POINTS,
                self.CATEGORY_PREFERENCE_CAP,
            )

        # Every seeking skill counts, active or not
        seeking_levels = self.repository.fetch_skill_levels(requester_id, SkillType.SEEKING)

        if offered_skill.level == SkillLevel.INTERMEDIATE.value and SkillLevel.BEGINNER.value in seeking_levels:
            score += self.LEVEL_PROGRESSION_POINTS
        if offered_skill.level == SkillLevel.ADVANCED.value and SkillLevel.INTERMEDIATE.value in seeking_levels:
            score += self.LEVEL_PROGRESSION_POINTS

        return score


def response_time_bucket(avg_hours: Optional[float]) -> str:
    """Describe an average response delay for display."""
    if not avg_hours:
        return "New user"
    if avg_hours < 1:
        return "< 1 hour"
    if avg_hours < 6:
        return "< 6 hours"
    if avg_hours < 24:
        return "< 1 day"
    return "1+ days"
