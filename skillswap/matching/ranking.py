"""Post-processing of pooled matches: deduplication, ranking and diversity.

Each stage takes a list and returns a new list; inputs are not modified.
"""

import logging
from functools import cmp_to_key
from typing import Dict, List, Tuple

from skillswap.matching.models import Match

logger = logging.getLogger(__name__)


class Deduplicator:
    """Collapses matches sharing (candidate, offered skill, sought skill)."""

    def deduplicate(self, matches: List[Match]) -> List[Match]:
        """Keep the highest-scoring match per key.

        Ties go to the match seen first. Survivors keep the position at
        which their key first appeared.

        Args:
            matches: Pooled matches, possibly with repeated keys

        Returns:
            One match per key
        """
        best: Dict[Tuple[int, int, int], Match] = {}
        for match in matches:
            existing = best.get(match.key)
            if existing is None or match.match_score > existing.match_score:
                best[match.key] = match

        result = list(best.values())
        logger.info(f"Deduplication: {len(result)} unique of {len(matches)} matches")
        return result


class Ranker:
    """Orders matches from most to least preferred."""

    # Ratings closer than this are treated as equal
    RATING_TOLERANCE = 0.1

    def _compare(self, a: Match, b: Match) -> int:
        """Negative when ``a`` ranks before ``b``."""
        if a.match_score != b.match_score:
            return -1 if a.match_score > b.match_score else 1

        if abs(a.user_rating - b.user_rating) > self.RATING_TOLERANCE:
            return -1 if a.user_rating > b.user_rating else 1

        if a.mutual_interest != b.mutual_interest:
            return -1 if a.mutual_interest else 1

        if a.activity_score != b.activity_score:
            return -1 if a.activity_score > b.activity_score else 1

        return 0

    def rank(self, matches: List[Match]) -> List[Match]:
        """Sort by score, rating, mutual interest, then activity.

        The sort is stable: full ties keep their input order.
        """
        return sorted(matches, key=cmp_to_key(self._compare))


class DiversityFilter:
    """Caps how many matches a single candidate may occupy."""

    def __init__(self, max_per_user: int = 2):
        self.max_per_user = max_per_user

    def apply(self, matches: List[Match]) -> List[Match]:
        """Keep at most ``max_per_user`` matches per candidate, in order."""
        per_user: Dict[int, int] = {}
        filtered = []

        for match in matches:
            count = per_user.get(match.user_id, 0)
            if count < self.max_per_user:
                filtered.append(match)
                per_user[match.user_id] = count + 1

        dropped = len(matches) - len(filtered)
        if dropped:
            logger.info(f"Diversity filter dropped {dropped} matches")
        return filtered
