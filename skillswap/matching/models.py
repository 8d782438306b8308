"""Match records produced by the matching engine."""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass
class MatchLite:
    """Legacy match view without the score breakdown."""
    user_id: int
    user_name: str
    user_avatar: str
    offered_skill_id: int
    offered_skill: str
    seeking_skill_id: int
    seeking_skill: str
    match_score: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "user_name": self.user_name,
            "user_avatar": self.user_avatar,
            "offered_skill_id": self.offered_skill_id,
            "offered_skill": self.offered_skill,
            "seeking_skill_id": self.seeking_skill_id,
            "seeking_skill": self.seeking_skill,
            "match_score": self.match_score,
        }


@dataclass
class Match:
    """A candidate's offered skill paired with one of the requester's sought skills."""
    user_id: int                 # Candidate user
    user_name: str
    user_avatar: str
    offered_skill_id: int        # Candidate's offering skill
    offered_skill: str
    seeking_skill_id: int        # Requester's seeking skill
    seeking_skill: str
    match_score: int             # Aggregate score, the ranking key

    # Explainability
    user_rating: float = 0.0     # 0.0 when the candidate has no reviews
    location_score: int = 0
    activity_score: int = 0
    completion_rate: float = 0.5
    response_time: str = "New user"
    mutual_interest: bool = False
    recommendation_score: int = 0

    @property
    def key(self) -> Tuple[int, int, int]:
        """Identity used for deduplication."""
        return (self.user_id, self.offered_skill_id, self.seeking_skill_id)

    def to_lite(self) -> MatchLite:
        return MatchLite(
            user_id=self.user_id,
            user_name=self.user_name,
            user_avatar=self.user_avatar,
            offered_skill_id=self.offered_skill_id,
            offered_skill=self.offered_skill,
            seeking_skill_id=self.seeking_skill_id,
            seeking_skill=self.seeking_skill,
            match_score=self.match_score,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_lite().to_dict()
        data.update({
            "user_rating": round(self.user_rating, 2),
            "location_score": self.location_score,
            "activity_score": self.activity_score,
            "completion_rate": round(self.completion_rate, 3),
            "response_time": self.response_time,
            "mutual_interest": self.mutual_interest,
            "recommendation_score": self.recommendation_score,
        })
        return data
