"""Matching module for candidate discovery, scoring and ranking."""

from skillswap.matching.candidates import CandidateGenerator
from skillswap.matching.engine import MatchEngine
from skillswap.matching.models import Match, MatchLite
from skillswap.matching.ranking import Deduplicator, DiversityFilter, Ranker
from skillswap.matching.reciprocal import ReciprocalMatchFinder
from skillswap.matching.scorer import MatchScorer

__all__ = [
    "CandidateGenerator",
    "MatchEngine",
    "Match",
    "MatchLite",
    "Deduplicator",
    "DiversityFilter",
    "Ranker",
    "ReciprocalMatchFinder",
    "MatchScorer",
]
