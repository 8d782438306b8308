"""
Score Aggregator Tests

Tests validate:
- Base score (category, level, text and tag components)
- Location, activity and completion-rate sub-scores
- Mutual interest detection in both directions
- Preference heuristic from exchange history and seeking levels
- Response-time buckets
"""

from datetime import timedelta

import pytest

from skillswap.matching.scorer import MatchScorer, response_time_bucket
from skillswap.storage.snapshot import SnapshotRepository
from tests.conftest import (
    REFERENCE_TIME,
    make_exchange,
    make_message,
    make_user,
    offering,
    seeking,
)


def scorer_for(**snapshot) -> MatchScorer:
    return MatchScorer(SnapshotRepository(**snapshot))


# ============================================================================
# Base Score
# ============================================================================

class TestBaseScore:

    def test_same_category_and_level_without_text(self):
        scorer = scorer_for()
        sought = seeking(1, 1, "Music", "intermediate")
        offered = offering(2, 2, "Music", "intermediate")
        sought = sought.model_copy(update={"title": ""})
        offered = offered.model_copy(update={"title": ""})
        assert scorer.base_score(sought, offered) == 90

    def test_higher_offered_level_skips_exact_bonus(self):
        scorer = scorer_for()
        sought = seeking(1, 1, "Programming", "beginner", title="x")
        offered = offering(2, 2, "Programming", "intermediate", title="y")
        assert scorer.base_score(sought, offered) == 80

    def test_lower_offered_level_earns_no_level_points(self):
        scorer = scorer_for()
        sought = seeking(1, 1, "Programming", "advanced", title="x")
        offered = offering(2, 2, "Programming", "intermediate", title="y")
        assert scorer.base_score(sought, offered) == 50

    def test_related_category_earns_no_category_points(self):
        scorer = scorer_for()
        sought = seeking(1, 1, "Web Development", "beginner", title="x")
        offered = offering(2, 2, "Programming", "intermediate", title="y")
        assert scorer.base_score(sought, offered) == 30

    def test_text_and_tag_components(self):
        scorer = scorer_for()
        sought = seeking(
            1, 1, "Programming", "beginner",
            title="Python programming",
            description="Build small web services",
            tags="python, web",
        )
        offered = offering(
            2, 2, "Programming", "beginner",
            title="Python programming",
            description="Build small web services",
            tags="web, python",
        )
        # 50 + 30 + 10 + 20 (title) + 10 (description) + 15 (tags)
        assert scorer.base_score(sought, offered) == 135

    def test_partial_similarity_is_floored(self):
        scorer = scorer_for()
        sought = seeking(1, 1, "Art", "beginner", title="Watercolor landscape painting")
        offered = offering(2, 2, "Art", "beginner", title="Oil painting")
        # title similarity 33 -> 33 * 20 // 100 = 6
        assert scorer.base_score(sought, offered) == 96

    def test_tags_ignored_when_one_side_empty(self):
        scorer = scorer_for()
        sought = seeking(1, 1, "Art", "beginner", title="x", tags="")
        offered = offering(2, 2, "Art", "beginner", title="y", tags="oil")
        assert scorer.base_score(sought, offered) == 90


# ============================================================================
# Location
# ============================================================================

class TestLocationScore:

    @pytest.mark.parametrize("loc1,loc2,expected", [
        ("London", " london ", 15),
        ("New York City", "York Harbor", 8),
        ("New York", "Newark", 0),
        ("Rome", "", 0),
        ("", "", 0),
        ("San Jose", "San Diego", 0),
    ])
    def test_location_score(self, loc1, loc2, expected):
        assert scorer_for().location_score(loc1, loc2) == expected


# ============================================================================
# Activity and Completion
# ============================================================================

class TestActivity:

    @pytest.mark.parametrize("count,points", [
        (0, 0), (1, 5), (4, 5), (5, 10), (9, 10), (10, 15), (40, 15),
    ])
    def test_activity_points(self, count, points):
        assert scorer_for().activity_points(count) == points

    def test_recent_activity_counts(self):
        recent = REFERENCE_TIME - timedelta(days=3)
        skills = [
            offering(1, 2, "Music", "expert", created_at=recent),
            offering(2, 2, "Art", "expert", created_at=recent),
            offering(3, 3, "Art", "expert"),
        ]
        exchanges = [make_exchange(1, 2, 3, created_at=recent)]
        messages = [make_message(i, 1, 2, recent) for i in range(1, 11)]
        scorer = scorer_for(skills=skills, exchanges=exchanges, messages=messages)

        since = REFERENCE_TIME - timedelta(days=30)
        # 2 skills + 1 exchange + 10 // 5 messages = 5
        assert scorer._activity_score(2, since) == 10

    def test_old_activity_ignored(self):
        scorer = scorer_for(skills=[offering(1, 2, "Music", "expert")])
        assert scorer._activity_score(2, REFERENCE_TIME - timedelta(days=30)) == 0


class TestCompletionRate:

    def test_new_user_is_neutral(self):
        assert scorer_for()._completion_rate(2) == 0.5

    def test_counts_requested_and_owned_exchanges(self):
        skills = [offering(10, 2, "Music", "expert"), offering(11, 3, "Art", "expert")]
        exchanges = [
            make_exchange(1, 3, 10, status="completed"),   # owner
            make_exchange(2, 4, 10, status="rejected"),    # owner
            make_exchange(3, 2, 11, status="pending"),     # requester
            make_exchange(4, 2, 11, status="cancelled"),   # requester
            make_exchange(5, 5, 11, status="completed"),   # not involved
        ]
        scorer = scorer_for(skills=skills, exchanges=exchanges)
        assert scorer._completion_rate(2) == 0.25


# ============================================================================
# Mutual Interest
# ============================================================================

class TestMutualInterest:

    def test_both_directions_required(self):
        skills = [
            seeking(1, 1, "Programming", "beginner"),
            offering(2, 2, "Programming", "intermediate"),
        ]
        assert scorer_for(skills=skills)._has_mutual_interest(1, 2) is False

    def test_related_categories_count(self):
        skills = [
            seeking(1, 1, "Web Development", "beginner"),
            offering(2, 1, "Cooking", "advanced"),
            offering(3, 2, "Programming", "intermediate"),
            seeking(4, 2, "Baking", "beginner"),
        ]
        assert scorer_for(skills=skills)._has_mutual_interest(1, 2) is True

    def test_inactive_skills_ignored(self):
        skills = [
            seeking(1, 1, "Music", "beginner"),
            offering(2, 1, "Art", "advanced"),
            offering(3, 2, "Music", "intermediate"),
            seeking(4, 2, "Art", "beginner", is_active=False),
        ]
        assert scorer_for(skills=skills)._has_mutual_interest(1, 2) is False


# ============================================================================
# Preference Heuristic
# ============================================================================

class TestRecommendationScore:

    def test_category_history_is_capped(self):
        skills = [offering(10 + i, 5, "Music", "expert") for i in range(6)]
        exchanges = [make_exchange(i, 1, 10 + i, status="rejected") for i in range(6)]
        scorer = scorer_for(skills=skills, exchanges=exchanges)
        offered = offering(99, 2, "Music", "expert")
        assert scorer._recommendation_score(1, offered) == 15

    def test_category_history_counts_exact_category(self):
        skills = [offering(10, 5, "Music", "expert"), offering(11, 5, "Audio", "expert")]
        exchanges = [make_exchange(1, 1, 10), make_exchange(2, 1, 11)]
        scorer = scorer_for(skills=skills, exchanges=exchanges)
        assert scorer._recommendation_score(1, offering(99, 2, "Music", "expert")) == 3

    def test_level_progression(self):
        skills = [
            seeking(1, 1, "Music", "beginner"),
            seeking(2, 1, "Art", "intermediate"),
        ]
        scorer = scorer_for(skills=skills)
        assert scorer._recommendation_score(1, offering(10, 2, "Sports", "intermediate")) == 5
        assert scorer._recommendation_score(1, offering(11, 2, "Sports", "advanced")) == 5
        assert scorer._recommendation_score(1, offering(12, 2, "Sports", "expert")) == 0

    def test_level_progression_counts_inactive_seeking_skills(self):
        skills = [seeking(1, 1, "Music", "beginner", is_active=False)]
        scorer = scorer_for(skills=skills)
        assert scorer._recommendation_score(1, offering(10, 2, "Sports", "intermediate")) == 5

    def test_level_progression_ignores_offering_levels(self):
        skills = [offering(1, 1, "Music", "beginner")]
        scorer = scorer_for(skills=skills)
        assert scorer._recommendation_score(1, offering(10, 2, "Sports", "intermediate")) == 0


# ============================================================================
# Aggregate
# ============================================================================

class TestAggregate:

    def test_breakdown_sums_to_score(self):
        requester = make_user(1, location="Berlin")
        candidate = make_user(2, location="berlin", rating=4.5)
        sought = seeking(1, 1, "Music", "advanced", title="a")
        offered = offering(2, 2, "Music", "expert", title="b")
        scorer = scorer_for(users=[requester, candidate], skills=[sought, offered])

        match = scorer.score(requester, sought, offered, candidate, REFERENCE_TIME)

        # base 80 + rating int(4.5 * 5) = 22 + location 15 + completion 10
        assert match.match_score == 127
        assert match.user_rating == 4.5
        assert match.location_score == 15
        assert match.activity_score == 0
        assert match.completion_rate == 0.5
        assert match.mutual_interest is False
        assert match.recommendation_score == 0
        assert match.response_time == "New user"
        assert match.key == (2, 2, 1)


# ============================================================================
# Response Time
# ============================================================================

class TestResponseTime:

    @pytest.mark.parametrize("hours,bucket", [
        (None, "New user"),
        (0.0, "New user"),
        (0.5, "< 1 hour"),
        (5.9, "< 6 hours"),
        (12, "< 1 day"),
        (30, "1+ days"),
    ])
    def test_buckets(self, hours, bucket):
        assert response_time_bucket(hours) == bucket

    def test_average_reply_delay(self):
        t0 = REFERENCE_TIME - timedelta(days=2)
        messages = [
            make_message(1, 7, 1, t0),
            make_message(2, 7, 2, t0 + timedelta(hours=2)),
            make_message(3, 7, 1, t0 + timedelta(hours=3)),
            make_message(4, 7, 2, t0 + timedelta(hours=7)),
        ]
        scorer = scorer_for(messages=messages)
        # Pairs: (1,2)=2h, (1,4)=7h, (3,4)=4h -> average 4.33h
        assert scorer._response_time(2, REFERENCE_TIME - timedelta(days=30)) == "< 6 hours"
