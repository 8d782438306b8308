"""Tests for match export."""

import csv
import json

import pytest

from skillswap.matching.models import Match
from skillswap.output.export import export_csv, export_json, export_matches


def make_match(user_id: int, score: int, mutual: bool = False, rating: float = 0.0) -> Match:
    return Match(
        user_id=user_id,
        user_name=f"User {user_id}",
        user_avatar="",
        offered_skill_id=user_id * 10,
        offered_skill="Django",
        seeking_skill_id=1,
        seeking_skill="Python",
        match_score=score,
        user_rating=rating,
        mutual_interest=mutual,
    )


@pytest.fixture
def matches():
    return [make_match(2, 160, mutual=True, rating=4.5), make_match(3, 45)]


def test_json_export(tmp_path, matches):
    path = tmp_path / "out" / "matches.json"
    export_json(matches, str(path), user_id=1)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["user_id"] == 1
    assert data["total_matches"] == 2
    assert data["mutual_count"] == 1
    assert [m["rank"] for m in data["matches"]] == [1, 2]
    assert data["matches"][0]["user_id"] == 2
    assert data["matches"][0]["match_score"] == 160
    assert data["matches"][0]["mutual_interest"] is True
    assert "exported_at" in data


def test_csv_export(tmp_path, matches):
    path = tmp_path / "matches.csv"
    export_csv(matches, str(path))

    with open(path, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert len(rows) == 2
    assert rows[0]["rank"] == "1"
    assert rows[0]["user_rating"] == "4.5"
    assert rows[0]["mutual_interest"] == "Yes"
    assert rows[1]["user_rating"] == ""
    assert rows[1]["completion_rate"] == "50%"


def test_dispatch_by_extension(tmp_path, matches):
    export_matches(matches, str(tmp_path / "m.JSON"))
    export_matches(matches, str(tmp_path / "m.csv"))
    assert (tmp_path / "m.JSON").exists()
    assert (tmp_path / "m.csv").exists()


def test_unknown_extension_rejected(tmp_path, matches):
    with pytest.raises(ValueError, match="Unsupported file format"):
        export_matches(matches, str(tmp_path / "m.xlsx"))
