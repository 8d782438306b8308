"""Export functions for ranked matches in multiple formats."""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from skillswap.matching.models import Match

# File extensions export_matches can write
EXPORT_FORMATS = (".json", ".csv")


def export_json(
    matches: List[Match],
    filepath: str,
    user_id: Optional[int] = None,
) -> None:
    """Export matches to JSON format.

    Matches are written in the given (ranked) order.

    Args:
        matches: Ranked matches
        filepath: Path to write JSON file
        user_id: Requesting user, recorded in the header

    Raises:
        IOError: If file cannot be written
    """
    export_data = {
        "exported_at": datetime.now().isoformat(),
        "user_id": user_id,
        "total_matches": len(matches),
        "mutual_count": sum(1 for m in matches if m.mutual_interest),
        "matches": [
            {"rank": i, **match.to_dict()}
            for i, match in enumerate(matches, 1)
        ],
    }

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(export_data, f, indent=2, ensure_ascii=False)


# Columns written to CSV, in order
CSV_COLUMNS = (
    "rank",
    "user_id",
    "user_name",
    "offered_skill",
    "seeking_skill",
    "match_score",
    "user_rating",
    "location_score",
    "activity_score",
    "completion_rate",
    "response_time",
    "mutual_interest",
    "recommendation_score",
)


def _csv_row(rank: int, match: Match) -> Dict[str, Any]:
    row = match.to_dict()
    row["rank"] = rank
    row["user_rating"] = f"{match.user_rating:.1f}" if match.user_rating else ""
    row["completion_rate"] = f"{int(match.completion_rate * 100)}%"
    row["mutual_interest"] = "Yes" if match.mutual_interest else "No"
    return row


def export_csv(
    matches: List[Match],
    filepath: str,
) -> None:
    """Export matches to CSV, one row per match with its score breakdown.

    Raises:
        IOError: If file cannot be written
    """
    target = Path(filepath)
    target.parent.mkdir(parents=True, exist_ok=True)

    with open(target, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(_csv_row(rank, match) for rank, match in enumerate(matches, 1))


def export_matches(
    matches: List[Match],
    filepath: str,
    user_id: Optional[int] = None,
) -> None:
    """Export matches with format auto-detection from file extension.

    Args:
        matches: Ranked matches
        filepath: Path to write file (extension determines format)
        user_id: Requesting user, recorded in JSON exports

    Raises:
        ValueError: If file extension is not recognized
        IOError: If file cannot be written
    """
    extension = Path(filepath).suffix.lower()

    if extension == ".json":
        export_json(matches, filepath, user_id=user_id)
    elif extension == ".csv":
        export_csv(matches, filepath)
    else:
        raise ValueError(
            f"Unsupported file format: {extension}. "
            f"Supported formats: {', '.join(EXPORT_FORMATS)}"
        )
