"""Static lookup tables for category expansion and level compatibility.

Both tables are read-only mappings built once at import time.
"""

from types import MappingProxyType
from typing import Mapping, Tuple

# Related categories searched when a skill names the key category.
# Every expansion includes the category itself.
CATEGORY_EXPANSIONS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Programming": ("Programming", "Web Development", "Software Development", "Tech"),
    "Web Development": ("Web Development", "Programming", "Frontend", "Backend", "Fullstack"),
    "Design": ("Design", "UI/UX", "Graphics", "Creative"),
    "Music": ("Music", "Audio", "Sound", "Performance"),
    "Language": ("Language", "Communication", "Writing", "Translation"),
    "Business": ("Business", "Marketing", "Management", "Entrepreneurship"),
    "Art": ("Art", "Creative", "Visual", "Crafts"),
    "Sports": ("Sports", "Fitness", "Health", "Physical"),
    "Cooking": ("Cooking", "Food", "Culinary", "Baking"),
    "Photography": ("Photography", "Visual", "Creative", "Media"),
})

# Offered levels acceptable to someone seeking the key level
LEVEL_COMPATIBILITY: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "beginner": ("beginner", "intermediate"),
    "intermediate": ("intermediate", "advanced"),
    "advanced": ("intermediate", "advanced", "expert"),
    "expert": ("advanced", "expert"),
})

LEVEL_RANKS: Mapping[str, int] = MappingProxyType({
    "beginner": 1,
    "intermediate": 2,
    "advanced": 3,
    "expert": 4,
})


def expand_category(category: str) -> Tuple[str, ...]:
    """Return the categories searched for ``category``.

    Lookup is exact and case-sensitive; unknown categories expand to
    themselves only.
    """
    return CATEGORY_EXPANSIONS.get(category, (category,))


def compatible_levels(level: str) -> Tuple[str, ...]:
    """Return the offered levels compatible with a sought ``level``."""
    return LEVEL_COMPATIBILITY.get(level, (level,))


def level_rank(level: str) -> int:
    """Numeric rank of a level (beginner=1 ... expert=4, unknown=0)."""
    return LEVEL_RANKS.get(level, 0)
