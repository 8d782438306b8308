"""Token-overlap similarity between skill texts and tag lists."""

from typing import List

# Words this short or shorter carry no signal
MIN_TOKEN_LENGTH = 3


def _tokenize(text: str) -> List[str]:
    return [word for word in text.lower().split() if len(word) >= MIN_TOKEN_LENGTH]


def _split_tags(tags: str) -> List[str]:
    return [tag for tag in (t.strip() for t in tags.lower().split(",")) if tag]


def _overlap_percentage(left: List[str], right: List[str]) -> int:
    """Share of ``left`` items found in ``right``, relative to the longer list.

    Returns:
        Integer percentage from 0 to 100
    """
    longest = max(len(left), len(right))
    if longest == 0:
        return 0

    lookup = set(right)
    common = sum(1 for item in left if item in lookup)
    return (common * 100) // longest


def text_similarity(text1: str, text2: str) -> int:
    """Calculate word overlap between two free texts.

    Comparison is case-insensitive and ignores words of two characters
    or fewer.

    Args:
        text1: First text (title or description)
        text2: Second text

    Returns:
        Similarity from 0 to 100, 0 if either text is empty
    """
    if not text1 or not text2:
        return 0
    return _overlap_percentage(_tokenize(text1), _tokenize(text2))


def tag_similarity(tags1: str, tags2: str) -> int:
    """Calculate overlap between two comma-separated tag lists.

    Args:
        tags1: First tag string, e.g. ``"python, django"``
        tags2: Second tag string

    Returns:
        Similarity from 0 to 100
    """
    return _overlap_percentage(_split_tags(tags1), _split_tags(tags2))
