"""
Edit distance and normalized string similarity.

Unit-cost Levenshtein distance comes from RapidFuzz; ``similarity``
normalizes it by the longer string.
"""

from rapidfuzz.distance import Levenshtein


def distance(a: str, b: str) -> int:
    """
    Levenshtein distance between two strings.

    Counts single-character insertions, deletions and substitutions.

    Example:
        >>> distance("kitten", "sitting")
        3
    """
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """
    Similarity in [0, 1] derived from edit distance.

    Two empty strings are identical.

    Example:
        >>> similarity("stats", "stat")
        0.8
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - distance(a, b) / longest
