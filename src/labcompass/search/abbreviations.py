"""
Abbreviation expansion for directory queries.

Students type "cs", "ml" or "stats"; department names, lab names and
research areas spell those out. Expansion produces every combination of
original and expanded words so the scorer can match either form.
"""

from labcompass.shared.utils import normalize_query, split_words

# Short token -> full form. Data, not logic: extend freely.
ABBREVIATIONS: dict[str, str] = {
    "stats": "statistics",
    "stat": "statistics",
    "math": "mathematics",
    "maths": "mathematics",
    "cs": "computer science",
    "compsci": "computer science",
    "ds": "data science",
    "econ": "economics",
    "bio": "biology",
    "chem": "chemistry",
    "phys": "physics",
    "ee": "electrical engineering",
    "ece": "electrical and computer engineering",
    "me": "mechanical engineering",
    "ml": "machine learning",
    "ai": "artificial intelligence",
    "nlp": "natural language processing",
    "cv": "computer vision",
    "hci": "human computer interaction",
    "rl": "reinforcement learning",
    "dl": "deep learning",
    "pl": "programming languages",
    "os": "operating systems",
    "db": "databases",
    "hpc": "high performance computing",
    "qm": "quantum mechanics",
    "prof": "professor",
    "asst": "assistant",
    "assoc": "associate",
}


def _expand_words(words: list[str]) -> set[str]:
    if not words:
        return {""}

    head, rest = words[0], words[1:]
    head_forms = {head}
    if head in ABBREVIATIONS:
        head_forms.add(ABBREVIATIONS[head])

    tails = _expand_words(rest)
    return {f"{form} {tail}".strip() for form in head_forms for tail in tails}


def expand(query: str) -> set[str]:
    """
    All plausible full-text forms of a query.

    The normalized original is always included. For multi-word queries this
    is the cross product of {word, expansion} at every position.

    Example:
        >>> sorted(expand("ml lab"))
        ['machine learning lab', 'ml lab']
    """
    normalized = normalize_query(query)
    words = split_words(normalized)
    if not words:
        return {normalized}

    expansions = _expand_words(words)
    expansions.add(normalized)
    return expansions
