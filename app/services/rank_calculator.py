"""
Standard competition ranking ("1224") for leaderboard scores.
"""
from typing import Dict, Iterable, List, Tuple

ScorePair = Tuple[str, int]


def sort_key(entry: ScorePair) -> Tuple[int, str]:
    """Score descending, then id ascending so repeated runs order ties identically."""
    entry_id, score = entry
    return -score, entry_id


def calculate_ranks(entries: Iterable[ScorePair]) -> Dict[str, int]:
    """
    Compute id -> rank for one event's (id, score) pairs.

    Tied scores share the lower rank and the next distinct score takes its
    1-based position, e.g. scores [100, 90, 90, 80] -> ranks [1, 2, 2, 4].
    Input may be in any order. Empty input yields an empty mapping.
    """
    ordered: List[ScorePair] = sorted(_checked(entries), key=sort_key)

    ranks: Dict[str, int] = {}
    current_rank = 1
    previous_score = None

    for position, (entry_id, score) in enumerate(ordered):
        if previous_score is not None and score != previous_score:
            current_rank = position + 1
        ranks[entry_id] = current_rank
        previous_score = score

    return ranks


def _checked(entries: Iterable[ScorePair]) -> List[ScorePair]:
    seen = set()
    checked = []
    for entry_id, score in entries:
        if isinstance(score, bool) or not isinstance(score, int) or score < 0:
            raise ValueError(f"Invalid score {score!r} for entry {entry_id}")
        if entry_id in seen:
            raise ValueError(f"Duplicate entry id {entry_id}")
        seen.add(entry_id)
        checked.append((entry_id, score))
    return checked
