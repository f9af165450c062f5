"""Challenge Scoring — theme-gated weighted score for judged entries.

Invariants:
    - All functions are pure (no IO, no async, no DB)
    - SCORE_WEIGHTS sum to exactly 1.0
    - theme < THEME_DISQUALIFY_THRESHOLD -> None (disqualified, never 0)
    - theme < THEME_GATE_THRESHOLD -> min(weighted, THEME_GATE_MAX_SCORE)
    - Both thresholds are strict less-than: theme == 2 is NOT disqualified but IS capped

Design Decisions:
    - None as the disqualification marker: callers must branch on it explicitly,
      a numeric sentinel could be summed or sorted by mistake
    - Input range (0–10) is a judging convention and is not validated here
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from gencore.core.domain_types import WeightedScore


SCORE_WEIGHTS: dict[str, float] = {
    "theme": 0.5,
    "aesthetic": 0.2,
    "humor": 0.15,
    "wittiness": 0.15,
}

THEME_DISQUALIFY_THRESHOLD = 2
THEME_GATE_THRESHOLD = 4
THEME_GATE_MAX_SCORE = 5.0


@dataclass(frozen=True)
class Score:
    """Four judged dimensions, each conventionally 0–10."""
    theme: float
    aesthetic: float
    humor: float
    wittiness: float


@dataclass(frozen=True)
class RankedEntry:
    """An entry that survived disqualification, with its rank (1-based)."""
    rank: int
    weighted_score: WeightedScore
    entry: Any


def is_disqualified(score: Score) -> bool:
    return score.theme < THEME_DISQUALIFY_THRESHOLD


def calculate_weighted_score(score: Score) -> WeightedScore | None:
    """Weighted rank value, or None when the entry is disqualified."""
    if is_disqualified(score):
        return None

    weighted = (
        score.theme * SCORE_WEIGHTS["theme"]
        + score.aesthetic * SCORE_WEIGHTS["aesthetic"]
        + score.humor * SCORE_WEIGHTS["humor"]
        + score.wittiness * SCORE_WEIGHTS["wittiness"]
    )

    if score.theme < THEME_GATE_THRESHOLD:
        return WeightedScore(min(weighted, THEME_GATE_MAX_SCORE))

    return WeightedScore(weighted)


def rank_entries(
    entries: Iterable[tuple[Any, Score]],
) -> tuple[list[RankedEntry], list[Any]]:
    """Rank (entry, score) pairs by weighted score, highest first.

    Ties keep input order. Returns (ranked, disqualified).
    """
    qualified: list[tuple[WeightedScore, Any]] = []
    disqualified: list[Any] = []
    for entry, score in entries:
        weighted = calculate_weighted_score(score)
        if weighted is None:
            disqualified.append(entry)
        else:
            qualified.append((weighted, entry))

    ordered: Sequence[tuple[WeightedScore, Any]] = sorted(
        qualified, key=lambda pair: pair[0], reverse=True,
    )
    ranked = [
        RankedEntry(rank=i + 1, weighted_score=weighted, entry=entry)
        for i, (weighted, entry) in enumerate(ordered)
    ]
    return ranked, disqualified
