"""Scoring Schemas — judged score payloads for the scoring endpoints.

Invariants:
    - All four dimensions required; range is NOT validated (caller responsibility)
    - Disqualification is explicit: weighted_score None AND disqualified True

Design Decisions:
    - No ge/le bounds on dimensions: the scoring function is total over floats and
      the 0–10 range is a judging convention
"""

from pydantic import BaseModel

from gencore.core.scoring import Score


class JudgeScore(BaseModel):
    """Judged score as produced by the review call."""
    theme: float
    aesthetic: float
    humor: float
    wittiness: float

    def to_score(self) -> Score:
        return Score(
            theme=self.theme, aesthetic=self.aesthetic,
            humor=self.humor, wittiness=self.wittiness,
        )


class WeightedScoreResponse(BaseModel):
    weighted_score: float | None
    disqualified: bool


class ScoredEntry(BaseModel):
    """One challenge entry awaiting ranking."""
    entry_id: str
    score: JudgeScore


class RankRequest(BaseModel):
    entries: list[ScoredEntry]


class RankedEntryResponse(BaseModel):
    rank: int
    entry_id: str
    weighted_score: float


class RankResponse(BaseModel):
    ranked: list[RankedEntryResponse]
    disqualified: list[str]
