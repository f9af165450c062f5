"""Scoring Routes — weighted score and ranking for judged challenge entries.

Invariants:
    - Disqualified entries (theme < 2) never receive a rank
    - weighted_score is null exactly when disqualified is true
"""

from fastapi import APIRouter

from gencore.core.scoring import calculate_weighted_score, rank_entries
from gencore.schemas.scoring import (
    JudgeScore,
    RankedEntryResponse,
    RankRequest,
    RankResponse,
    WeightedScoreResponse,
)

router = APIRouter(prefix="/api/v1/scores", tags=["scoring"])


@router.post("/weighted", response_model=WeightedScoreResponse)
async def weighted_score(body: JudgeScore):
    weighted = calculate_weighted_score(body.to_score())
    return WeightedScoreResponse(
        weighted_score=weighted, disqualified=weighted is None,
    )


@router.post("/rank", response_model=RankResponse)
async def rank(body: RankRequest):
    ranked, disqualified = rank_entries(
        (item.entry_id, item.score.to_score()) for item in body.entries
    )
    return RankResponse(
        ranked=[
            RankedEntryResponse(
                rank=r.rank, entry_id=r.entry, weighted_score=r.weighted_score,
            )
            for r in ranked
        ],
        disqualified=disqualified,
    )
