from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tracegreen.db.base import get_db
from tracegreen.schemas.profile import LeaderboardEntryOut
from tracegreen.services.leaderboard import get_leaderboard

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get(
    "",
    response_model=list[LeaderboardEntryOut],
    summary="Top profiles by points",
)
def leaderboard(
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Banned profiles are excluded. Ties on points go to the older profile."""
    return [LeaderboardEntryOut.model_validate(e) for e in get_leaderboard(db, limit)]
