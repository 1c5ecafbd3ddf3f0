from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from tracegreen.models.profile import Profile


@dataclass
class LeaderboardEntry:
    rank: int
    profile_id: int
    full_name: Optional[str]
    total_points: int
    current_level: int
    current_streak: int


def get_leaderboard(db: Session, limit: int = 10) -> list[LeaderboardEntry]:
    """Non-banned profiles by total points desc; ties go to the older id."""
    rows = (
        db.query(Profile)
        .filter(Profile.is_banned == False)  # noqa: E712
        .order_by(Profile.total_points.desc(), Profile.id.asc())
        .limit(limit)
        .all()
    )
    return [
        LeaderboardEntry(
            rank=i,
            profile_id=p.id,
            full_name=p.full_name,
            total_points=p.total_points,
            current_level=p.current_level,
            current_streak=p.current_streak,
        )
        for i, p in enumerate(rows, start=1)
    ]
