"""
Rewards router.

GET  /rewards                           — active rewards, cheapest first
POST /profiles/{id}/redemptions         — redeem a reward for points
GET  /profiles/{id}/redemptions         — redemption history
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tracegreen.db.base import get_db
from tracegreen.models.reward import Reward, RewardRedemption
from tracegreen.schemas.common import ErrorResponse
from tracegreen.schemas.reward import (
    RedemptionListResponse,
    RedemptionOut,
    RedemptionRequest,
    RewardListResponse,
    RewardOut,
)
from tracegreen.services.rewards import list_active_rewards, list_redemptions, redeem_reward

router = APIRouter(tags=["rewards"])


def _redemption_to_response(r: RewardRedemption, reward: Reward) -> RedemptionOut:
    return RedemptionOut(
        id=r.id,
        reward_id=r.reward_id,
        reward_title=reward.title,
        points_spent=r.points_spent,
        redemption_code=r.redemption_code,
        status=r.status,
        expires_at=r.expires_at,
        created_at=r.created_at,
    )


@router.get(
    "/rewards",
    response_model=RewardListResponse,
    summary="List active rewards (cheapest first)",
)
def read_rewards(
    category: Optional[str] = Query(default=None, description="Filter by reward category."),
    db: Session = Depends(get_db),
):
    items = list_active_rewards(db, category=category)
    return RewardListResponse(
        total=len(items),
        items=[RewardOut.model_validate(r) for r in items],
    )


@router.post(
    "/profiles/{profile_id}/redemptions",
    response_model=RedemptionOut,
    status_code=status.HTTP_201_CREATED,
    summary="Redeem a reward",
    responses={
        403: {"model": ErrorResponse, "description": "Profile is banned."},
        404: {"model": ErrorResponse, "description": "Profile or active reward not found."},
        409: {"model": ErrorResponse, "description": "`INSUFFICIENT_POINTS` or `REWARD_OUT_OF_STOCK`."},
    },
)
def redeem(profile_id: int, payload: RedemptionRequest, db: Session = Depends(get_db)):
    """
    Deduct `points_cost` from the profile, decrement finite stock and issue a
    redemption code `TG-<millis>-<9 chars>` valid for the reward's `expiry_days`.
    """
    redemption = redeem_reward(db, profile_id=profile_id, reward_id=payload.reward_id)
    reward = db.get(Reward, redemption.reward_id)
    return _redemption_to_response(redemption, reward)


@router.get(
    "/profiles/{profile_id}/redemptions",
    response_model=RedemptionListResponse,
    summary="Redemption history (newest first)",
)
def read_redemptions(profile_id: int, db: Session = Depends(get_db)):
    rows = list_redemptions(db, profile_id)
    return RedemptionListResponse(
        total=len(rows),
        items=[_redemption_to_response(r, reward) for r, reward in rows],
    )
