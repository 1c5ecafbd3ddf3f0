"""
Rewards marketplace: list active rewards and redeem them for points.

Redemption, in one transaction:
  - profile must not be banned, reward must be active
  - points >= points_cost          else InsufficientPointsError
  - stock is NULL (unlimited) or > 0 else RewardOutOfStockError
  - deduct points, decrement finite stock, store a redemption code
"""
from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from tracegreen.core.errors import InsufficientPointsError, NotFoundError, RewardOutOfStockError
from tracegreen.models.reward import Reward, RewardRedemption
from tracegreen.services.profiles import get_active_profile, get_profile

logger = logging.getLogger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits
_CODE_SUFFIX_LEN = 9


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def make_redemption_code(now: datetime) -> str:
    """TG-<epoch millis>-<9 uppercase alphanumerics>."""
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(_CODE_SUFFIX_LEN))
    return f"TG-{int(now.timestamp() * 1000)}-{suffix}"


def list_active_rewards(db: Session, category: Optional[str] = None) -> list[Reward]:
    q = db.query(Reward).filter(Reward.is_active == True)  # noqa: E712
    if category:
        q = q.filter(Reward.category == category)
    return q.order_by(Reward.points_cost.asc(), Reward.id.asc()).all()


def redeem_reward(
    db: Session,
    profile_id: int,
    reward_id: int,
    now: Optional[datetime] = None,
) -> RewardRedemption:
    profile = get_active_profile(db, profile_id)
    reward = db.get(Reward, reward_id)
    if reward is None or not reward.is_active:
        raise NotFoundError("Reward", reward_id)

    if profile.total_points < reward.points_cost:
        raise InsufficientPointsError(available=profile.total_points, required=reward.points_cost)
    if reward.stock_quantity is not None and reward.stock_quantity <= 0:
        raise RewardOutOfStockError(reward.id)

    moment = now or _now()
    redemption = RewardRedemption(
        profile_id=profile.id,
        reward_id=reward.id,
        points_spent=reward.points_cost,
        redemption_code=make_redemption_code(moment),
        status="confirmed",
        expires_at=moment + timedelta(days=reward.expiry_days),
    )
    db.add(redemption)

    profile.total_points -= reward.points_cost
    if reward.stock_quantity is not None:
        reward.stock_quantity -= 1

    db.commit()
    db.refresh(redemption)
    logger.info(
        "Profile %s redeemed reward %s for %s points",
        profile.id, reward.id, reward.points_cost,
    )
    return redemption


def list_redemptions(db: Session, profile_id: int) -> list[tuple[RewardRedemption, Reward]]:
    get_profile(db, profile_id)
    return (
        db.query(RewardRedemption, Reward)
        .join(Reward, Reward.id == RewardRedemption.reward_id)
        .filter(RewardRedemption.profile_id == profile_id)
        .order_by(RewardRedemption.created_at.desc(), RewardRedemption.id.desc())
        .all()
    )
