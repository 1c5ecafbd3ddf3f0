"""
Profile service: create, read, update and the admin moderation actions.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from tracegreen.core.config import settings
from tracegreen.core.errors import DuplicateError, NotFoundError, ProfileBannedError
from tracegreen.models.profile import Profile

logger = logging.getLogger(__name__)


def get_profile(db: Session, profile_id: int) -> Profile:
    profile = db.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError("Profile", profile_id)
    return profile


def get_active_profile(db: Session, profile_id: int) -> Profile:
    """Like get_profile, but rejects banned profiles."""
    profile = get_profile(db, profile_id)
    if profile.is_banned:
        raise ProfileBannedError(profile.id, profile.ban_reason)
    return profile


def create_profile(
    db: Session,
    email: str,
    full_name: Optional[str] = None,
    location: Optional[str] = None,
    carbon_goal_monthly: Optional[Decimal] = None,
) -> Profile:
    email = email.strip().lower()
    if db.query(Profile.id).filter(Profile.email == email).first() is not None:
        raise DuplicateError("Profile", "email", email)

    profile = Profile(
        email=email,
        full_name=full_name,
        location=location,
        total_points=0,
        current_level=1,
        current_streak=0,
        longest_streak=0,
        carbon_goal_monthly=(
            carbon_goal_monthly if carbon_goal_monthly is not None
            else settings.DEFAULT_MONTHLY_GOAL
        ),
        is_admin=False,
        is_banned=False,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Created profile %s", profile.id)
    return profile


def update_profile(db: Session, profile: Profile, changes: dict) -> Profile:
    for key, value in changes.items():
        setattr(profile, key, value)
    db.commit()
    db.refresh(profile)
    return profile


def list_profiles(
    db: Session,
    search: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[int, list[Profile]]:
    q = db.query(Profile)
    if search:
        pattern = f"%{search.strip()}%"
        q = q.filter(Profile.email.ilike(pattern) | Profile.full_name.ilike(pattern))
    total = q.count()
    items = q.order_by(Profile.created_at.desc(), Profile.id.desc()).offset(offset).limit(limit).all()
    return total, items


# ---------------------------------------------------------------------------
# Moderation
# ---------------------------------------------------------------------------

def ban_profile(db: Session, profile_id: int, reason: str) -> Profile:
    profile = get_profile(db, profile_id)
    profile.is_banned = True
    profile.ban_reason = reason
    db.commit()
    db.refresh(profile)
    logger.info("Banned profile %s", profile_id)
    return profile


def unban_profile(db: Session, profile_id: int) -> Profile:
    profile = get_profile(db, profile_id)
    profile.is_banned = False
    profile.ban_reason = None
    db.commit()
    db.refresh(profile)
    logger.info("Unbanned profile %s", profile_id)
    return profile


def set_admin(db: Session, profile_id: int, is_admin: bool) -> Profile:
    profile = get_profile(db, profile_id)
    profile.is_admin = is_admin
    db.commit()
    db.refresh(profile)
    return profile


def delete_profile(db: Session, profile_id: int) -> None:
    profile = get_profile(db, profile_id)
    db.delete(profile)
    db.commit()
    logger.info("Deleted profile %s", profile_id)
