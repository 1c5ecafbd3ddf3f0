"""
Admin service: whole-record CRUD over the catalogue tables.

One set of helpers covers challenges, badges, rewards, content and
communities. Per-table rules (a unique name, a foreign key that must exist,
a period that must not invert) are passed in by the caller.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tracegreen.core.errors import DuplicateError, InvalidPeriodError, NotFoundError
from tracegreen.models.activity import Activity
from tracegreen.models.badge import Badge, ProfileBadge
from tracegreen.models.challenge import Challenge, ChallengeParticipant
from tracegreen.models.community import Community, CommunityMember
from tracegreen.models.content import Content
from tracegreen.models.profile import Profile
from tracegreen.models.reward import Reward, RewardRedemption

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def get_or_404(db: Session, model: type[ModelT], row_id: int) -> ModelT:
    row = db.get(model, row_id)
    if row is None:
        raise NotFoundError(model.__name__, row_id)
    return row


def list_rows(
    db: Session,
    model: type[ModelT],
    limit: int = 50,
    offset: int = 0,
) -> tuple[int, list[ModelT]]:
    """Return (total, page) ordered newest first."""
    q = db.query(model)
    total = q.count()
    items = (
        q.order_by(model.created_at.desc(), model.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return total, items


def _commit(
    db: Session, model: type, data: dict[str, Any], unique_field: Optional[str]
) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        # A concurrent insert can slip past ensure_unique
        if unique_field and unique_field in data:
            raise DuplicateError(model.__name__, unique_field, data[unique_field]) from exc
        raise


def check_references(
    db: Session, data: dict[str, Any], references: Mapping[str, type]
) -> None:
    """Raise NotFoundError for a foreign-key field that names a missing row."""
    for field, target in references.items():
        value = data.get(field)
        if value is not None:
            get_or_404(db, target, value)


def check_period(row: Any, changes: dict[str, Any]) -> None:
    """Reject a change that would leave end_date before start_date."""
    start = changes.get("start_date", row.start_date)
    end = changes.get("end_date", row.end_date)
    if end < start:
        raise InvalidPeriodError(start, end)


def create_row(
    db: Session,
    model: type[ModelT],
    data: dict[str, Any],
    unique_field: Optional[str] = None,
) -> ModelT:
    row = model(**data)
    db.add(row)
    _commit(db, model, data, unique_field)
    db.refresh(row)
    logger.info("Created %s %s", model.__name__, row.id)
    return row


def update_row(
    db: Session,
    model: type[ModelT],
    row_id: int,
    changes: dict[str, Any],
    unique_field: Optional[str] = None,
    check: Optional[Callable[[Any, dict[str, Any]], None]] = None,
) -> ModelT:
    row = get_or_404(db, model, row_id)
    if check is not None:
        check(row, changes)
    for key, value in changes.items():
        setattr(row, key, value)
    _commit(db, model, changes, unique_field)
    db.refresh(row)
    logger.info("Updated %s %s: %s", model.__name__, row_id, sorted(changes))
    return row


def toggle_flag(db: Session, model: type[ModelT], row_id: int, flag: str) -> ModelT:
    row = get_or_404(db, model, row_id)
    setattr(row, flag, not getattr(row, flag))
    db.commit()
    db.refresh(row)
    return row


def delete_row(db: Session, model: type, row_id: int) -> None:
    row = get_or_404(db, model, row_id)
    db.delete(row)
    db.commit()
    logger.info("Deleted %s %s", model.__name__, row_id)


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------

_COUNTED: dict[str, type] = {
    "profiles": Profile,
    "activities": Activity,
    "challenges": Challenge,
    "badges": Badge,
    "badges_awarded": ProfileBadge,
    "rewards": Reward,
    "redemptions": RewardRedemption,
    "content": Content,
    "communities": Community,
    "challenge_participants": ChallengeParticipant,
    "community_members": CommunityMember,
}


def admin_stats(db: Session) -> dict[str, int]:
    counts = {name: db.query(model).count() for name, model in _COUNTED.items()}
    counts["banned_profiles"] = (
        db.query(Profile).filter(Profile.is_banned == True).count()  # noqa: E712
    )
    return counts


def ensure_unique(
    db: Session,
    model: type,
    field: str,
    value: Any,
    exclude_id: Optional[int] = None,
) -> None:
    """Raise DuplicateError if another row already has `field == value`."""
    q = db.query(model.id).filter(getattr(model, field) == value)
    if exclude_id is not None:
        q = q.filter(model.id != exclude_id)
    if q.first() is not None:
        raise DuplicateError(model.__name__, field, value)
