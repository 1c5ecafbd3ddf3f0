"""
Community service: public challenges and communities, and the profile's
participation in them.

Joining a challenge, in one transaction:
  - profile must not be banned, challenge must be active
  - one participation row per (challenge, profile)   else DuplicateError
  - current_participants += 1

Joining a community follows the same rules against public communities and
keeps no counter; member counts are read from community_members.
"""
from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tracegreen.core.errors import DuplicateError, NotFoundError
from tracegreen.models.challenge import Challenge, ChallengeParticipant
from tracegreen.models.community import Community, CommunityMember
from tracegreen.services.profiles import get_active_profile, get_profile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Challenges
# ---------------------------------------------------------------------------

def list_active_challenges(
    db: Session, limit: int = 50, offset: int = 0
) -> tuple[int, list[Challenge]]:
    """Active challenges, latest start first."""
    q = db.query(Challenge).filter(Challenge.is_active == True)  # noqa: E712
    total = q.count()
    items = (
        q.order_by(Challenge.start_date.desc(), Challenge.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return total, items


def join_challenge(db: Session, profile_id: int, challenge_id: int) -> ChallengeParticipant:
    profile = get_active_profile(db, profile_id)
    challenge = db.get(Challenge, challenge_id)
    if challenge is None or not challenge.is_active:
        raise NotFoundError("Challenge", challenge_id)

    already = (
        db.query(ChallengeParticipant.id)
        .filter(
            ChallengeParticipant.challenge_id == challenge.id,
            ChallengeParticipant.profile_id == profile.id,
        )
        .first()
    )
    if already is not None:
        raise DuplicateError("ChallengeParticipant", "challenge_id", challenge.id)

    participant = ChallengeParticipant(challenge_id=challenge.id, profile_id=profile.id)
    db.add(participant)
    challenge.current_participants = Challenge.current_participants + 1
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateError("ChallengeParticipant", "challenge_id", challenge_id) from exc
    db.refresh(participant)
    logger.info("Profile %s joined challenge %s", profile.id, challenge.id)
    return participant


def list_participations(
    db: Session, profile_id: int
) -> list[tuple[ChallengeParticipant, Challenge]]:
    get_profile(db, profile_id)
    return (
        db.query(ChallengeParticipant, Challenge)
        .join(Challenge, Challenge.id == ChallengeParticipant.challenge_id)
        .filter(ChallengeParticipant.profile_id == profile_id)
        .order_by(ChallengeParticipant.joined_at.desc(), ChallengeParticipant.id.desc())
        .all()
    )


# ---------------------------------------------------------------------------
# Communities
# ---------------------------------------------------------------------------

def member_counts(db: Session, community_ids: list[int]) -> dict[int, int]:
    if not community_ids:
        return {}
    rows = (
        db.query(CommunityMember.community_id, func.count(CommunityMember.id))
        .filter(CommunityMember.community_id.in_(community_ids))
        .group_by(CommunityMember.community_id)
        .all()
    )
    return {community_id: count for community_id, count in rows}


def list_public_communities(
    db: Session, limit: int = 50, offset: int = 0
) -> tuple[int, list[Community]]:
    """Public communities, newest first."""
    q = db.query(Community).filter(Community.is_public == True)  # noqa: E712
    total = q.count()
    items = (
        q.order_by(Community.created_at.desc(), Community.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return total, items


def join_community(db: Session, profile_id: int, community_id: int) -> CommunityMember:
    profile = get_active_profile(db, profile_id)
    community = db.get(Community, community_id)
    if community is None or not community.is_public:
        raise NotFoundError("Community", community_id)

    if _membership(db, profile.id, community.id) is not None:
        raise DuplicateError("CommunityMember", "community_id", community.id)

    member = CommunityMember(community_id=community.id, profile_id=profile.id)
    db.add(member)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateError("CommunityMember", "community_id", community_id) from exc
    db.refresh(member)
    logger.info("Profile %s joined community %s", profile.id, community.id)
    return member


def leave_community(db: Session, profile_id: int, community_id: int) -> None:
    get_profile(db, profile_id)
    member = _membership(db, profile_id, community_id)
    if member is None:
        raise NotFoundError("CommunityMember", community_id)
    db.delete(member)
    db.commit()
    logger.info("Profile %s left community %s", profile_id, community_id)


def list_memberships(
    db: Session, profile_id: int
) -> list[tuple[CommunityMember, Community]]:
    get_profile(db, profile_id)
    return (
        db.query(CommunityMember, Community)
        .join(Community, Community.id == CommunityMember.community_id)
        .filter(CommunityMember.profile_id == profile_id)
        .order_by(CommunityMember.joined_at.desc(), CommunityMember.id.desc())
        .all()
    )


def _membership(db: Session, profile_id: int, community_id: int):
    return (
        db.query(CommunityMember)
        .filter(
            CommunityMember.community_id == community_id,
            CommunityMember.profile_id == profile_id,
        )
        .first()
    )


# ---------------------------------------------------------------------------
# Moderation
# ---------------------------------------------------------------------------

def list_members(db: Session, community_id: int) -> list[CommunityMember]:
    if db.get(Community, community_id) is None:
        raise NotFoundError("Community", community_id)
    return (
        db.query(CommunityMember)
        .filter(CommunityMember.community_id == community_id)
        .order_by(CommunityMember.joined_at.desc(), CommunityMember.id.desc())
        .all()
    )


def remove_member(db: Session, community_id: int, profile_id: int) -> None:
    member = _membership(db, profile_id, community_id)
    if member is None:
        raise NotFoundError("CommunityMember", profile_id)
    db.delete(member)
    db.commit()
    logger.info("Removed profile %s from community %s", profile_id, community_id)
