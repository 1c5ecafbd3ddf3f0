"""
Community router.

GET    /challenges                                  — active challenges
GET    /communities                                 — public communities with member counts
POST   /profiles/{id}/challenges                    — join a challenge
GET    /profiles/{id}/challenges                    — challenges the profile joined
POST   /profiles/{id}/communities                   — join a community
GET    /profiles/{id}/communities                   — communities the profile belongs to
DELETE /profiles/{id}/communities/{community_id}    — leave a community
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from tracegreen.db.base import get_db
from tracegreen.models.challenge import Challenge, ChallengeParticipant
from tracegreen.models.community import Community, CommunityMember
from tracegreen.schemas.admin import ChallengeOut
from tracegreen.schemas.common import ErrorResponse, Page
from tracegreen.schemas.community import (
    JoinChallengeRequest,
    JoinCommunityRequest,
    MembershipListResponse,
    MembershipOut,
    ParticipationListResponse,
    ParticipationOut,
    PublicCommunityOut,
)
from tracegreen.services import community as community_service

router = APIRouter(tags=["community"])

_JOIN_RESPONSES = {
    403: {"model": ErrorResponse, "description": "Profile is banned."},
    404: {"model": ErrorResponse, "description": "Profile not found, or target not open to join."},
    409: {"model": ErrorResponse, "description": "Already joined (`DUPLICATE`)."},
}


def _participation_to_response(p: ChallengeParticipant, c: Challenge) -> ParticipationOut:
    return ParticipationOut(
        id=p.id,
        challenge_id=c.id,
        challenge_title=c.title,
        start_date=c.start_date,
        end_date=c.end_date,
        progress=p.progress,
        completed=p.completed,
        joined_at=p.joined_at,
    )


def _membership_to_response(m: CommunityMember, c: Community) -> MembershipOut:
    return MembershipOut(
        id=m.id,
        community_id=c.id,
        community_name=c.name,
        role=m.role,
        joined_at=m.joined_at,
    )


# ---------------------------------------------------------------------------
# Public listings
# ---------------------------------------------------------------------------

@router.get(
    "/challenges",
    response_model=Page[ChallengeOut],
    summary="List active challenges (latest start first)",
)
def read_challenges(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    total, items = community_service.list_active_challenges(db, limit=limit, offset=offset)
    return Page[ChallengeOut](
        total=total,
        items=[ChallengeOut.model_validate(c) for c in items],
    )


@router.get(
    "/communities",
    response_model=Page[PublicCommunityOut],
    summary="List public communities",
)
def read_communities(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    total, items = community_service.list_public_communities(db, limit=limit, offset=offset)
    counts = community_service.member_counts(db, [c.id for c in items])
    return Page[PublicCommunityOut](
        total=total,
        items=[
            PublicCommunityOut.model_validate(c).model_copy(
                update={"member_count": counts.get(c.id, 0)}
            )
            for c in items
        ],
    )


# ---------------------------------------------------------------------------
# Challenge participation
# ---------------------------------------------------------------------------

@router.post(
    "/profiles/{profile_id}/challenges",
    response_model=ParticipationOut,
    status_code=status.HTTP_201_CREATED,
    summary="Join a challenge",
    responses=_JOIN_RESPONSES,
)
def join_challenge(profile_id: int, payload: JoinChallengeRequest, db: Session = Depends(get_db)):
    """Only active challenges can be joined. Bumps the challenge's `current_participants`."""
    participant = community_service.join_challenge(db, profile_id, payload.challenge_id)
    challenge = db.get(Challenge, participant.challenge_id)
    return _participation_to_response(participant, challenge)


@router.get(
    "/profiles/{profile_id}/challenges",
    response_model=ParticipationListResponse,
    summary="Challenges the profile joined (newest first)",
)
def read_participations(profile_id: int, db: Session = Depends(get_db)):
    rows = community_service.list_participations(db, profile_id)
    return ParticipationListResponse(
        total=len(rows),
        items=[_participation_to_response(p, c) for p, c in rows],
    )


# ---------------------------------------------------------------------------
# Community membership
# ---------------------------------------------------------------------------

@router.post(
    "/profiles/{profile_id}/communities",
    response_model=MembershipOut,
    status_code=status.HTTP_201_CREATED,
    summary="Join a community",
    responses=_JOIN_RESPONSES,
)
def join_community(profile_id: int, payload: JoinCommunityRequest, db: Session = Depends(get_db)):
    member = community_service.join_community(db, profile_id, payload.community_id)
    community = db.get(Community, member.community_id)
    return _membership_to_response(member, community)


@router.get(
    "/profiles/{profile_id}/communities",
    response_model=MembershipListResponse,
    summary="Communities the profile belongs to (newest first)",
)
def read_memberships(profile_id: int, db: Session = Depends(get_db)):
    rows = community_service.list_memberships(db, profile_id)
    return MembershipListResponse(
        total=len(rows),
        items=[_membership_to_response(m, c) for m, c in rows],
    )


@router.delete(
    "/profiles/{profile_id}/communities/{community_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Leave a community",
    responses={404: {"model": ErrorResponse, "description": "Not a member."}},
)
def leave_community(profile_id: int, community_id: int, db: Session = Depends(get_db)):
    community_service.leave_community(db, profile_id, community_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
