"""
Community schemas.

GET    /challenges                              → Page[ChallengeOut]
GET    /communities                             → Page[PublicCommunityOut]
POST   /profiles/{id}/challenges                → JoinChallengeRequest → ParticipationOut
GET    /profiles/{id}/challenges                → ParticipationListResponse
POST   /profiles/{id}/communities               → JoinCommunityRequest → MembershipOut
GET    /profiles/{id}/communities               → MembershipListResponse
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from tracegreen.schemas.admin import CommunityOut


class PublicCommunityOut(CommunityOut):
    member_count: int = 0


class JoinChallengeRequest(BaseModel):
    challenge_id: int = Field(gt=0)


class ParticipationOut(BaseModel):
    id: int
    challenge_id: int
    challenge_title: str
    start_date: date
    end_date: date
    progress: Decimal
    completed: bool
    joined_at: Optional[datetime] = None


class ParticipationListResponse(BaseModel):
    total: int
    items: list[ParticipationOut]


class JoinCommunityRequest(BaseModel):
    community_id: int = Field(gt=0)


class MembershipOut(BaseModel):
    id: int
    community_id: int
    community_name: str
    role: str
    joined_at: Optional[datetime] = None


class MembershipListResponse(BaseModel):
    total: int
    items: list[MembershipOut]
