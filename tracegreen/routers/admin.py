"""
Admin router.

Catalogue tables (challenges, badges, rewards, content, communities), each with:
  GET    /admin/{resource}               — paginated list, newest first
  POST   /admin/{resource}               — create
  GET    /admin/{resource}/{id}          — read
  PATCH  /admin/{resource}/{id}          — partial update
  PATCH  /admin/{resource}/{id}/toggle   — flip the visibility flag
  DELETE /admin/{resource}/{id}          — delete

Community members:
  GET    /admin/communities/{id}/members
  DELETE /admin/communities/{id}/members/{profile_id}

Users:
  GET    /admin/users                    — list / search profiles
  POST   /admin/users/{id}/ban           — ban with a reason
  POST   /admin/users/{id}/unban
  PUT    /admin/users/{id}/admin         — grant / revoke admin
  DELETE /admin/users/{id}

Other:
  DELETE /admin/activities/{id}          — the only way an activity record is removed
  GET    /admin/stats                    — row counts for the overview page
"""
from typing import Any, Callable, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from tracegreen.db.base import get_db
from tracegreen.models.activity import Activity
from tracegreen.models.badge import Badge
from tracegreen.models.challenge import Challenge
from tracegreen.models.community import Community
from tracegreen.models.content import Content
from tracegreen.models.profile import Profile
from tracegreen.models.reward import Reward
from tracegreen.routers.profiles import profile_to_response
from tracegreen.schemas.admin import (
    AdminFlagRequest,
    AdminStatsResponse,
    BadgeCreate,
    BadgeOut,
    BadgeUpdate,
    BanRequest,
    ChallengeCreate,
    ChallengeOut,
    ChallengeUpdate,
    CommunityCreate,
    CommunityMemberOut,
    CommunityOut,
    CommunityUpdate,
    ContentCreate,
    ContentOut,
    ContentUpdate,
    RewardCreate,
    RewardUpdate,
)
from tracegreen.schemas.common import Page
from tracegreen.schemas.profile import ProfileListResponse, ProfileOut
from tracegreen.schemas.reward import RewardOut
from tracegreen.services import admin as admin_service
from tracegreen.services import community as community_service
from tracegreen.services import profiles as profile_service

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# Catalogue CRUD
# ---------------------------------------------------------------------------

def _clean_changes(payload: BaseModel, nullable: frozenset[str]) -> dict:
    """Fields the client sent; explicit nulls are kept only for nullable columns."""
    changes = payload.model_dump(exclude_unset=True)
    return {k: v for k, v in changes.items() if v is not None or k in nullable}


def _crud_router(
    resource: str,
    model: type,
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    out_schema: type[BaseModel],
    toggle_field: str,
    nullable: frozenset[str] = frozenset(),
    unique_field: Optional[str] = None,
    references: Optional[dict[str, type]] = None,
    check: Optional[Callable[[Any, dict], None]] = None,
) -> APIRouter:
    crud = APIRouter(prefix=f"/{resource}")
    label = model.__name__

    @crud.get("", response_model=Page[out_schema], summary=f"List {resource}")
    def list_items(
        limit: int = Query(default=50, ge=1, le=200),
        offset: int = Query(default=0, ge=0),
        db: Session = Depends(get_db),
    ):
        total, items = admin_service.list_rows(db, model, limit=limit, offset=offset)
        return Page[out_schema](
            total=total,
            items=[out_schema.model_validate(i) for i in items],
        )

    @crud.post(
        "",
        response_model=out_schema,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {label}",
    )
    def create_item(payload: create_schema, db: Session = Depends(get_db)):
        data = payload.model_dump()
        if unique_field:
            admin_service.ensure_unique(db, model, unique_field, data[unique_field])
        if references:
            admin_service.check_references(db, data, references)
        return out_schema.model_validate(
            admin_service.create_row(db, model, data, unique_field=unique_field)
        )

    @crud.get("/{item_id}", response_model=out_schema, summary=f"Read {label}")
    def read_item(item_id: int, db: Session = Depends(get_db)):
        return out_schema.model_validate(admin_service.get_or_404(db, model, item_id))

    @crud.patch("/{item_id}", response_model=out_schema, summary=f"Update {label}")
    def update_item(item_id: int, payload: update_schema, db: Session = Depends(get_db)):
        changes = _clean_changes(payload, nullable)
        if unique_field and unique_field in changes:
            admin_service.get_or_404(db, model, item_id)
            admin_service.ensure_unique(
                db, model, unique_field, changes[unique_field], exclude_id=item_id
            )
        if references:
            admin_service.check_references(db, changes, references)
        return out_schema.model_validate(
            admin_service.update_row(
                db, model, item_id, changes, unique_field=unique_field, check=check
            )
        )

    @crud.patch(
        "/{item_id}/toggle",
        response_model=out_schema,
        summary=f"Flip {label}.{toggle_field}",
    )
    def toggle_item(item_id: int, db: Session = Depends(get_db)):
        return out_schema.model_validate(
            admin_service.toggle_flag(db, model, item_id, toggle_field)
        )

    @crud.delete(
        "/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        summary=f"Delete {label}",
    )
    def delete_item(item_id: int, db: Session = Depends(get_db)):
        admin_service.delete_row(db, model, item_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return crud


router.include_router(_crud_router(
    "challenges", Challenge, ChallengeCreate, ChallengeUpdate, ChallengeOut,
    toggle_field="is_active",
    check=admin_service.check_period,
))
router.include_router(_crud_router(
    "badges", Badge, BadgeCreate, BadgeUpdate, BadgeOut,
    toggle_field="is_active",
    unique_field="name",
))
router.include_router(_crud_router(
    "rewards", Reward, RewardCreate, RewardUpdate, RewardOut,
    toggle_field="is_active",
    nullable=frozenset({"stock_quantity", "partner_name", "terms_conditions"}),
))
router.include_router(_crud_router(
    "content", Content, ContentCreate, ContentUpdate, ContentOut,
    toggle_field="is_published",
    nullable=frozenset({"estimated_read_time"}),
))
router.include_router(_crud_router(
    "communities", Community, CommunityCreate, CommunityUpdate, CommunityOut,
    toggle_field="is_public",
    references={"creator_id": Profile},
))


@router.get(
    "/communities/{community_id}/members",
    response_model=list[CommunityMemberOut],
    summary="List community members (newest first)",
)
def list_community_members(community_id: int, db: Session = Depends(get_db)):
    return [
        CommunityMemberOut.model_validate(m)
        for m in community_service.list_members(db, community_id)
    ]


@router.delete(
    "/communities/{community_id}/members/{profile_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remove a member from a community",
)
def remove_community_member(community_id: int, profile_id: int, db: Session = Depends(get_db)):
    community_service.remove_member(db, community_id, profile_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@router.get("/users", response_model=ProfileListResponse, summary="List / search profiles")
def list_users(
    search: Optional[str] = Query(default=None, description="Substring of email or name."),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    total, items = profile_service.list_profiles(db, search=search, limit=limit, offset=offset)
    return ProfileListResponse(total=total, items=[profile_to_response(p) for p in items])


@router.post("/users/{profile_id}/ban", response_model=ProfileOut, summary="Ban a profile")
def ban_user(profile_id: int, payload: BanRequest, db: Session = Depends(get_db)):
    return profile_to_response(profile_service.ban_profile(db, profile_id, payload.reason))


@router.post("/users/{profile_id}/unban", response_model=ProfileOut, summary="Lift a ban")
def unban_user(profile_id: int, db: Session = Depends(get_db)):
    return profile_to_response(profile_service.unban_profile(db, profile_id))


@router.put("/users/{profile_id}/admin", response_model=ProfileOut, summary="Grant or revoke admin")
def set_user_admin(profile_id: int, payload: AdminFlagRequest, db: Session = Depends(get_db)):
    return profile_to_response(profile_service.set_admin(db, profile_id, payload.is_admin))


@router.delete(
    "/users/{profile_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a profile",
)
def delete_user(profile_id: int, db: Session = Depends(get_db)):
    profile_service.delete_profile(db, profile_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Activities / overview
# ---------------------------------------------------------------------------

@router.delete(
    "/activities/{activity_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an activity record",
)
def delete_activity(activity_id: int, db: Session = Depends(get_db)):
    """Points and streak counters are not rolled back."""
    admin_service.delete_row(db, Activity, activity_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats", response_model=AdminStatsResponse, summary="Row counts for the overview")
def stats(db: Session = Depends(get_db)):
    return AdminStatsResponse(**admin_service.admin_stats(db))
