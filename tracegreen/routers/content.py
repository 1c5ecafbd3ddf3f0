"""
Learning feed router.

GET /content        — published articles, featured first
GET /content/{id}   — one published article
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tracegreen.db.base import get_db
from tracegreen.schemas.admin import ContentOut
from tracegreen.schemas.common import ErrorResponse, Page
from tracegreen.services.content import get_published_content, list_published_content

router = APIRouter(prefix="/content", tags=["content"])


@router.get("", response_model=Page[ContentOut], summary="Published content, featured first")
def read_content(
    category: Optional[str] = Query(default=None, description="Filter by content category."),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    total, items = list_published_content(db, category=category, limit=limit, offset=offset)
    return Page[ContentOut](
        total=total,
        items=[ContentOut.model_validate(c) for c in items],
    )


@router.get(
    "/{content_id}",
    response_model=ContentOut,
    summary="Read a published article",
    responses={
        404: {"model": ErrorResponse, "description": "Missing or unpublished."},
    },
)
def read_one(content_id: int, db: Session = Depends(get_db)):
    return ContentOut.model_validate(get_published_content(db, content_id))
