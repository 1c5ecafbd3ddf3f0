"""
Learning feed: published educational content, featured articles first.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from tracegreen.core.errors import NotFoundError
from tracegreen.models.content import Content


def list_published_content(
    db: Session,
    category: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[int, list[Content]]:
    q = db.query(Content).filter(Content.is_published == True)  # noqa: E712
    if category:
        q = q.filter(Content.category == category)
    total = q.count()
    items = (
        q.order_by(Content.is_featured.desc(), Content.created_at.desc(), Content.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return total, items


def get_published_content(db: Session, content_id: int) -> Content:
    content = db.get(Content, content_id)
    if content is None or not content.is_published:
        raise NotFoundError("Content", content_id)
    return content
