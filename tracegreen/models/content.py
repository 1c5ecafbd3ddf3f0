from datetime import datetime
from sqlalchemy import Integer, String, Text, Boolean, DateTime, JSON, func
from sqlalchemy.orm import Mapped, mapped_column

from tracegreen.db.base import Base


class Content(Base):
    """Educational article shown in the learning feed."""

    __tablename__ = "educational_content"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="general")
    difficulty: Mapped[str] = mapped_column(String(32), nullable=False, default="beginner")
    estimated_read_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
