from datetime import datetime, date
from decimal import Decimal
from sqlalchemy import Integer, String, Text, Numeric, DateTime, Date, Enum, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from tracegreen.db.base import Base


class ActivityCategory(str, enum.Enum):
    transportation = "transportation"
    energy = "energy"
    food = "food"
    waste = "waste"


class Activity(Base):
    """A logged activity. Immutable once written; carbon_value = quantity x factor."""

    __tablename__ = "carbon_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    category: Mapped[str] = mapped_column(
        Enum(ActivityCategory, name="activity_category_enum"), nullable=False, index=True
    )
    activity_type: Mapped[str] = mapped_column(String(64), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(14, 3), nullable=False)
    unit: Mapped[str] = mapped_column(String(32), nullable=False)
    carbon_value: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, comment="kg CO2e, rounded to 2 decimals"
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    day: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
