from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:  # pragma: no cover
    from .place import Place


class OpeningHour(Base):
    """One row per place per day; ``day_of_week`` 0 = Sunday … 6 = Saturday."""

    __tablename__ = "opening_hours"
    __table_args__ = (
        UniqueConstraint("place_id", "day_of_week", name="uq_opening_hours_place_day"),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="day_of_week_range"),
    )

    place_id: Mapped[int] = mapped_column(ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    open_time: Mapped[str | None] = mapped_column(String(5))
    close_time: Mapped[str | None] = mapped_column(String(5))
    is_closed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_by_appointment: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str | None] = mapped_column(String(255))

    place: Mapped["Place"] = relationship(back_populates="opening_hours")
