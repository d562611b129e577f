from __future__ import annotations

from typing import List, Optional

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Specialty(Base):
    __tablename__ = "specialties"

    name: Mapped[str] = mapped_column(String(128, collation="NOCASE"), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(512))
    parent_id: Mapped[int | None] = mapped_column(ForeignKey("specialties.id", ondelete="SET NULL"), index=True)

    parent: Mapped[Optional["Specialty"]] = relationship(
        back_populates="subcategories", remote_side="Specialty.id", lazy="raise_on_sql"
    )
    subcategories: Mapped[List["Specialty"]] = relationship(
        back_populates="parent", passive_deletes=True, lazy="raise_on_sql"
    )

    @property
    def is_main_category(self) -> bool:
        return self.parent_id is None


class PlaceSpecialty(Base):
    __tablename__ = "place_specialties"
    __table_args__ = (UniqueConstraint("place_id", "specialty_id", name="uq_place_specialties_place_specialty"),)

    place_id: Mapped[int] = mapped_column(ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    specialty_id: Mapped[int] = mapped_column(ForeignKey("specialties.id", ondelete="CASCADE"), nullable=False, index=True)


class PlaceTypeSpecialty(Base):
    __tablename__ = "place_type_specialties"
    __table_args__ = (UniqueConstraint("type_id", "specialty_id", name="uq_place_type_specialties_type_specialty"),)

    type_id: Mapped[int] = mapped_column(ForeignKey("place_types.id", ondelete="CASCADE"), nullable=False, index=True)
    specialty_id: Mapped[int] = mapped_column(ForeignKey("specialties.id", ondelete="CASCADE"), nullable=False, index=True)
