from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:  # pragma: no cover
    from .analytics import SpecialtyRequest
    from .opening_hours import OpeningHour
    from .specialty import Specialty

PRICE_RANGES = ("£", "££", "£££", "££££")


class PlaceType(Base):
    __tablename__ = "place_types"

    name: Mapped[str] = mapped_column(String(128), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(String(512))

    places: Mapped[List["Place"]] = relationship(back_populates="type", lazy="raise_on_sql", passive_deletes=True)
    specialties: Mapped[List["Specialty"]] = relationship(secondary="place_type_specialties", lazy="selectin")


class Place(Base):
    __tablename__ = "places"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(512), nullable=False)
    address_street: Mapped[str | None] = mapped_column(String(255))
    address_area: Mapped[str | None] = mapped_column(String(128))
    address_city: Mapped[str | None] = mapped_column(String(128), default="Edinburgh")
    address_postcode: Mapped[str | None] = mapped_column(String(16), index=True)
    phone: Mapped[str | None] = mapped_column(String(32))
    second_phone: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(String(512))
    description: Mapped[str | None] = mapped_column(Text)
    # Derived from the linked specialties / structured opening hours.
    specialties_text: Mapped[str | None] = mapped_column("specialties", Text)
    opening_hours_text: Mapped[str | None] = mapped_column("opening_hours", Text)
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)
    type_id: Mapped[int] = mapped_column(ForeignKey("place_types.id", ondelete="RESTRICT"), nullable=False, index=True)
    price_range: Mapped[str | None] = mapped_column(String(8))
    has_disabled_access: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    has_toilet_facilities: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    trade_associations: Mapped[str | None] = mapped_column(String(512))
    facebook_url: Mapped[str | None] = mapped_column(String(512))
    instagram_url: Mapped[str | None] = mapped_column(String(512))
    pinterest_url: Mapped[str | None] = mapped_column(String(512))
    twitter_url: Mapped[str | None] = mapped_column(String(512))
    youtube_url: Mapped[str | None] = mapped_column(String(512))
    snapchat_url: Mapped[str | None] = mapped_column(String(512))
    tiktok_url: Mapped[str | None] = mapped_column(String(512))

    type: Mapped[PlaceType] = relationship(back_populates="places", lazy="selectin")
    opening_hours: Mapped[List["OpeningHour"]] = relationship(
        back_populates="place",
        cascade="all, delete-orphan",
        order_by="OpeningHour.day_of_week",
        lazy="selectin",
    )
    specialties: Mapped[List["Specialty"]] = relationship(
        secondary="place_specialties", order_by="Specialty.name", lazy="selectin"
    )
    online_sales_links: Mapped[List["OnlineSalesLink"]] = relationship(
        back_populates="place",
        cascade="all, delete-orphan",
        order_by="OnlineSalesLink.platform_name",
        lazy="selectin",
    )
    specialty_requests: Mapped[List["SpecialtyRequest"]] = relationship(
        back_populates="place", cascade="all, delete-orphan", passive_deletes=True, lazy="raise_on_sql"
    )

    @property
    def type_name(self) -> str | None:
        return self.type.name if self.type is not None else None


class OnlineSalesLink(Base):
    __tablename__ = "online_sales_links"

    place_id: Mapped[int] = mapped_column(ForeignKey("places.id", ondelete="CASCADE"), nullable=False, index=True)
    platform_name: Mapped[str] = mapped_column(String(64), nullable=False)
    url: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str | None] = mapped_column(String(512))

    place: Mapped[Optional[Place]] = relationship(back_populates="online_sales_links")
