from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PriceRange = Literal['£', '££', '£££', '££££']


class TokenRequest(BaseModel):
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    expires_in: int


class PlaceTypeIn(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    description: str | None = None
    specialty_ids: list[int] | None = None


class PlaceTypeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    description: str | None = None
    specialty_ids: list[int] | None = None


class PlaceTypeOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    specialty_ids: list[int] = Field(default_factory=list)


class SpecialtyIn(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    description: str | None = None
    parent_id: int | None = None


class SpecialtyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=128)
    description: str | None = None
    parent_id: int | None = None


class SpecialtyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    parent_id: int | None = None
    is_main_category: bool


class SpecialtyTreeOut(BaseModel):
    id: int
    name: str
    description: str | None = None
    parent_id: int | None = None
    subcategories: list['SpecialtyTreeOut'] = Field(default_factory=list)


class SpecialtyCountOut(BaseModel):
    id: int
    name: str
    parent_id: int | None = None
    place_count: int


class PlaceSpecialtiesOut(BaseModel):
    place_id: int
    main_categories: list[SpecialtyOut]
    subcategories: list[SpecialtyOut]


class PlaceSpecialtiesUpdate(BaseModel):
    specialty_ids: list[int]


class DayHoursBody(BaseModel):
    open_time: str | None = Field(default=None, description="HH:MM, 24-hour")
    close_time: str | None = Field(default=None, description="HH:MM, 24-hour")
    is_closed: bool = False
    is_by_appointment: bool = False
    notes: str | None = Field(default=None, max_length=255)


class DayHoursIn(DayHoursBody):
    day_of_week: int = Field(ge=0, le=6, description="0 = Sunday … 6 = Saturday")


class DayHoursOut(BaseModel):
    day_of_week: int
    day_name: str
    open_time: str | None = None
    close_time: str | None = None
    is_closed: bool
    is_by_appointment: bool
    notes: str | None = None


class HoursGroupOut(BaseModel):
    day_text: str
    hours: str
    days: list[int]


class HoursStatusOut(BaseModel):
    is_open: bool
    closing_soon: bool
    by_appointment_today: bool
    checked_at: datetime


class OpeningHoursOut(BaseModel):
    place_id: int
    hours: list[DayHoursOut]
    grouped: list[HoursGroupOut]
    text: str | None = None
    status: HoursStatusOut


class OpeningHoursReplace(BaseModel):
    hours: list[DayHoursIn] = Field(min_length=1, max_length=7)


class OnlineSalesLinkIn(BaseModel):
    platform_name: str = Field(min_length=1, max_length=64)
    url: str = Field(min_length=1, max_length=512)
    description: str | None = Field(default=None, max_length=512)


class OnlineSalesLinkUpdate(BaseModel):
    platform_name: str | None = Field(default=None, min_length=1, max_length=64)
    url: str | None = Field(default=None, min_length=1, max_length=512)
    description: str | None = Field(default=None, max_length=512)


class OnlineSalesLinkOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    place_id: int
    platform_name: str
    url: str
    description: str | None = None


class PlaceFields(BaseModel):
    address_street: str | None = None
    address_area: str | None = None
    address_city: str | None = None
    address_postcode: str | None = None
    phone: str | None = None
    second_phone: str | None = None
    email: str | None = None
    website: str | None = None
    description: str | None = None
    specialties: str | None = Field(default=None, description="Comma-separated specialty names")
    opening_hours: str | None = Field(default=None, description="Free-text opening hours")
    price_range: PriceRange | None = None
    has_disabled_access: bool | None = None
    has_toilet_facilities: bool | None = None
    trade_associations: str | None = None
    facebook_url: str | None = None
    instagram_url: str | None = None
    pinterest_url: str | None = None
    twitter_url: str | None = None
    youtube_url: str | None = None
    snapchat_url: str | None = None
    tiktok_url: str | None = None
    specialty_ids: list[int] | None = None
    hours: list[DayHoursIn] | None = Field(default=None, max_length=7)


class PlaceCreate(PlaceFields):
    name: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=512)
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    type_id: int


class PlaceUpdate(PlaceFields):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: str | None = Field(default=None, min_length=1, max_length=512)
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    type_id: int | None = None


class PlaceOut(BaseModel):
    id: int
    name: str
    address: str
    address_street: str | None = None
    address_area: str | None = None
    address_city: str | None = None
    address_postcode: str | None = None
    phone: str | None = None
    second_phone: str | None = None
    email: str | None = None
    website: str | None = None
    description: str | None = None
    specialties: str | None = None
    opening_hours: str | None = None
    lat: float
    lng: float
    type_id: int
    type_name: str | None = None
    price_range: str | None = None
    has_disabled_access: bool
    has_toilet_facilities: bool
    trade_associations: str | None = None
    facebook_url: str | None = None
    instagram_url: str | None = None
    pinterest_url: str | None = None
    twitter_url: str | None = None
    youtube_url: str | None = None
    snapchat_url: str | None = None
    tiktok_url: str | None = None
    specialty_ids: list[int]
    specialty_names: list[str]
    hours: list[DayHoursOut]
    online_sales_links: list[OnlineSalesLinkOut]
    created_at: datetime
    updated_at: datetime


class SpecialtyRequestIn(BaseModel):
    place_id: int
    request_text: str = Field(min_length=1, max_length=1000)


class SpecialtyRequestReview(BaseModel):
    status: Literal['approved', 'rejected']


class SpecialtyRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    place_id: int
    request_text: str
    status: str
    created_at: datetime


class SpecialtySearchIn(BaseModel):
    specialty_id: int
    session_id: str | None = Field(default=None, max_length=128)


class SpecialtySearchCount(BaseModel):
    id: int
    name: str
    parent_id: int | None = None
    search_count: int


class SearchAnalyticsOut(BaseModel):
    days: int
    total_searches: int
    top_searches: list[SpecialtySearchCount]


class TypeCount(BaseModel):
    type_id: int
    type_name: str
    count: int


class PriceRangeCount(BaseModel):
    price_range: str | None = None
    count: int


class DashboardStatsOut(BaseModel):
    total_places: int
    total_types: int
    total_specialties: int
    places_with_structured_hours: int
    by_type: list[TypeCount]
    by_price_range: list[PriceRangeCount]
