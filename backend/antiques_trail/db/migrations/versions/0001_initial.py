"""Initial schema"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


request_status_enum = sa.Enum("pending", "approved", "rejected", name="requeststatus")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "place_types",
        *_timestamps(),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("description", sa.String(length=512)),
        sa.UniqueConstraint("name", name="uq_place_types_name"),
    )

    op.create_table(
        "specialties",
        *_timestamps(),
        sa.Column("name", sa.String(length=128, collation="NOCASE"), nullable=False),
        sa.Column("description", sa.String(length=512)),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("specialties.id", ondelete="SET NULL")),
        sa.UniqueConstraint("name", name="uq_specialties_name"),
    )
    op.create_index("ix_specialties_parent_id", "specialties", ["parent_id"])

    op.create_table(
        "places",
        *_timestamps(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=512), nullable=False),
        sa.Column("address_street", sa.String(length=255)),
        sa.Column("address_area", sa.String(length=128)),
        sa.Column("address_city", sa.String(length=128)),
        sa.Column("address_postcode", sa.String(length=16)),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("second_phone", sa.String(length=32)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("website", sa.String(length=512)),
        sa.Column("description", sa.Text()),
        sa.Column("specialties", sa.Text()),
        sa.Column("opening_hours", sa.Text()),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lng", sa.Float(), nullable=False),
        sa.Column("type_id", sa.Integer(), sa.ForeignKey("place_types.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("price_range", sa.String(length=8)),
        sa.Column("has_disabled_access", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("has_toilet_facilities", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("trade_associations", sa.String(length=512)),
        sa.Column("facebook_url", sa.String(length=512)),
        sa.Column("instagram_url", sa.String(length=512)),
        sa.Column("pinterest_url", sa.String(length=512)),
        sa.Column("twitter_url", sa.String(length=512)),
        sa.Column("youtube_url", sa.String(length=512)),
        sa.Column("snapchat_url", sa.String(length=512)),
        sa.Column("tiktok_url", sa.String(length=512)),
    )
    op.create_index("ix_places_name", "places", ["name"])
    op.create_index("ix_places_address_postcode", "places", ["address_postcode"])
    op.create_index("ix_places_type_id", "places", ["type_id"])

    op.create_table(
        "opening_hours",
        *_timestamps(),
        sa.Column("place_id", sa.Integer(), sa.ForeignKey("places.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("open_time", sa.String(length=5)),
        sa.Column("close_time", sa.String(length=5)),
        sa.Column("is_closed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_by_appointment", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.String(length=255)),
        sa.UniqueConstraint("place_id", "day_of_week", name="uq_opening_hours_place_day"),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_opening_hours_day_of_week_range"),
    )
    op.create_index("ix_opening_hours_place_id", "opening_hours", ["place_id"])

    op.create_table(
        "place_specialties",
        *_timestamps(),
        sa.Column("place_id", sa.Integer(), sa.ForeignKey("places.id", ondelete="CASCADE"), nullable=False),
        sa.Column("specialty_id", sa.Integer(), sa.ForeignKey("specialties.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("place_id", "specialty_id", name="uq_place_specialties_place_specialty"),
    )
    op.create_index("ix_place_specialties_place_id", "place_specialties", ["place_id"])
    op.create_index("ix_place_specialties_specialty_id", "place_specialties", ["specialty_id"])

    op.create_table(
        "place_type_specialties",
        *_timestamps(),
        sa.Column("type_id", sa.Integer(), sa.ForeignKey("place_types.id", ondelete="CASCADE"), nullable=False),
        sa.Column("specialty_id", sa.Integer(), sa.ForeignKey("specialties.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("type_id", "specialty_id", name="uq_place_type_specialties_type_specialty"),
    )
    op.create_index("ix_place_type_specialties_type_id", "place_type_specialties", ["type_id"])
    op.create_index("ix_place_type_specialties_specialty_id", "place_type_specialties", ["specialty_id"])

    op.create_table(
        "online_sales_links",
        *_timestamps(),
        sa.Column("place_id", sa.Integer(), sa.ForeignKey("places.id", ondelete="CASCADE"), nullable=False),
        sa.Column("platform_name", sa.String(length=64), nullable=False),
        sa.Column("url", sa.String(length=512), nullable=False),
        sa.Column("description", sa.String(length=512)),
    )
    op.create_index("ix_online_sales_links_place_id", "online_sales_links", ["place_id"])

    op.create_table(
        "specialty_requests",
        *_timestamps(),
        sa.Column("place_id", sa.Integer(), sa.ForeignKey("places.id", ondelete="CASCADE"), nullable=False),
        sa.Column("request_text", sa.Text(), nullable=False),
        sa.Column("status", request_status_enum, nullable=False, server_default="pending"),
    )
    op.create_index("ix_specialty_requests_place_id", "specialty_requests", ["place_id"])

    op.create_table(
        "specialty_searches",
        *_timestamps(),
        sa.Column("specialty_id", sa.Integer(), sa.ForeignKey("specialties.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_ip", sa.String(length=64)),
        sa.Column("session_id", sa.String(length=128)),
    )
    op.create_index("ix_specialty_searches_specialty_id", "specialty_searches", ["specialty_id"])


def downgrade() -> None:
    op.drop_table("specialty_searches")
    op.drop_table("specialty_requests")
    op.drop_table("online_sales_links")
    op.drop_table("place_type_specialties")
    op.drop_table("place_specialties")
    op.drop_table("opening_hours")
    op.drop_table("places")
    op.drop_table("specialties")
    op.drop_table("place_types")
