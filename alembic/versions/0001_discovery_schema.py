"""discovery schema

Revision ID: 0001_discovery
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_discovery"
down_revision = None
branch_labels = None
depends_on = None

deal_status = sa.Enum("draft", "active", "expired", "archived", name="deal_status")


def upgrade() -> None:
    op.create_table(
        "partners",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("business_name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_partners_user_id", "partners", ["user_id"], unique=True)

    op.create_table(
        "restaurants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("partner_id", sa.Integer(), sa.ForeignKey("partners.id"), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("street_address", sa.String(length=255), nullable=True),
        sa.Column("city", sa.String(length=128), nullable=True),
        sa.Column("province", sa.String(length=128), nullable=True),
        sa.Column("postal_code", sa.String(length=16), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("rating_avg", sa.Numeric(3, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_restaurants_partner_id", "restaurants", ["partner_id"])
    op.create_index("idx_restaurants_active_created_at", "restaurants", ["is_active", "created_at"])
    op.create_index("idx_restaurants_location", "restaurants", ["latitude", "longitude"])

    op.create_table(
        "deals",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurants.id"), nullable=False),
        sa.Column("status", deal_status, nullable=False, server_default="draft"),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_deals_status_created_at", "deals", ["status", "created_at"])
    op.create_index("idx_deals_restaurant_status", "deals", ["restaurant_id", "status"])

    op.create_table(
        "cuisines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
    )
    op.create_table(
        "dietary_preferences",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
    )
    op.create_table(
        "deal_cuisines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("deal_id", sa.Integer(), sa.ForeignKey("deals.id"), nullable=False),
        sa.Column("cuisine_id", sa.Integer(), sa.ForeignKey("cuisines.id"), nullable=False),
        sa.UniqueConstraint("deal_id", "cuisine_id", name="uniq_deal_cuisine_pair"),
    )
    op.create_index("ix_deal_cuisines_deal_id", "deal_cuisines", ["deal_id"])
    op.create_table(
        "deal_dietary_preferences",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("deal_id", sa.Integer(), sa.ForeignKey("deals.id"), nullable=False),
        sa.Column(
            "dietary_preference_id",
            sa.Integer(),
            sa.ForeignKey("dietary_preferences.id"),
            nullable=False,
        ),
        sa.UniqueConstraint("deal_id", "dietary_preference_id", name="uniq_deal_dietary_pair"),
    )
    op.create_index("ix_deal_dietary_preferences_deal_id", "deal_dietary_preferences", ["deal_id"])

    op.create_table(
        "user_favorite_restaurants",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("restaurant_id", sa.Integer(), sa.ForeignKey("restaurants.id"), nullable=False),
        sa.Column("notify_on_deal", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "restaurant_id", name="uniq_user_favorite_restaurant"),
    )
    op.create_index("ix_user_favorite_restaurants_user_id", "user_favorite_restaurants", ["user_id"])
    op.create_table(
        "user_favorite_deals",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("deal_id", sa.Integer(), sa.ForeignKey("deals.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("user_id", "deal_id", name="uniq_user_favorite_deal"),
    )
    op.create_index("ix_user_favorite_deals_user_id", "user_favorite_deals", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_user_favorite_deals_user_id", table_name="user_favorite_deals")
    op.drop_table("user_favorite_deals")
    op.drop_index("ix_user_favorite_restaurants_user_id", table_name="user_favorite_restaurants")
    op.drop_table("user_favorite_restaurants")
    op.drop_index("ix_deal_dietary_preferences_deal_id", table_name="deal_dietary_preferences")
    op.drop_table("deal_dietary_preferences")
    op.drop_index("ix_deal_cuisines_deal_id", table_name="deal_cuisines")
    op.drop_table("deal_cuisines")
    op.drop_table("dietary_preferences")
    op.drop_table("cuisines")
    op.drop_index("idx_deals_restaurant_status", table_name="deals")
    op.drop_index("idx_deals_status_created_at", table_name="deals")
    op.drop_table("deals")
    op.drop_index("idx_restaurants_location", table_name="restaurants")
    op.drop_index("idx_restaurants_active_created_at", table_name="restaurants")
    op.drop_index("ix_restaurants_partner_id", table_name="restaurants")
    op.drop_table("restaurants")
    op.drop_index("ix_partners_user_id", table_name="partners")
    op.drop_table("partners")
    deal_status.drop(op.get_bind(), checkfirst=True)
