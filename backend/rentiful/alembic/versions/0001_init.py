"""init schema

Revision ID: 0001_init
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa

from rentiful.geo import PointType


revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _user_columns():
    return [
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cognito_id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=False),
        sa.Column("phone_number", sa.String(length=40), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    bind = op.get_bind()
    is_pg = bind.dialect.name == "postgresql"
    if is_pg:
        op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    op.create_table("managers", *_user_columns())
    op.create_index("ix_managers_cognito_id", "managers", ["cognito_id"], unique=True)

    op.create_table("tenants", *_user_columns())
    op.create_index("ix_tenants_cognito_id", "tenants", ["cognito_id"], unique=True)

    op.create_table(
        "locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("state", sa.String(length=120), nullable=False),
        sa.Column("country", sa.String(length=120), nullable=False),
        sa.Column("postal_code", sa.String(length=20), nullable=False),
        sa.Column("coordinates", PointType(), nullable=False),
        sa.Column("geocode_attempted_at", sa.DateTime(), nullable=True),
    )
    if is_pg:
        op.execute("CREATE INDEX ix_locations_coordinates ON locations USING GIST (coordinates)")

    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("price_per_month", sa.Float(), nullable=False),
        sa.Column("security_deposit", sa.Float(), nullable=False),
        sa.Column("application_fee", sa.Float(), nullable=False),
        sa.Column("photo_urls", sa.JSON(), nullable=False),
        sa.Column("highlights", sa.JSON(), nullable=False),
        sa.Column("is_pets_allowed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_parking_included", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("beds", sa.Integer(), nullable=False),
        sa.Column("baths", sa.Float(), nullable=False),
        sa.Column("square_feet", sa.Integer(), nullable=False),
        sa.Column("property_type", sa.String(length=40), nullable=False),
        sa.Column("posted_date", sa.DateTime(), nullable=False),
        sa.Column("average_rating", sa.Float(), nullable=True),
        sa.Column("number_of_reviews", sa.Integer(), nullable=True),
        sa.Column("location_id", sa.Integer(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("manager_cognito_id", sa.String(length=128), sa.ForeignKey("managers.cognito_id"), nullable=False),
        sa.UniqueConstraint("location_id", name="uq_properties_location"),
    )
    op.create_index("ix_properties_price_per_month", "properties", ["price_per_month"])
    op.create_index("ix_properties_property_type", "properties", ["property_type"])
    op.create_index("ix_properties_manager_cognito_id", "properties", ["manager_cognito_id"])

    op.create_table(
        "property_amenities",
        sa.Column("property_id", sa.Integer(), sa.ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("amenity", sa.String(length=40), primary_key=True),
    )
    op.create_index("ix_property_amenities_amenity", "property_amenities", ["amenity"])

    op.create_table(
        "tenant_favorites",
        sa.Column("tenant_id", sa.Integer(), sa.ForeignKey("tenants.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("property_id", sa.Integer(), sa.ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "leases",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("rent", sa.Float(), nullable=False),
        sa.Column("deposit", sa.Float(), nullable=False),
        sa.Column("property_id", sa.Integer(), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("tenant_cognito_id", sa.String(length=128), sa.ForeignKey("tenants.cognito_id"), nullable=False),
    )
    op.create_index("ix_leases_start_date", "leases", ["start_date"])
    op.create_index("ix_leases_property_id", "leases", ["property_id"])
    op.create_index("ix_leases_tenant_cognito_id", "leases", ["tenant_cognito_id"])

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("application_date", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending"),
        sa.Column("property_id", sa.Integer(), sa.ForeignKey("properties.id"), nullable=False),
        sa.Column("tenant_cognito_id", sa.String(length=128), sa.ForeignKey("tenants.cognito_id"), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=200), nullable=False),
        sa.Column("phone_number", sa.String(length=40), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("lease_id", sa.Integer(), sa.ForeignKey("leases.id"), nullable=True),
        sa.UniqueConstraint("lease_id", name="uq_applications_lease"),
    )
    op.create_index("ix_applications_property_id", "applications", ["property_id"])
    op.create_index("ix_applications_tenant_cognito_id", "applications", ["tenant_cognito_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("amount_due", sa.Float(), nullable=False),
        sa.Column("amount_paid", sa.Float(), nullable=False, server_default="0"),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("payment_date", sa.DateTime(), nullable=True),
        sa.Column("payment_status", sa.String(length=20), nullable=False, server_default="Pending"),
        sa.Column("lease_id", sa.Integer(), sa.ForeignKey("leases.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("ix_payments_lease_id", "payments", ["lease_id"])


def downgrade():
    op.drop_table("payments")
    op.drop_table("applications")
    op.drop_table("leases")
    op.drop_table("tenant_favorites")
    op.drop_table("property_amenities")
    op.drop_table("properties")
    op.drop_table("locations")
    op.drop_table("tenants")
    op.drop_table("managers")
