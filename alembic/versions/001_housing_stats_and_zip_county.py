"""Add housing_stats and hud_zip_county tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # One row per Census ZCTA
    op.create_table(
        "housing_stats",
        sa.Column("zip_code", sa.String(5), primary_key=True),
        sa.Column("county_name", sa.String(100), nullable=True),
        sa.Column("state_abbr", sa.String(2), nullable=True),
        sa.Column("state_name", sa.String(100), nullable=True),
        sa.Column("metro_area", sa.String(200), nullable=True),
        sa.Column("cbsa_code", sa.String(5), nullable=True),
        sa.Column("cbsa_name", sa.String(200), nullable=True),
        sa.Column("population", sa.Integer, nullable=True),
        sa.Column("median_age", sa.Double, nullable=True),
        sa.Column("median_household_income", sa.Double, nullable=True),
        sa.Column("homeownership_rate", sa.Double, nullable=True),
        sa.Column("vacancy_rate", sa.Double, nullable=True),
        sa.Column("median_home_price", sa.Double, nullable=True),
        sa.Column("median_rent", sa.Double, nullable=True),
        sa.Column("owner_occupied_units", sa.Integer, nullable=True),
        sa.Column("renter_occupied_units", sa.Integer, nullable=True),
        sa.Column("total_housing_units", sa.Integer, nullable=True),
        sa.Column("redfin_median_sale_price", sa.Double, nullable=True),
        sa.Column("redfin_median_list_price", sa.Double, nullable=True),
        sa.Column("redfin_homes_sold", sa.Integer, nullable=True),
        sa.Column("redfin_median_days_on_market", sa.Double, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_housing_stats_state_abbr", "housing_stats", ["state_abbr"])
    op.create_index("ix_housing_stats_state_county", "housing_stats", ["state_abbr", "county_name"])
    op.create_index("ix_housing_stats_metro_area", "housing_stats", ["metro_area"])

    # HUD USPS ZIP-to-county crosswalk, one row per (ZIP, county)
    op.create_table(
        "hud_zip_county",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("zip_code", sa.String(5), nullable=False),
        sa.Column("county_fips", sa.String(5), nullable=False),
        sa.Column("pref_city", sa.String(100), nullable=True),
        sa.Column("state_abbr", sa.String(2), nullable=True),
        sa.Column("res_ratio", sa.Double, nullable=False, server_default="0"),
        sa.Column("bus_ratio", sa.Double, nullable=True),
        sa.Column("oth_ratio", sa.Double, nullable=True),
        sa.Column("tot_ratio", sa.Double, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("zip_code", "county_fips", name="uq_hud_zip_county_zip_county"),
    )
    op.create_index("ix_hud_zip_county_zip_code", "hud_zip_county", ["zip_code"])
    op.create_index("ix_hud_zip_county_county_fips", "hud_zip_county", ["county_fips"])


def downgrade() -> None:
    op.drop_index("ix_hud_zip_county_county_fips", table_name="hud_zip_county")
    op.drop_index("ix_hud_zip_county_zip_code", table_name="hud_zip_county")
    op.drop_table("hud_zip_county")

    op.drop_index("ix_housing_stats_metro_area", table_name="housing_stats")
    op.drop_index("ix_housing_stats_state_county", table_name="housing_stats")
    op.drop_index("ix_housing_stats_state_abbr", table_name="housing_stats")
    op.drop_table("housing_stats")
