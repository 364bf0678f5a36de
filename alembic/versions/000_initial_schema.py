"""Initial database schema

Revision ID: 000_initial_schema
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "000_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    ]


def upgrade() -> None:
    """Create the catalog and commission tables."""

    # Car models table
    op.create_table(
        "car_models",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("brand", sa.String(50), nullable=False),
        sa.Column("car_class", sa.String(20), nullable=False),
        sa.Column("model_name", sa.String(255), nullable=False),
        sa.Column("model_code", sa.String(10), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, comment="Rich text, encrypted at rest"),
        sa.Column("features", sa.Text(), nullable=False, comment="Rich text, encrypted at rest"),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("date_of_manufacturing", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("sort_order", sa.Integer(), server_default="0", nullable=False),
        *timestamps(),
        sa.UniqueConstraint("model_code", name="uq_car_models_model_code"),
    )
    op.create_index("ix_car_models_brand", "car_models", ["brand"])
    op.create_index("ix_car_models_car_class", "car_models", ["car_class"])
    op.create_index("ix_car_models_model_name", "car_models", ["model_name"])
    op.create_index("ix_car_models_date_of_manufacturing", "car_models", ["date_of_manufacturing"])
    op.create_index("ix_car_models_sort_order", "car_models", ["sort_order"])
    op.create_index("ix_car_models_is_active", "car_models", ["is_active"])

    # Car model images table
    op.create_table(
        "car_model_images",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "car_model_id",
            sa.Integer(),
            sa.ForeignKey("car_models.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("original_name", sa.String(255), nullable=False),
        sa.Column("mime_type", sa.String(50), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("path", sa.String(500), nullable=False),
        sa.Column("is_default", sa.Boolean(), server_default=sa.false(), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_car_model_images_car_model_id", "car_model_images", ["car_model_id"])
    op.create_index("ix_car_model_images_is_default", "car_model_images", ["is_default"])

    # Salesmen table
    op.create_table(
        "salesmen",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(50), nullable=False),
        sa.Column("previous_year_sales", sa.Numeric(14, 2), server_default="0", nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *timestamps(),
        sa.UniqueConstraint("code", name="uq_salesmen_code"),
    )
    op.create_index("ix_salesmen_name", "salesmen", ["name"])
    op.create_index("ix_salesmen_is_active", "salesmen", ["is_active"])

    # Commission rules table
    op.create_table(
        "commission_rules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("brand", sa.String(50), nullable=False),
        sa.Column("fixed_commission", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_threshold", sa.Numeric(12, 2), nullable=False),
        sa.Column("class_a_percent", sa.Numeric(5, 2), nullable=False),
        sa.Column("class_b_percent", sa.Numeric(5, 2), nullable=False),
        sa.Column("class_c_percent", sa.Numeric(5, 2), nullable=False),
        *timestamps(),
        sa.UniqueConstraint("brand", name="uq_commission_rules_brand"),
    )

    # Sales data table
    op.create_table(
        "sales_data",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "salesman_id",
            sa.Integer(),
            sa.ForeignKey("salesmen.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("car_class", sa.String(20), nullable=False),
        sa.Column("audi_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("jaguar_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("land_rover_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("renault_count", sa.Integer(), server_default="0", nullable=False),
        *timestamps(),
        sa.UniqueConstraint("salesman_id", "car_class", name="uq_sales_data_salesman_class"),
    )
    op.create_index("ix_sales_data_salesman_id", "sales_data", ["salesman_id"])
    op.create_index("ix_sales_data_car_class", "sales_data", ["car_class"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("sales_data")
    op.drop_table("commission_rules")
    op.drop_table("salesmen")
    op.drop_table("car_model_images")
    op.drop_table("car_models")
