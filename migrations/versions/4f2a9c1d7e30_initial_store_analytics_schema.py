"""initial store analytics schema

Revision ID: 4f2a9c1d7e30
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "4f2a9c1d7e30"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("created_by", postgresql.UUID(as_uuid=True)),
        sa.Column(
            "created_date",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("updated_by", postgresql.UUID(as_uuid=True)),
        sa.Column("updated_date", sa.TIMESTAMP(timezone=True)),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True)),
    ]


def upgrade() -> None:
    """Create stores, products, promotions and daily view tables."""
    op.create_table(
        "tbl_stores",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True)),
        *_audit_columns(),
    )

    op.create_table(
        "tbl_products",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "store_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("tbl_stores.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("price", sa.Numeric(12, 2)),
        sa.Column("stock", sa.Integer(), server_default=sa.text("0"), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_products_store_created", "tbl_products", ["store_id", "created_date"])

    op.create_table(
        "tbl_promotions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column(
            "store_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("tbl_stores.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("deal_type", sa.String(length=17)),
        sa.Column("legacy_type", sa.String()),
        sa.Column("starts_at", sa.TIMESTAMP(timezone=True)),
        sa.Column("ends_at", sa.TIMESTAMP(timezone=True)),
        *_audit_columns(),
    )
    op.create_index("ix_promotions_store_starts", "tbl_promotions", ["store_id", "starts_at"])

    op.create_table(
        "tbl_store_views_daily",
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column(
            "store_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("tbl_stores.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("store_views", sa.BigInteger(), server_default=sa.text("0"), nullable=False),
        sa.Column("product_views", sa.BigInteger(), server_default=sa.text("0"), nullable=False),
        sa.PrimaryKeyConstraint("day", "store_id", name="pk_store_views_daily"),
    )


def downgrade() -> None:
    """Drop the store analytics tables."""
    op.drop_table("tbl_store_views_daily")
    op.drop_index("ix_promotions_store_starts", table_name="tbl_promotions")
    op.drop_table("tbl_promotions")
    op.drop_index("ix_products_store_created", table_name="tbl_products")
    op.drop_table("tbl_products")
    op.drop_table("tbl_stores")
