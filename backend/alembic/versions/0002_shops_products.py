"""shops and products

Revision ID: 0002_shops_products
Revises: 0001_initial
Create Date: 2026-10-20 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0002_shops_products"
down_revision = "0001_initial"
branch_labels = None
depends_on = None

SHOP_STATUSES = ("pending", "active", "suspended", "closed")
PRODUCT_STATUSES = ("draft", "active", "out_of_stock", "discontinued")


def upgrade() -> None:
    bind = op.get_bind()
    postgresql.ENUM(*SHOP_STATUSES, name="shop_status").create(bind, checkfirst=True)
    postgresql.ENUM(*PRODUCT_STATUSES, name="product_status").create(bind, checkfirst=True)

    op.create_table(
        "shops",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("owner_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("logo_url", sa.String(length=500), nullable=True),
        sa.Column("banner_url", sa.String(length=500), nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(*SHOP_STATUSES, name="shop_status", create_type=False),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("settings", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_shops_owner_id"), "shops", ["owner_id"], unique=False)
    op.create_index(op.f("ix_shops_slug"), "shops", ["slug"], unique=True)

    op.create_table(
        "products",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("shop_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("compare_price", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("sku", sa.String(length=100), nullable=False),
        sa.Column("stock_qty", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("images", postgresql.JSONB(), nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(*PRODUCT_STATUSES, name="product_status", create_type=False),
            nullable=False,
            server_default="draft",
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["shop_id"], ["shops.id"], ondelete="CASCADE"),
    )
    op.create_index(op.f("ix_products_shop_id"), "products", ["shop_id"], unique=False)
    op.create_index(op.f("ix_products_slug"), "products", ["slug"], unique=True)
    op.create_index(op.f("ix_products_sku"), "products", ["sku"], unique=True)


def downgrade() -> None:
    op.drop_index(op.f("ix_products_sku"), table_name="products")
    op.drop_index(op.f("ix_products_slug"), table_name="products")
    op.drop_index(op.f("ix_products_shop_id"), table_name="products")
    op.drop_table("products")
    op.drop_index(op.f("ix_shops_slug"), table_name="shops")
    op.drop_index(op.f("ix_shops_owner_id"), table_name="shops")
    op.drop_table("shops")
    bind = op.get_bind()
    postgresql.ENUM(name="product_status").drop(bind, checkfirst=True)
    postgresql.ENUM(name="shop_status").drop(bind, checkfirst=True)
