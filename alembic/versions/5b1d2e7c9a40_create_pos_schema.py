"""create_pos_schema

Revision ID: 5b1d2e7c9a40
Revises:
Create Date: 2026-10-17 09:12:44.118302
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1d2e7c9a40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # PRODUCTS
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(50), nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("barcode", sa.String(100), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("purchase_cost", sa.Numeric(18, 2), nullable=True),
        sa.Column("sales_cost", sa.Numeric(18, 2), nullable=True),
        sa.Column("reorder_point", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("reorder_point >= 0", name="ck_products_reorder_point_non_negative"),
    )
    op.create_index("ix_products_id", "products", ["id"], unique=False)
    op.create_index("ix_products_code", "products", ["code"], unique=False)
    op.create_index("ix_products_barcode", "products", ["barcode"], unique=False)
    op.create_index("ix_products_category", "products", ["category"], unique=False)

    # STOCK
    op.create_table(
        "stock_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("barcode", sa.String(100), nullable=False, server_default=""),
        sa.Column("quantity", sa.Numeric(18, 3), nullable=False, server_default="0"),
        sa.Column("purchase_rate", sa.Numeric(18, 2), nullable=True),
        sa.Column("sales_rate", sa.Numeric(18, 2), nullable=True),
        sa.UniqueConstraint("product_id", "barcode", name="uq_stock_product_barcode"),
        sa.CheckConstraint("quantity >= 0", name="ck_stock_quantity_non_negative"),
    )
    op.create_index("ix_stock_entries_id", "stock_entries", ["id"], unique=False)
    op.create_index("ix_stock_entries_product_id", "stock_entries", ["product_id"], unique=False)

    # INVOICES
    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("invoice_no", sa.String(50), nullable=False),
        sa.Column("invoice_date", sa.DateTime(), nullable=False),
        sa.Column("customer_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("salesman_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("grand_total", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("total_discount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("amount_tendered", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("change_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("currency_code", sa.String(3), nullable=False, server_default="KES"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_invoices_invoice_no", "invoices", ["invoice_no"], unique=True)
    op.create_index("ix_invoices_invoice_date", "invoices", ["invoice_date"], unique=False)

    # INVOICE ITEMS
    op.create_table(
        "invoice_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("barcode", sa.String(100), nullable=True),
        sa.Column("quantity", sa.Numeric(18, 3), nullable=False),
        sa.Column("sales_rate", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("purchase_rate", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("discount_per", sa.Numeric(9, 4), nullable=False, server_default="0"),
        sa.Column("discount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("vat_per", sa.Numeric(9, 4), nullable=False, server_default="0"),
        sa.Column("vat", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("total_amount", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.Column("margin", sa.Numeric(18, 2), nullable=False, server_default="0"),
        sa.CheckConstraint("quantity > 0", name="ck_invoice_items_quantity_positive"),
    )
    op.create_index("ix_invoice_items_id", "invoice_items", ["id"], unique=False)
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"], unique=False)
    op.create_index("ix_invoice_items_product_id", "invoice_items", ["product_id"], unique=False)

    # INVOICE PAYMENTS
    op.create_table(
        "invoice_payments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"), nullable=False),
        sa.Column("payment_mode", sa.String(50), nullable=False, server_default="Cash"),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("reference", sa.String(100), nullable=True),
        sa.Column("payment_date", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_invoice_payments_id", "invoice_payments", ["id"], unique=False)
    op.create_index("ix_invoice_payments_invoice_id", "invoice_payments", ["invoice_id"], unique=False)

    # SALES RETURNS
    op.create_table(
        "sales_returns",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoices.id"), nullable=True),
        sa.Column("return_date", sa.DateTime(), nullable=False),
        sa.Column("grand_total", sa.Numeric(18, 2), nullable=False, server_default="0"),
    )
    op.create_index("ix_sales_returns_id", "sales_returns", ["id"], unique=False)
    op.create_index("ix_sales_returns_invoice_id", "sales_returns", ["invoice_id"], unique=False)
    op.create_index("ix_sales_returns_return_date", "sales_returns", ["return_date"], unique=False)

    # USERS
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(50), primary_key=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("user_type", sa.String(50), nullable=False, server_default="cashier"),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("contact_no", sa.String(50), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("joining_date", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "user_rights",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(50), sa.ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False),
        sa.Column("module_name", sa.String(100), nullable=False),
        sa.Column("can_save", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_update", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_delete", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_view", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("user_id", "module_name", name="uq_user_rights_module"),
    )
    op.create_index("ix_user_rights_id", "user_rights", ["id"], unique=False)
    op.create_index("ix_user_rights_user_id", "user_rights", ["user_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("user_rights")
    op.drop_table("users")
    op.drop_table("sales_returns")
    op.drop_table("invoice_payments")
    op.drop_table("invoice_items")
    op.drop_table("invoices")
    op.drop_table("stock_entries")
    op.drop_table("products")
