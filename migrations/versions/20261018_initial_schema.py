"""initial operations schema

Revision ID: 20261018_initial_schema
Revises:
Create Date: 2026-10-18

"""

from alembic import op
import sqlalchemy as sa


revision = "20261018_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(32), nullable=False, server_default="user"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_table(
        "machinery",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("model", sa.String()),
        sa.Column("brand", sa.String()),
        sa.Column("serial_no", sa.String()),
        sa.Column("purchase_date", sa.DateTime()),
        sa.Column("notes", sa.Text()),
    )
    op.create_table(
        "machinery_service",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("machinery_id", sa.Integer(), sa.ForeignKey("machinery.id"), nullable=False),
        sa.Column("service_date", sa.DateTime(), nullable=False),
        sa.Column("service_type", sa.String(), nullable=False),
        sa.Column("cost", sa.Float()),
        sa.Column("vendor", sa.String()),
        sa.Column("notes", sa.Text()),
    )
    op.create_table(
        "purchases",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_no", sa.String(), nullable=False, unique=True),
        sa.Column("purchase_type", sa.String(), nullable=False),
        sa.Column("purchase_date", sa.DateTime(), nullable=False),
        sa.Column("seller_name", sa.String(), nullable=False),
        sa.Column("seller_location", sa.String()),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("transport_fees", sa.Float(), server_default="0"),
        sa.Column("handling_fees", sa.Float(), server_default="0"),
        sa.Column("commission_fees", sa.Float(), server_default="0"),
        sa.Column("item_pickup_status", sa.String(), nullable=False, server_default="not"),
        sa.Column("receipt_status", sa.String(), nullable=False, server_default="not"),
        sa.Column("payment_status", sa.String(), nullable=False, server_default="not"),
        sa.Column(
            "purchase_status", sa.String(), nullable=False, server_default="incomplete"
        ),
    )
    op.create_table(
        "purchase_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("purchase_id", sa.Integer(), sa.ForeignKey("purchases.id"), nullable=False),
        sa.Column("category", sa.String()),
        sa.Column("item_name", sa.String(), nullable=False),
        sa.Column("model", sa.String()),
        sa.Column("brand", sa.String()),
        sa.Column("color", sa.String()),
        sa.Column("serial_no", sa.String()),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(), nullable=False),
        sa.Column("unit_price", sa.Float(), nullable=False),
        sa.Column("vat", sa.Float(), server_default="15"),
        sa.Column("total_price", sa.Float(), nullable=False),
    )
    op.create_table(
        "warehouses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String()),
    )
    op.create_table(
        "inventory",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.String(), nullable=False, unique=True),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("item_name", sa.String(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit", sa.String(), nullable=False),
        sa.Column("unit_price", sa.Float(), nullable=False),
        sa.Column("min_stock", sa.Float()),
        sa.Column("max_stock", sa.Float()),
        sa.Column("warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id"), nullable=False),
    )
    op.create_index("ix_inventory_item_name", "inventory", ["item_name"])
    op.create_table(
        "inventory_transfers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "from_warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id"), nullable=False
        ),
        sa.Column(
            "to_warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id"), nullable=False
        ),
        sa.Column("transfer_date", sa.DateTime(), nullable=False),
        sa.Column("reference", sa.String()),
        sa.Column("notes", sa.Text()),
    )
    op.create_table(
        "transfer_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "transfer_id",
            sa.Integer(),
            sa.ForeignKey("inventory_transfers.id"),
            nullable=False,
        ),
        sa.Column("inventory_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
    )
    op.create_index("ix_transfer_items_inventory_id", "transfer_items", ["inventory_id"])
    op.create_table(
        "sales",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_no", sa.String(), nullable=False, unique=True),
        sa.Column("sale_date", sa.DateTime(), nullable=False),
        sa.Column("customer_name", sa.String(), nullable=False),
        sa.Column("customer_contact", sa.String()),
        sa.Column("customer_location", sa.String()),
        sa.Column("salesperson", sa.String()),
        sa.Column("subtotal", sa.Float(), nullable=False),
        sa.Column("discount", sa.Float(), server_default="0"),
        sa.Column("vat", sa.Float(), server_default="15"),
        sa.Column("total_amount", sa.Float(), nullable=False),
        sa.Column("payment_status", sa.String(), nullable=False),
        sa.Column("payment_method", sa.String()),
        sa.Column("bank_name", sa.String()),
        sa.Column("account_no", sa.String()),
        sa.Column("delivery_required", sa.Boolean(), server_default=sa.false()),
        sa.Column("delivery_date", sa.DateTime()),
        sa.Column("delivery_status", sa.String(), server_default="pending"),
        sa.Column("warehouse_id", sa.Integer(), sa.ForeignKey("warehouses.id")),
    )
    op.create_table(
        "sale_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sale_id", sa.Integer(), sa.ForeignKey("sales.id"), nullable=False),
        sa.Column("inventory_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("unit_price", sa.Float(), nullable=False),
        sa.Column("discount", sa.Float(), server_default="0"),
        sa.Column("total_price", sa.Float(), nullable=False),
    )
    op.create_index("ix_sale_items_inventory_id", "sale_items", ["inventory_id"])
    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("document_type", sa.String(), nullable=False),
        sa.Column("related_id", sa.Integer()),
        sa.Column("related_type", sa.String()),
        sa.Column("file_name", sa.String(), nullable=False),
        sa.Column("file_path", sa.String(), nullable=False),
        sa.Column("upload_date", sa.DateTime(), nullable=False),
        sa.Column("uploaded_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
    )
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("location", sa.String()),
        sa.Column("start_date", sa.DateTime()),
        sa.Column("end_date", sa.DateTime()),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
    )
    op.create_table(
        "tasks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("assigned_to", sa.Integer(), sa.ForeignKey("users.id")),
        sa.Column("due_date", sa.DateTime()),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(), server_default="normal"),
    )
    op.create_table(
        "item_usage",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("inventory_id", sa.Integer(), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id")),
        sa.Column("task_id", sa.Integer(), sa.ForeignKey("tasks.id")),
        sa.Column("quantity", sa.Float(), nullable=False),
        sa.Column("usage_date", sa.DateTime(), nullable=False),
        sa.Column("recorded_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
    )
    op.create_index("ix_item_usage_inventory_id", "item_usage", ["inventory_id"])
    op.create_table(
        "timesheet",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("project_id", sa.Integer(), sa.ForeignKey("projects.id")),
        sa.Column("task_id", sa.Integer(), sa.ForeignKey("tasks.id")),
        sa.Column("work_date", sa.DateTime(), nullable=False),
        sa.Column("hours", sa.Float(), nullable=False),
        sa.Column("description", sa.Text()),
    )


def downgrade():
    op.drop_table("timesheet")
    op.drop_index("ix_item_usage_inventory_id", table_name="item_usage")
    op.drop_table("item_usage")
    op.drop_table("tasks")
    op.drop_table("projects")
    op.drop_table("documents")
    op.drop_index("ix_sale_items_inventory_id", table_name="sale_items")
    op.drop_table("sale_items")
    op.drop_table("sales")
    op.drop_index("ix_transfer_items_inventory_id", table_name="transfer_items")
    op.drop_table("transfer_items")
    op.drop_table("inventory_transfers")
    op.drop_index("ix_inventory_item_name", table_name="inventory")
    op.drop_table("inventory")
    op.drop_table("warehouses")
    op.drop_table("purchase_items")
    op.drop_table("purchases")
    op.drop_table("machinery_service")
    op.drop_table("machinery")
    op.drop_table("users")
