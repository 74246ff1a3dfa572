"""create obrador schema

Revision ID: 3f9c1a7d2e40
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "3f9c1a7d2e40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _item_columns(parent_table: str, parent_column: str) -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            parent_column,
            sa.Integer,
            sa.ForeignKey(f"{parent_table}.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("service_id", sa.Integer, sa.ForeignKey("services.id"), nullable=False),
        sa.Column("service_name", sa.String(255), nullable=False),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("difficulty_factor", sa.Numeric(6, 3), nullable=False, server_default="1"),
        sa.Column("notes", sa.Text, nullable=False, server_default=""),
        sa.Column("included_items", sa.Text, nullable=False, server_default="[]"),
        sa.Column("total", sa.Numeric(18, 6), nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
    ]


def upgrade() -> None:
    op.create_table(
        "services",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("unit", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("deleted_at", sa.DateTime, nullable=True),
    )

    op.create_table(
        "clients",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(50), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        "budgets",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("number", sa.Integer, nullable=False),
        sa.Column("client_id", sa.Integer, sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("project_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("distance_km", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("global_difficulty_factor", sa.Numeric(6, 3), nullable=False, server_default="1"),
        sa.Column("adjustment", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("adjustment_reason", sa.Text, nullable=False, server_default=""),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("observations", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("sent_at", sa.DateTime, nullable=True),
    )
    op.create_index("ix_budgets_client_id", "budgets", ["client_id"])
    op.create_index("ix_budgets_status", "budgets", ["status"])

    op.create_table("budget_items", *_item_columns("budgets", "budget_id"))
    op.create_index("ix_budget_items_budget_id", "budget_items", ["budget_id"])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("uuid", sa.String(26), nullable=False, unique=True),
        sa.Column("invoice_number", sa.Integer, nullable=False),
        sa.Column("client_id", sa.Integer, sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("project_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("observations", sa.Text, nullable=False, server_default=""),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column("tax_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("sent_at", sa.DateTime, nullable=True),
    )
    op.create_index("ix_invoices_client_id", "invoices", ["client_id"])

    op.create_table("invoice_items", *_item_columns("invoices", "invoice_id"))
    op.create_index("ix_invoice_items_invoice_id", "invoice_items", ["invoice_id"])

    op.create_table(
        "email_history",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("document_type", sa.String(20), nullable=False),
        sa.Column("document_id", sa.Integer, nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("subject", sa.Text, nullable=False, server_default=""),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("sent_at", sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index("ix_email_history_document", "email_history", ["document_type", "document_id"])


def downgrade() -> None:
    op.drop_index("ix_email_history_document", table_name="email_history")
    op.drop_table("email_history")
    op.drop_index("ix_invoice_items_invoice_id", table_name="invoice_items")
    op.drop_table("invoice_items")
    op.drop_index("ix_invoices_client_id", table_name="invoices")
    op.drop_table("invoices")
    op.drop_index("ix_budget_items_budget_id", table_name="budget_items")
    op.drop_table("budget_items")
    op.drop_index("ix_budgets_status", table_name="budgets")
    op.drop_index("ix_budgets_client_id", table_name="budgets")
    op.drop_table("budgets")
    op.drop_table("clients")
    op.drop_table("services")
