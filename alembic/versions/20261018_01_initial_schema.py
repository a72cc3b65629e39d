"""Initial schema: users, cars, expenses, user_settings, revoked_tokens

Revision ID: 20261018_01_initial
Revises:
Create Date: 2026-10-18

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261018_01_initial"
down_revision = None
branch_labels = None
depends_on = None


def _table_exists(name: str) -> bool:
    bind = op.get_bind()
    insp = sa.inspect(bind)
    return insp.has_table(name)


def upgrade() -> None:
    if not _table_exists("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
            sa.Column("email", sa.String(length=255), nullable=False, unique=True),
            sa.Column("password_hash", sa.String(length=255), nullable=False),
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )

    if not _table_exists("cars"):
        op.create_table(
            "cars",
            sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            sa.Column("make", sa.String(length=100), nullable=False),
            sa.Column("model", sa.String(length=100), nullable=False),
            sa.Column("year", sa.Integer(), nullable=False),
            sa.Column("mileage", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("color", sa.String(length=50), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("purchase_price", sa.Numeric(12, 2), nullable=False),
            sa.Column("book_value", sa.Numeric(12, 2), nullable=True),
            sa.Column("image_url", sa.String(length=1024), nullable=True),
            sa.Column("invoice_url", sa.String(length=1024), nullable=True),
            sa.Column("sold", sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column("sale_price", sa.Numeric(12, 2), nullable=True),
            sa.Column("sale_date", sa.DateTime(timezone=True), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.CheckConstraint(
                "(sold AND sale_price IS NOT NULL AND sale_date IS NOT NULL)"
                " OR (NOT sold AND sale_price IS NULL AND sale_date IS NULL)",
                name="ck_cars_sale_state",
            ),
        )
        op.create_index("ix_cars_user_id", "cars", ["user_id"])
        op.create_index("ix_cars_created_at", "cars", ["created_at"])
        op.create_index("ix_cars_user_created", "cars", ["user_id", "created_at"])

    if not _table_exists("expenses"):
        op.create_table(
            "expenses",
            sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
            sa.Column("car_id", sa.Uuid(), nullable=False),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            sa.Column("description", sa.String(length=255), nullable=False),
            sa.Column("amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
            sa.Column("expense_date", sa.Date(), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.ForeignKeyConstraint(["car_id"], ["cars.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        )
        op.create_index("ix_expenses_car_id", "expenses", ["car_id"])
        op.create_index("ix_expenses_user_id", "expenses", ["user_id"])
        op.create_index("ix_expenses_expense_date", "expenses", ["expense_date"])
        op.create_index("ix_expenses_created_at", "expenses", ["created_at"])
        op.create_index("ix_expenses_car_date", "expenses", ["car_id", "expense_date"])
        op.create_index("ix_expenses_user_car", "expenses", ["user_id", "car_id"])

    if not _table_exists("user_settings"):
        op.create_table(
            "user_settings",
            sa.Column("user_id", sa.Uuid(), nullable=False),
            sa.Column("key", sa.String(length=64), nullable=False),
            sa.Column("value", sa.JSON(), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
            sa.PrimaryKeyConstraint("user_id", "key"),
        )

    if not _table_exists("revoked_tokens"):
        op.create_table(
            "revoked_tokens",
            sa.Column("jti", sa.String(length=64), primary_key=True, nullable=False),
            sa.Column("user_id", sa.Uuid(), nullable=False),
            sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        )
        op.create_index("ix_revoked_tokens_user_id", "revoked_tokens", ["user_id"])
        op.create_index("ix_revoked_tokens_expires_at", "revoked_tokens", ["expires_at"])


def downgrade() -> None:
    for table in ("revoked_tokens", "user_settings", "expenses", "cars", "users"):
        if _table_exists(table):
            op.drop_table(table)
