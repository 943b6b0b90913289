from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


revision = "0001_create_kv_entries"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    existing_tables = set(insp.get_table_names())

    if "kv_entries" not in existing_tables:
        op.create_table(
            "kv_entries",
            sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
            sa.Column("namespace", sa.String(length=64), nullable=False),
            sa.Column("scope", sa.String(length=16), nullable=False, server_default="local"),
            sa.Column("key", sa.String(length=128), nullable=False),
            sa.Column("value", sa.Text(), nullable=False, server_default=""),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.UniqueConstraint("namespace", "scope", "key", name="uq_kv_entries_namespace_scope_key"),
        )
        op.create_index("ix_kv_entries_namespace", "kv_entries", ["namespace"])


def downgrade() -> None:
    op.drop_index("ix_kv_entries_namespace", table_name="kv_entries")
    op.drop_table("kv_entries")
