"""Parts tracker — requests, request items, audit trail and user roles.

Revision ID: a1c3e5f7b902
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "a1c3e5f7b902"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # ── Requests ──
    op.create_table(
        "requests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    )

    # ── Request Items ──
    op.create_table(
        "request_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("request_id", sa.String(36),
                  sa.ForeignKey("requests.id", ondelete="CASCADE"),
                  nullable=False, index=True),
        sa.Column("job_bag_number", sa.String(64), nullable=False),
        sa.Column("manufacturer", sa.String(120), nullable=False),
        sa.Column("part_name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("boss_status", sa.String(20), nullable=True,
                  comment="NULL (pending) | ordered | backorder | discontinued"),
        sa.Column("staff_status", sa.String(20), nullable=True,
                  comment="NULL (pending) | received | part_defective | installed"),
        sa.Column("installed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.CheckConstraint("quantity >= 1", name="ck_request_items_quantity"),
    )
    op.create_index("idx_ri_job_bag", "request_items", ["job_bag_number"])
    op.create_index("idx_ri_created_at", "request_items", ["created_at"])

    # ── Audit Logs (no FK: history outlives deleted items) ──
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("request_item_id", sa.String(36), nullable=False),
        sa.Column("field_changed", sa.String(20), nullable=False,
                  comment="boss_status | staff_status"),
        sa.Column("old_value", sa.String(20), nullable=True),
        sa.Column("new_value", sa.String(20), nullable=False),
        sa.Column("changed_by", sa.String(64), nullable=False),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    )
    op.create_index("idx_audit_item", "audit_logs", ["request_item_id"])
    op.create_index("idx_audit_changed_by", "audit_logs", ["changed_by"])
    op.create_index("idx_audit_changed_at", "audit_logs", ["changed_at"])

    # ── User Roles ──
    op.create_table(
        "user_roles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False, unique=True, index=True),
        sa.Column("role", sa.String(20), nullable=False,
                  comment="staff | boss | system_admin"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    )


def downgrade():
    op.drop_table("user_roles")
    op.drop_index("idx_audit_changed_at", table_name="audit_logs")
    op.drop_index("idx_audit_changed_by", table_name="audit_logs")
    op.drop_index("idx_audit_item", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("idx_ri_created_at", table_name="request_items")
    op.drop_index("idx_ri_job_bag", table_name="request_items")
    op.drop_table("request_items")
    op.drop_table("requests")
