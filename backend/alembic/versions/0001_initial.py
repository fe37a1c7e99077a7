"""webhook documents

Revision ID: 0001
Revises: 
Create Date: 2025-05-15
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "missed_calls",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("callid", sa.String(length=128)),
        sa.Column("caller_phone", sa.String(length=64)),
        sa.Column("recipient_phone", sa.String(length=64)),
        sa.Column("recipient_name", sa.String(length=255)),
        sa.Column("call_direction", sa.String(length=32)),
        sa.Column("call_end_date", sa.String(length=32)),
        sa.Column("call_end_time", sa.String(length=32)),
        sa.Column("account_id", sa.String(length=64)),
        sa.Column("extension_id", sa.String(length=64)),
        sa.Column("first_name", sa.String(length=255)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("extension_number", sa.String(length=32)),
        sa.Column("raw_payload", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "sms_messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sender_phone", sa.String(length=64)),
        sa.Column("sender_name", sa.String(length=255)),
        sa.Column("recipient_phone", sa.String(length=64)),
        sa.Column("message", sa.Text()),
        sa.Column("received_date", sa.String(length=32)),
        sa.Column("received_time", sa.String(length=32)),
        sa.Column("account_id", sa.String(length=64)),
        sa.Column("extension_id", sa.String(length=64)),
        sa.Column("first_name", sa.String(length=255)),
        sa.Column("email", sa.String(length=255)),
        sa.Column("extension_number", sa.String(length=32)),
        sa.Column("raw_payload", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("sms_messages")
    op.drop_table("missed_calls")
