"""Initial pipeline schema: users, stages, members, referrals

Revision ID: 8c1f2a9d4e01
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8c1f2a9d4e01"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_user_email"),
    )

    op.create_table(
        "stage",
        sa.Column("id", sa.String(length=60), primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_stage_order", "stage", ["order"])

    op.create_table(
        "member",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("whatsapp", sa.String(length=50), nullable=False),
        sa.Column("linkedin_url", sa.String(length=500), nullable=False),
        sa.Column("area", sa.String(length=20), nullable=False),
        sa.Column("other_area", sa.String(length=100), nullable=True),
        sa.Column("current_role", sa.String(length=100), nullable=False),
        sa.Column("years_experience", sa.Integer(), nullable=False),
        sa.Column("english_level", sa.String(length=20), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("work_preference", sa.String(length=20), nullable=True),
        sa.Column("willing_to_relocate", sa.Boolean(), nullable=False),
        sa.Column("cv_file_url", sa.String(length=1000), nullable=False),
        sa.Column("stage_id", sa.String(length=60), sa.ForeignKey("stage.id"), nullable=False),
        sa.Column("hired_company", sa.String(length=255), nullable=True),
        sa.Column("hired_date", sa.Date(), nullable=True),
        sa.Column("hired_salary_usd", sa.Numeric(12, 2), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_member_email", "member", ["email"], unique=True)
    op.create_index("ix_member_stage_id", "member", ["stage_id"])

    op.create_table(
        "referral",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "member_id",
            sa.Uuid(),
            sa.ForeignKey("member.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("referral_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_referral_member_id", "referral", ["member_id"])


def downgrade() -> None:
    op.drop_index("ix_referral_member_id", table_name="referral")
    op.drop_table("referral")
    op.drop_index("ix_member_stage_id", table_name="member")
    op.drop_index("ix_member_email", table_name="member")
    op.drop_table("member")
    op.drop_index("ix_stage_order", table_name="stage")
    op.drop_table("stage")
    op.drop_table("user")
