"""Create users and applications tables

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Initial schema:
- users: portal accounts (unique email, bcrypt hash)
- applications: both form variants in one table, tagged by form_variant
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

form_variant = sa.Enum("FULL", "BASIC", name="form_variant")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "applications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("registration_id", sa.String(length=32), nullable=False),
        sa.Column("form_variant", form_variant, nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("father_name", sa.String(length=200), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("gender", sa.String(length=20), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=True),
        sa.Column("mobile", sa.String(length=10), nullable=True),
        sa.Column("graduation", sa.String(length=200), nullable=True),
        sa.Column("percentage", sa.Float(), nullable=True),
        sa.Column("passing_year", sa.Integer(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("photo", sa.String(length=500), nullable=True),
        sa.Column("signature", sa.String(length=500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("registration_id"),
    )
    op.create_index("ix_applications_full_name", "applications", ["full_name"], unique=False)
    op.create_index("ix_applications_created_at", "applications", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_applications_created_at", table_name="applications")
    op.drop_index("ix_applications_full_name", table_name="applications")
    op.drop_table("applications")
    form_variant.drop(op.get_bind(), checkfirst=True)

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
