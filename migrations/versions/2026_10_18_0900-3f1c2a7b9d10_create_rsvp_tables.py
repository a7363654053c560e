"""create_rsvp_tables

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "3f1c2a7b9d10"
down_revision = None
branch_labels = None
depends_on = None

SIDE_VALUES = ("BRIDE", "GROOM")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def upgrade() -> None:
    side_enum = sa.Enum(*SIDE_VALUES, name="side_enum")
    existing_side_enum = postgresql.ENUM(*SIDE_VALUES, name="side_enum", create_type=False)

    op.create_table(
        "couples",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("side", side_enum, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("uuid", name="pk_couples"),
    )
    op.create_index("ix_couples_email", "couples", ["email"], unique=True)

    op.create_table(
        "guest_categories",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("side", existing_side_enum, nullable=False),
        sa.Column("max_guests", sa.Integer(), nullable=False),
        sa.Column("invitation_token", sa.String(length=36), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("couple_id", sa.UUID(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("max_guests >= 0", name="ck_guest_categories_max_guests"),
        sa.ForeignKeyConstraint(
            ["couple_id"],
            ["couples.uuid"],
            name="fk_guest_categories_couple_id_couples",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("uuid", name="pk_guest_categories"),
        sa.UniqueConstraint("name", name="uq_guest_categories_name"),
    )
    op.create_index(
        "ix_guest_categories_invitation_token",
        "guest_categories",
        ["invitation_token"],
        unique=True,
    )
    op.create_index("ix_guest_categories_side", "guest_categories", ["side"])
    op.create_index("ix_guest_categories_couple_id", "guest_categories", ["couple_id"])
    # at most one default category per side, also under concurrent writes
    op.create_index(
        "uq_guest_categories_default_side",
        "guest_categories",
        ["side"],
        unique=True,
        postgresql_where=sa.text("is_default"),
    )

    op.create_table(
        "rsvps",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("guest_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=False),
        sa.Column("number_of_guests", sa.Integer(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "APPROVED", "REJECTED", name="rsvp_status_enum"),
            nullable=False,
        ),
        sa.Column("side", existing_side_enum, nullable=False),
        sa.Column("category_id", sa.UUID(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("number_of_guests >= 1", name="ck_rsvps_number_of_guests"),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["guest_categories.uuid"],
            name="fk_rsvps_category_id_guest_categories",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("uuid", name="pk_rsvps"),
        sa.UniqueConstraint("email", name="uq_rsvps_email"),
        sa.UniqueConstraint("phone", name="uq_rsvps_phone"),
    )
    op.create_index("ix_rsvps_status", "rsvps", ["status"])
    op.create_index("ix_rsvps_side", "rsvps", ["side"])
    op.create_index("ix_rsvps_category_id", "rsvps", ["category_id"])


def downgrade() -> None:
    op.drop_index("ix_rsvps_category_id", table_name="rsvps")
    op.drop_index("ix_rsvps_side", table_name="rsvps")
    op.drop_index("ix_rsvps_status", table_name="rsvps")
    op.drop_table("rsvps")
    op.drop_index("uq_guest_categories_default_side", table_name="guest_categories")
    op.drop_index("ix_guest_categories_couple_id", table_name="guest_categories")
    op.drop_index("ix_guest_categories_side", table_name="guest_categories")
    op.drop_index("ix_guest_categories_invitation_token", table_name="guest_categories")
    op.drop_table("guest_categories")
    op.drop_index("ix_couples_email", table_name="couples")
    op.drop_table("couples")
    op.execute("DROP TYPE rsvp_status_enum")
    op.execute("DROP TYPE side_enum")
