"""create schools, users, students and leaving certificates

Revision ID: a7c3e91b2d40
Revises:
Create Date: 2026-10-19 10:00:00.000000

This migration:
1. Creates the user_role and certificate_status enum types
2. Creates schools, users (with the temp-password pair CHECK), students
   and leaving_certificates
3. Adds the partial unique index allowing one PENDING or APPROVED
   leaving certificate per student
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a7c3e91b2d40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the initial schema."""
    user_role_enum = postgresql.ENUM("CLERK", "PRINCIPAL", name="user_role", create_type=False)
    user_role_enum.create(op.get_bind(), checkfirst=True)

    certificate_status_enum = postgresql.ENUM(
        "PENDING",
        "APPROVED",
        "REJECTED",
        name="certificate_status",
        create_type=False,
    )
    certificate_status_enum.create(op.get_bind(), checkfirst=True)

    # Schools
    op.create_table(
        "schools",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("principal_name", sa.String(length=200), nullable=False),
        sa.Column("principal_email", sa.String(length=255), nullable=False),
        sa.Column("village", sa.String(length=100), nullable=False),
        sa.Column("tehsil", sa.String(length=100), nullable=False),
        sa.Column("district", sa.String(length=100), nullable=False),
        sa.Column("pin_code", sa.String(length=10), nullable=False),
        sa.Column("board_name", sa.String(length=200), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_schools_name"), "schools", ["name"], unique=False)

    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("school_name", sa.String(length=200), nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("school_email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("temp_password_hash", sa.Text(), nullable=True),
        sa.Column("temp_password_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("role", user_role_enum, nullable=False, server_default="CLERK"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["school_id"],
            ["schools.id"],
            name="fk_users_school_id",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint(
            "(temp_password_hash IS NULL) = (temp_password_expires_at IS NULL)",
            name="ck_users_temp_password_pair",
        ),
    )
    op.create_index(op.f("ix_users_school_id"), "users", ["school_id"], unique=False)
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_school_email"), "users", ["school_email"], unique=True)

    # Students
    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("school_name", sa.String(length=200), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("mother_name", sa.String(length=200), nullable=True),
        sa.Column("mother_tongue", sa.String(length=100), nullable=True),
        sa.Column("race_caste", sa.String(length=100), nullable=True),
        sa.Column(
            "nationality", sa.String(length=100), nullable=False, server_default="Indian"
        ),
        sa.Column("birth_place", sa.String(length=200), nullable=True),
        sa.Column("dob", sa.String(length=50), nullable=True),
        sa.Column("last_school", sa.String(length=200), nullable=True),
        sa.Column("date_admission", sa.String(length=50), nullable=True),
        sa.Column("standard", sa.String(length=50), nullable=True),
        sa.Column("progress", sa.String(length=100), nullable=True),
        sa.Column("conduct", sa.String(length=100), nullable=True),
        sa.Column("date_leaving", sa.String(length=50), nullable=True),
        sa.Column("reason_leaving", sa.Text(), nullable=True),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["school_id"],
            ["schools.id"],
            name="fk_students_school_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(op.f("ix_students_school_id"), "students", ["school_id"], unique=False)
    op.create_index(op.f("ix_students_name"), "students", ["name"], unique=False)
    op.create_index(op.f("ix_students_standard"), "students", ["standard"], unique=False)

    # Leaving certificates
    op.create_table(
        "leaving_certificates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("student_id", sa.Integer(), nullable=False),
        sa.Column("school_id", sa.Integer(), nullable=False),
        sa.Column("school_name", sa.String(length=200), nullable=False),
        sa.Column("status", certificate_status_enum, nullable=False, server_default="PENDING"),
        sa.Column("requested_by", sa.String(length=100), nullable=False),
        sa.Column(
            "requested_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("approved_by", sa.String(length=100), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["student_id"],
            ["students.id"],
            name="fk_leaving_certificates_student_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["school_id"],
            ["schools.id"],
            name="fk_leaving_certificates_school_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        op.f("ix_leaving_certificates_student_id"),
        "leaving_certificates",
        ["student_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_leaving_certificates_school_id"),
        "leaving_certificates",
        ["school_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_leaving_certificates_status"),
        "leaving_certificates",
        ["status"],
        unique=False,
    )

    # One active (PENDING or APPROVED) certificate per student
    op.create_index(
        "uq_leaving_certificates_active_student",
        "leaving_certificates",
        ["student_id"],
        unique=True,
        postgresql_where=sa.text("status IN ('PENDING', 'APPROVED')"),
    )


def downgrade() -> None:
    """Drop the initial schema."""
    op.drop_index("uq_leaving_certificates_active_student", table_name="leaving_certificates")
    op.drop_index(op.f("ix_leaving_certificates_status"), table_name="leaving_certificates")
    op.drop_index(op.f("ix_leaving_certificates_school_id"), table_name="leaving_certificates")
    op.drop_index(op.f("ix_leaving_certificates_student_id"), table_name="leaving_certificates")
    op.drop_table("leaving_certificates")

    op.drop_index(op.f("ix_students_standard"), table_name="students")
    op.drop_index(op.f("ix_students_name"), table_name="students")
    op.drop_index(op.f("ix_students_school_id"), table_name="students")
    op.drop_table("students")

    op.drop_index(op.f("ix_users_school_email"), table_name="users")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_index(op.f("ix_users_school_id"), table_name="users")
    op.drop_table("users")

    op.drop_index(op.f("ix_schools_name"), table_name="schools")
    op.drop_table("schools")

    postgresql.ENUM(name="certificate_status").drop(op.get_bind(), checkfirst=True)
    postgresql.ENUM(name="user_role").drop(op.get_bind(), checkfirst=True)
