"""baseline: banks, users, sections, questions, form responses

Revision ID: 20261018120000
Revises:
Create Date: 2026-10-18T12:00:00Z
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261018120000"
down_revision = None
branch_labels = None
depends_on = None

ROLE = sa.Enum("ADMIN", "AGENT", "USER", name="role")
QUESTION_TYPE = sa.Enum(
    "TEXT", "TEXTAREA", "MCQ", "CHECKBOX", "DROPDOWN", "NUMBER", "DATE", "EMAIL", "PHONE",
    name="questiontype",
)


def upgrade() -> None:
    op.create_table(
        "banks",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("logo", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_banks_name", "banks", ["name"], unique=True)
    op.create_index("ix_banks_is_active", "banks", ["is_active"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", ROLE, nullable=False),
        sa.Column("bank_id", sa.String(length=36), sa.ForeignKey("banks.id"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_bank_id", "users", ["bank_id"])

    op.create_table(
        "sections",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("bank_id", sa.String(length=36), sa.ForeignKey("banks.id"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_sections_bank_id", "sections", ["bank_id"])
    op.create_index("ix_sections_is_active", "sections", ["is_active"])

    op.create_table(
        "questions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("section_id", sa.String(length=36), sa.ForeignKey("sections.id"), nullable=False),
        sa.Column("type", QUESTION_TYPE, nullable=False),
        sa.Column("label", sa.String(length=500), nullable=False),
        sa.Column("placeholder", sa.String(length=500), nullable=True),
        sa.Column("required", sa.Boolean(), nullable=False),
        sa.Column("options_json", sa.Text(), nullable=True),
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_questions_section_id", "questions", ["section_id"])

    op.create_table(
        "form_responses",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("section_id", sa.String(length=36), sa.ForeignKey("sections.id"), nullable=False),
        sa.Column("bank_id", sa.String(length=36), sa.ForeignKey("banks.id"), nullable=False),
        sa.Column("responses_json", sa.Text(), nullable=False),
        sa.Column("is_submitted", sa.Boolean(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "section_id", name="uq_form_responses_user_section"),
    )
    for col in ("user_id", "section_id", "bank_id", "is_submitted", "updated_at"):
        op.create_index(f"ix_form_responses_{col}", "form_responses", [col])


def downgrade() -> None:
    op.drop_table("form_responses")
    op.drop_table("questions")
    op.drop_table("sections")
    op.drop_table("users")
    op.drop_table("banks")
    bind = op.get_bind()
    QUESTION_TYPE.drop(bind, checkfirst=True)
    ROLE.drop(bind, checkfirst=True)
