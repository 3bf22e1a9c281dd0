"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 12:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(30), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "projects",
        sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("full_description", sa.Text(), nullable=True),
        sa.Column("technologies", sa.JSON(), nullable=False),
        sa.Column("category", sa.String(20), nullable=False),
        sa.Column("images", sa.JSON(), nullable=False),
        sa.Column("live_url", sa.String(500), nullable=True),
        sa.Column("github_url", sa.String(500), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False),
        sa.Column("ai_prompts", sa.JSON(), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_projects_slug", "projects", ["slug"], unique=True)
    op.create_index("ix_projects_category", "projects", ["category"])
    op.create_index("ix_projects_featured", "projects", ["featured"])

    op.create_table(
        "contents",
        sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
        sa.Column("section", sa.String(20), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column(
            "updated_by",
            sa.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )
    op.create_index("ix_contents_section", "contents", ["section"], unique=True)

    op.create_table(
        "analytics_sessions",
        sa.Column("id", sa.UUID(as_uuid=True), primary_key=True),
        sa.Column("session_id", sa.String(100), nullable=False),
        sa.Column("ip_address", sa.String(45), nullable=False),
        sa.Column("user_agent", sa.Text(), nullable=False),
        sa.Column("referrer", sa.Text(), nullable=True),
        sa.Column("device", sa.String(10), nullable=False),
        sa.Column("first_visit", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_visit", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_analytics_sessions_session_id", "analytics_sessions", ["session_id"], unique=True)
    op.create_index("ix_analytics_sessions_first_visit", "analytics_sessions", ["first_visit"])
    op.create_index("ix_analytics_sessions_last_visit", "analytics_sessions", ["last_visit"])

    op.create_table(
        "page_views",
        sa.Column("seq", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "session_pk",
            sa.UUID(as_uuid=True),
            sa.ForeignKey("analytics_sessions.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("path", sa.String(2048), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration", sa.Float(), nullable=True),
    )
    op.create_index("ix_page_views_session_pk", "page_views", ["session_pk"])
    op.create_index("ix_page_views_path", "page_views", ["path"])
    op.create_index("ix_page_views_timestamp", "page_views", ["timestamp"])


def downgrade() -> None:
    op.drop_table("page_views")
    op.drop_table("analytics_sessions")
    op.drop_table("contents")
    op.drop_table("projects")
    op.drop_table("users")
