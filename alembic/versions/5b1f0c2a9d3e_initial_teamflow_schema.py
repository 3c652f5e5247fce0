"""initial teamflow schema

Revision ID: 5b1f0c2a9d3e
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '5b1f0c2a9d3e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


workspace_role = postgresql.ENUM("manager", "developer", "designer", "qa", name="workspace_role", create_type=False)
invite_status = postgresql.ENUM("pending", "accepted", "declined", name="invite_status", create_type=False)
release_status = postgresql.ENUM("planned", "deployed", name="release_status", create_type=False)
qa_status = postgresql.ENUM("pending", "passed", "failed", name="qa_status", create_type=False)
bug_severity = postgresql.ENUM("low", "medium", "high", "critical", name="bug_severity", create_type=False)
bug_status = postgresql.ENUM(
    "open", "in_progress", "resolved", "closed", "rejected", name="bug_status", create_type=False
)
hotfix_status = postgresql.ENUM("pending", "in_progress", "deployed", name="hotfix_status", create_type=False)

ENUMS = (workspace_role, invite_status, release_status, qa_status, bug_severity, bug_status, hotfix_status)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in ENUMS:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(64), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "workspaces",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "created_by",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_workspaces_name"),
    )

    op.create_table(
        "workspace_members",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "workspace_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", workspace_role, nullable=False),
        sa.Column("joined_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.UniqueConstraint("workspace_id", "user_id", name="uq_workspace_members_workspace_user"),
    )
    op.create_index("ix_workspace_members_workspace_id", "workspace_members", ["workspace_id"])
    op.create_index("ix_workspace_members_user_id", "workspace_members", ["user_id"])

    op.create_table(
        "invites",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "workspace_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "invited_by",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("role", workspace_role, nullable=False),
        sa.Column("status", invite_status, nullable=False, server_default="pending"),
        sa.Column("sent_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_invites_user_id", "invites", ["user_id"])
    op.create_index("ix_invites_workspace_id", "invites", ["workspace_id"])
    op.create_index(
        "uq_invites_pending_user_workspace",
        "invites",
        ["user_id", "workspace_id"],
        unique=True,
        postgresql_where=sa.text("status = 'pending'"),
    )

    op.create_table(
        "releases",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("version_tag", sa.String(100), nullable=False),
        sa.Column(
            "workspace_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("workspaces.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("planned_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deployed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("deployed_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("qa_status", qa_status, nullable=False, server_default="pending"),
        sa.Column("status", release_status, nullable=False, server_default="planned"),
        *_timestamps(),
    )
    op.create_index("ix_releases_workspace_id", "releases", ["workspace_id"])

    op.create_table(
        "bugs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("severity", bug_severity, nullable=False),
        sa.Column("status", bug_status, nullable=False, server_default="open"),
        sa.Column(
            "release_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("releases.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("reported_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "assigned_to",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("steps_to_reproduce", sa.Text(), nullable=True),
        sa.Column("expected_behavior", sa.Text(), nullable=True),
        sa.Column("actual_behavior", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_bugs_release_id", "bugs", ["release_id"])

    op.create_table(
        "hotfixes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "bug_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("bugs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "release_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("releases.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("fixed_by", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("fixed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", hotfix_status, nullable=False, server_default="pending"),
        sa.Column("attached_commits", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("deployment_notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_hotfixes_release_id", "hotfixes", ["release_id"])

    # defaults live in the application
    op.alter_column("invites", "status", server_default=None)
    op.alter_column("bugs", "status", server_default=None)
    op.alter_column("hotfixes", "status", server_default=None)


def downgrade() -> None:
    op.drop_index("ix_hotfixes_release_id", table_name="hotfixes")
    op.drop_table("hotfixes")
    op.drop_index("ix_bugs_release_id", table_name="bugs")
    op.drop_table("bugs")
    op.drop_index("ix_releases_workspace_id", table_name="releases")
    op.drop_table("releases")
    op.drop_index("uq_invites_pending_user_workspace", table_name="invites")
    op.drop_index("ix_invites_workspace_id", table_name="invites")
    op.drop_index("ix_invites_user_id", table_name="invites")
    op.drop_table("invites")
    op.drop_index("ix_workspace_members_user_id", table_name="workspace_members")
    op.drop_index("ix_workspace_members_workspace_id", table_name="workspace_members")
    op.drop_table("workspace_members")
    op.drop_table("workspaces")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in reversed(ENUMS):
        enum_type.drop(bind, checkfirst=True)
