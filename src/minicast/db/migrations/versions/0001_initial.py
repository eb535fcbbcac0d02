"""Developers, apps and points ledger.

Revision ID: 0001_initial
Revises:
Create Date: 2026-09-02
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "developers",
        sa.Column("developer_id", sa.String(128), primary_key=True),
        sa.Column("identity", sa.String(200), nullable=False),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("verification_status", sa.String(32), nullable=False),
        sa.Column("wallet_proven", sa.Boolean, nullable=False),
        sa.Column("domain_proven", sa.Boolean, nullable=False),
        sa.Column("verified", sa.Boolean, nullable=False),
        sa.Column("verified_via", sa.String(32), nullable=True),
        sa.Column("verified_by", sa.String(200), nullable=True),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("verified_domain", sa.String(500), nullable=True),
        sa.Column("admin_role", sa.String(32), nullable=True),
        sa.Column("challenge_domain", sa.String(500), nullable=True),
        sa.Column("challenge_token", sa.String(128), nullable=True),
        sa.Column("challenge_issued_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_developers_identity", "developers", ["identity"], unique=True)

    op.create_table(
        "apps",
        sa.Column("app_id", sa.String(128), primary_key=True),
        sa.Column("url", sa.String(2048), nullable=False),
        sa.Column(
            "developer_id",
            sa.String(128),
            sa.ForeignKey("developers.developer_id", name="fk_apps_developer_id_developers"),
            nullable=False,
        ),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("icon_url", sa.String(2048), nullable=True),
        sa.Column("header_image_url", sa.String(2048), nullable=True),
        sa.Column("base_mini_app_url", sa.String(2048), nullable=True),
        sa.Column("farcaster_url", sa.String(2048), nullable=True),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("developer_tags", sa.JSON, nullable=False),
        sa.Column("screenshots", sa.JSON, nullable=False),
        sa.Column("review_message", sa.Text, nullable=True),
        sa.Column("notes_to_admin", sa.Text, nullable=True),
        sa.Column("support_email", sa.String(320), nullable=True),
        sa.Column("twitter_url", sa.String(500), nullable=True),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("verified", sa.Boolean, nullable=False),
        sa.Column("contract_address", sa.String(42), nullable=True),
        sa.Column("contract_verified", sa.Boolean, nullable=False),
        sa.Column("manifest_snapshot", sa.JSON, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_apps_url", "apps", ["url"], unique=True)
    op.create_index("ix_apps_developer_id", "apps", ["developer_id"])
    op.create_index("ix_apps_status", "apps", ["status"])

    op.create_table(
        "user_points",
        sa.Column("identity", sa.String(200), primary_key=True),
        sa.Column("total_points", sa.Integer, nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "points_transactions",
        sa.Column("transaction_id", sa.String(128), primary_key=True),
        sa.Column("identity", sa.String(200), nullable=False),
        sa.Column("points", sa.Integer, nullable=False),
        sa.Column("reason", sa.String(50), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("reference_id", sa.String(128), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_points_transactions_identity", "points_transactions", ["identity"])
    op.create_index("ix_points_transactions_reference_id", "points_transactions", ["reference_id"])


def downgrade() -> None:
    op.drop_table("points_transactions")
    op.drop_table("user_points")
    op.drop_table("apps")
    op.drop_table("developers")
