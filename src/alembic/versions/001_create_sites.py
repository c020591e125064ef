"""Create sites table

Revision ID: 001
Revises:
Create Date: 2026-01-01 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "sites",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column("subdomain", sqlmodel.sql.sqltypes.AutoString(length=63), nullable=False),
        sa.Column(
            "routing_mode",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="subdomain",
        ),
        sa.Column(
            "deployment_status",
            sqlmodel.sql.sqltypes.AutoString(length=20),
            nullable=False,
            server_default="pending",
        ),
        sa.Column("last_deployed_at", sa.DateTime(), nullable=True),
        sa.Column("last_deployment_error", sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "routing_mode IN ('subdomain', 'subpath', 'both')", name="ck_sites_routing_mode"
        ),
        sa.CheckConstraint(
            "deployment_status IN ('pending', 'deploying', 'deployed', 'failed')",
            name="ck_sites_deployment_status",
        ),
    )
    op.create_index("ix_sites_subdomain", "sites", ["subdomain"], unique=True)
    op.create_index("ix_sites_deployment_status", "sites", ["deployment_status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_sites_deployment_status", table_name="sites")
    op.drop_index("ix_sites_subdomain", table_name="sites")
    op.drop_table("sites")
