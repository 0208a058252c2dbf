"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
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
    ]


def upgrade() -> None:
    # Host snapshots
    op.create_table(
        "hosts",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("hostname", sa.String(255), nullable=False),
        sa.Column("location", sa.String(100), nullable=True),
        sa.Column("environment", sa.String(100), nullable=True),
        sa.Column("cpu_model", sa.String(255), nullable=False, server_default=""),
        sa.Column("cpu_sockets", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cpu_cores", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cpu_threads", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cores_per_socket", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cluster_name", sa.String(255), nullable=True),
        sa.Column("archived", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_hosts_hostname_archived", "hosts", ["hostname", "archived"])
    op.create_index("idx_hosts_location", "hosts", ["location"])
    op.create_index("idx_hosts_created_at", "hosts", ["created_at"])

    # Databases hosted on a snapshot
    op.create_table(
        "databases",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("host_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("db_id", sa.String(64), nullable=False),
        sa.Column("technology", sa.String(20), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("details", postgresql.JSONB(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["host_id"], ["hosts.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_databases_host", "databases", ["host_id"])
    op.create_index("idx_databases_role_status", "databases", ["technology", "role", "status"])
    op.create_index("idx_databases_correlation", "databases", ["db_id", "name"])

    op.create_table(
        "database_licenses",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("database_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("license_type_id", sa.String(32), nullable=False),
        sa.Column("name", sa.String(255), nullable=False, server_default=""),
        sa.Column("count", sa.Float(), nullable=False, server_default="0"),
        sa.Column("ignored", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("ignored_comment", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["database_id"], ["databases.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("database_id", "license_type_id", name="uq_database_license_type"),
    )
    op.create_index("idx_database_licenses_type", "database_licenses", ["license_type_id"])

    # Cluster topology
    op.create_table(
        "clusters",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("cpu", sa.Float(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "cluster_members",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("cluster_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("hostname", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["cluster_id"], ["clusters.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("cluster_id", "hostname", name="uq_cluster_member_hostname"),
    )
    op.create_index("idx_cluster_members_hostname", "cluster_members", ["hostname"])

    # Licence type catalogue
    op.create_table(
        "license_types",
        sa.Column("id", sa.String(32), nullable=False),
        sa.Column("item_description", sa.String(500), nullable=False, server_default=""),
        sa.Column("metric", sa.String(50), nullable=False),
        sa.Column("technology", sa.String(20), nullable=False),
        sa.Column(
            "aliases",
            postgresql.ARRAY(sa.String(255)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("default_core_factor", sa.Float(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_license_types_technology", "license_types", ["technology"])

    op.create_table(
        "core_factors",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("license_type_id", sa.String(32), nullable=False),
        sa.Column("processor_pattern", sa.String(255), nullable=False),
        sa.Column("factor", sa.Float(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["license_type_id"], ["license_types.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_core_factors_license_type", "core_factors", ["license_type_id"])

    # Contracts
    op.create_table(
        "contracts",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("contract_id", sa.String(100), nullable=False, server_default=""),
        sa.Column("csi", sa.String(100), nullable=False, server_default=""),
        sa.Column("license_type_id", sa.String(32), nullable=False),
        sa.Column("technology", sa.String(20), nullable=False),
        sa.Column("unlimited", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("basket", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("restricted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("licenses_count", sa.Float(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["license_type_id"], ["license_types.id"], ondelete="RESTRICT"),
        # Unlimited contracts always pool their coverage
        sa.CheckConstraint("NOT unlimited OR basket", name="ck_contracts_unlimited_basket"),
    )
    op.create_index("idx_contracts_technology", "contracts", ["technology"])
    op.create_index("idx_contracts_license_type", "contracts", ["license_type_id"])

    op.create_table(
        "contract_hosts",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("contract_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("hostname", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("contract_id", "hostname", name="uq_contract_host"),
    )
    op.create_index("idx_contract_hosts_hostname", "contract_hosts", ["hostname"])


def downgrade() -> None:
    op.drop_table("contract_hosts")
    op.drop_table("contracts")
    op.drop_table("core_factors")
    op.drop_table("license_types")
    op.drop_table("cluster_members")
    op.drop_table("clusters")
    op.drop_table("database_licenses")
    op.drop_table("databases")
    op.drop_table("hosts")
