"""create legacy import tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("last_log_update", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=False)

    op.create_table(
        "gateways",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("organization_id", sa.Integer(), nullable=False),
        sa.Column("serial_number", sa.String(length=100), nullable=False),
        sa.Column("site_code", sa.String(length=100), nullable=True),
        sa.Column("mac_address", sa.String(length=64), nullable=False),
        sa.Column("ip_address", sa.String(length=255), nullable=False),
        sa.Column("connection_type", sa.String(length=32), nullable=False),
        sa.Column("software_version", sa.String(length=64), nullable=True),
        sa.Column("last_log_update", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("serial_number"),
    )
    op.create_index("ix_gateways_organization_id", "gateways", ["organization_id"], unique=False)

    op.create_table(
        "configuration_files",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("meter_model", sa.String(length=255), nullable=False),
        sa.Column("config_file_content", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("meter_model"),
    )

    op.create_table(
        "meters",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("organization_id", sa.Integer(), nullable=False),
        sa.Column("gateway_id", sa.Integer(), nullable=False),
        sa.Column("configuration_file_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("site_code", sa.String(length=100), nullable=True),
        sa.Column("is_addressable", sa.Boolean(), nullable=False),
        sa.Column("has_load_profile", sa.Boolean(), nullable=False),
        sa.Column("default_name", sa.String(length=255), nullable=True),
        sa.Column("type", sa.String(length=100), nullable=True),
        sa.Column("brand", sa.String(length=100), nullable=True),
        sa.Column("role", sa.String(length=100), nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=True),
        sa.Column("multiplier", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("last_log_update", sa.DateTime(timezone=True), nullable=True),
        sa.Column("software_version", sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["gateway_id"], ["gateways.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["configuration_file_id"],
            ["configuration_files.id"],
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "name",
            "organization_id",
            "gateway_id",
            name="uq_meters_name_organization_gateway",
        ),
    )
    op.create_index("ix_meters_name", "meters", ["name"], unique=False)
    op.create_index("ix_meters_gateway_id", "meters", ["gateway_id"], unique=False)

    measurement_columns = [
        sa.Column(name, sa.Float(), nullable=True)
        for name in (
            "vrms_a", "vrms_b", "vrms_c",
            "irms_a", "irms_b", "irms_c",
            "frequency", "power_factor", "watt", "va", "var",
            "wh_delivered", "wh_received", "wh_net", "wh_total",
            "varh_negative", "varh_positive", "varh_net", "varh_total", "vah_total",
        )
    ]
    demand_columns: list[sa.Column] = []
    for name in ("max_rec_kw_demand", "max_del_kw_demand", "max_pos_kvar_demand", "max_neg_kvar_demand"):
        demand_columns.append(sa.Column(name, sa.Float(), nullable=True))
        demand_columns.append(sa.Column(f"{name}_time", sa.DateTime(timezone=True), nullable=True))
    angle_columns = [
        sa.Column(name, sa.Float(), nullable=True)
        for name in (
            "v_phase_angle_a", "v_phase_angle_b", "v_phase_angle_c",
            "i_phase_angle_a", "i_phase_angle_b", "i_phase_angle_c",
        )
    ]

    op.create_table(
        "meter_readings",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("meter_id", sa.Integer(), nullable=True),
        sa.Column("meter_name", sa.String(length=255), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("reading_at", sa.DateTime(timezone=True), nullable=False),
        *measurement_columns,
        *demand_columns,
        *angle_columns,
        sa.Column("mac_address", sa.String(length=64), nullable=True),
        sa.Column("software_version", sa.String(length=64), nullable=True),
        sa.Column("relay_status", sa.Boolean(), nullable=True),
        sa.Column("genset_status", sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["meter_id"], ["meters.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_meter_readings_meter_name_reading_at",
        "meter_readings",
        ["meter_name", "reading_at"],
        unique=False,
    )
    op.create_index("ix_meter_readings_meter_id", "meter_readings", ["meter_id"], unique=False)

    op.create_table(
        "import_jobs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("kind", sa.String(length=32), nullable=False),
        sa.Column("filename", sa.String(length=512), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("total_records", sa.Integer(), nullable=False),
        sa.Column("processed_records", sa.Integer(), nullable=False),
        sa.Column("error_count", sa.Integer(), nullable=False),
        sa.Column("options", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("result", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_import_jobs_created_at", "import_jobs", ["created_at"], unique=False)
    op.create_index("ix_import_jobs_status", "import_jobs", ["status"], unique=False)
    op.create_index("ix_import_jobs_kind_status", "import_jobs", ["kind", "status"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_import_jobs_kind_status", table_name="import_jobs")
    op.drop_index("ix_import_jobs_status", table_name="import_jobs")
    op.drop_index("ix_import_jobs_created_at", table_name="import_jobs")
    op.drop_table("import_jobs")

    op.drop_index("ix_meter_readings_meter_id", table_name="meter_readings")
    op.drop_index("ix_meter_readings_meter_name_reading_at", table_name="meter_readings")
    op.drop_table("meter_readings")

    op.drop_index("ix_meters_gateway_id", table_name="meters")
    op.drop_index("ix_meters_name", table_name="meters")
    op.drop_table("meters")
    op.drop_table("configuration_files")

    op.drop_index("ix_gateways_organization_id", table_name="gateways")
    op.drop_table("gateways")

    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
    op.drop_table("organizations")
