"""initial schema: vehicles, identifications, assignment ledger, audit log

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

assignment_status = sa.Enum("assigned", "released", "changed", name="assignment_status")


def upgrade() -> None:
    op.create_table(
        "brands",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )
    op.create_index("ix_brands_id", "brands", ["id"])

    op.create_table(
        "models",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("brandId", sa.Integer(), sa.ForeignKey("brands.id"), nullable=False),
        sa.UniqueConstraint("brandId", "name", name="uq_model_brand_name"),
    )
    op.create_index("ix_models_id", "models", ["id"])
    op.create_index("ix_models_name", "models", ["name"])

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("vin", sa.String(32), nullable=False),
        sa.Column("modelId", sa.Integer(), sa.ForeignKey("models.id"), nullable=False),
        sa.Column("registrationDate", sa.Date(), nullable=True),
        sa.Column("activeAssignmentId", sa.Integer(), nullable=True),
    )
    op.create_index("ix_vehicles_id", "vehicles", ["id"])
    op.create_index("ix_vehicles_vin", "vehicles", ["vin"], unique=True)

    op.create_table(
        "vehicle_identifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("vehicleId", sa.Integer(),
                  sa.ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("plate", sa.String(20), nullable=False),
        sa.Column("purchaseDate", sa.Date(), nullable=True),
        sa.Column("photoUrl", sa.String(500), nullable=False),
        sa.Column("cost", sa.Numeric(12, 2), nullable=True),
    )
    op.create_index("ix_vehicle_identifications_id", "vehicle_identifications", ["id"])
    op.create_index("ix_vehicle_identifications_plate", "vehicle_identifications", ["plate"], unique=True)

    op.create_table(
        "vehicle_assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("vehicleId", sa.Integer(), sa.ForeignKey("vehicles.id"), nullable=False),
        sa.Column("driverCurp", sa.String(32), nullable=False),
        sa.Column("assignedAt", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("releasedAt", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("status", assignment_status, nullable=False),
        sa.Column("changedDriverCurp", sa.String(32), nullable=True),
        sa.CheckConstraint(
            "(status = 'assigned' AND \"releasedAt\" IS NULL)"
            " OR (status <> 'assigned' AND \"releasedAt\" IS NOT NULL)",
            name="chk_released_at_matches_status",
        ),
        sa.CheckConstraint(
            "(status = 'changed' AND \"changedDriverCurp\" IS NOT NULL)"
            " OR (status <> 'changed' AND \"changedDriverCurp\" IS NULL)",
            name="chk_changed_driver_matches_status",
        ),
    )
    op.create_index("ix_vehicle_assignments_id", "vehicle_assignments", ["id"])
    op.create_index("ix_vehicle_assignments_vehicleId", "vehicle_assignments", ["vehicleId"])
    op.create_index("ix_vehicle_assignments_driverCurp", "vehicle_assignments", ["driverCurp"])
    op.create_index(
        "uq_assignment_active_vehicle", "vehicle_assignments", ["vehicleId"], unique=True,
        sqlite_where=sa.text("status = 'assigned'"),
        postgresql_where=sa.text("status = 'assigned'"),
    )
    op.create_index(
        "uq_assignment_active_driver", "vehicle_assignments", ["driverCurp"], unique=True,
        sqlite_where=sa.text("status = 'assigned'"),
        postgresql_where=sa.text("status = 'assigned'"),
    )

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("actor", sa.String(100), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("entityType", sa.String(100), nullable=False),
        sa.Column("entityId", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("createdAt", sa.TIMESTAMP(timezone=True),
                  server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_audit_logs_id", "audit_logs", ["id"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_index("uq_assignment_active_driver", table_name="vehicle_assignments")
    op.drop_index("uq_assignment_active_vehicle", table_name="vehicle_assignments")
    op.drop_table("vehicle_assignments")
    op.drop_table("vehicle_identifications")
    op.drop_table("vehicles")
    op.drop_table("models")
    op.drop_table("brands")
    assignment_status.drop(op.get_bind(), checkfirst=True)
