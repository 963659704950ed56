import enum
from sqlalchemy import (
    Column, Integer, String, Enum, ForeignKey, TIMESTAMP, CheckConstraint, Index, text,
)
from sqlalchemy.orm import relationship
from fleetops.database import Base


class AssignmentStatus(str, enum.Enum):
    ASSIGNED = "assigned"
    RELEASED = "released"
    CHANGED  = "changed"


class VehicleAssignment(Base):
    __tablename__ = "vehicle_assignments"

    id                = Column(Integer, primary_key=True, index=True)
    vehicleId         = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    driverCurp        = Column(String(32), nullable=False, index=True)
    assignedAt        = Column(TIMESTAMP(timezone=True), nullable=False)
    releasedAt        = Column(TIMESTAMP(timezone=True), nullable=True)  # NULL = still assigned
    status            = Column(
        Enum(AssignmentStatus, name="assignment_status",
             values_callable=lambda e: [m.value for m in e]),
        default=AssignmentStatus.ASSIGNED, nullable=False,
    )
    changedDriverCurp = Column(String(32), nullable=True)

    __table_args__ = (
        # At most one active record per vehicle and per driver
        Index("uq_assignment_active_vehicle", "vehicleId", unique=True,
              sqlite_where=text("status = 'assigned'"),
              postgresql_where=text("status = 'assigned'")),
        Index("uq_assignment_active_driver", "driverCurp", unique=True,
              sqlite_where=text("status = 'assigned'"),
              postgresql_where=text("status = 'assigned'")),
        CheckConstraint(
            "(status = 'assigned' AND \"releasedAt\" IS NULL)"
            " OR (status <> 'assigned' AND \"releasedAt\" IS NOT NULL)",
            name="chk_released_at_matches_status",
        ),
        CheckConstraint(
            "(status = 'changed' AND \"changedDriverCurp\" IS NOT NULL)"
            " OR (status <> 'changed' AND \"changedDriverCurp\" IS NULL)",
            name="chk_changed_driver_matches_status",
        ),
    )

    # ─── Relationships ─────────────────────────────────────────────────────────
    vehicle = relationship("Vehicle", back_populates="assignments")

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ASSIGNED

    def __repr__(self):
        return (f"<VehicleAssignment id={self.id} vehicleId={self.vehicleId} "
                f"driver={self.driverCurp} status={self.status}>")
