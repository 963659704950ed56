"""
Vehicle assignment workflow.

Every assignment record starts as ``assigned`` and ends as either
``released`` (driver handed the vehicle back) or ``changed`` (another
driver took over, recorded in a fresh ``assigned`` record). Records are
never deleted or reopened, so the table doubles as the assignment history.

One vehicle and one driver hold at most one ``assigned`` record. The
checks below give callers precise errors; the partial unique indexes on
``vehicle_assignments`` are what actually hold the line when two requests
race, and a violation is reported as a conflict.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fleetops.clients.driver_client import DriverLookup
from fleetops.models.vehicle import Vehicle
from fleetops.models.vehicle_assignment import VehicleAssignment, AssignmentStatus
from fleetops.schemas.assignment import AssignRequest, ReleaseRequest, ChangeDriverRequest
from fleetops.utils.audit import log_action
from fleetops.utils.exceptions import (
    NotFoundException, ConflictException, BadRequestException,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def _serialize(a: VehicleAssignment) -> dict:
    return {
        "id":                a.id,
        "vin":               a.vehicle.vin,
        "driverCurp":        a.driverCurp,
        "assignedAt":        _iso(a.assignedAt),
        "releasedAt":        _iso(a.releasedAt),
        "status":            a.status.value,
        "changedDriverCurp": a.changedDriverCurp,
    }


class AssignmentService:

    # ─── Lookups ──────────────────────────────────────────────────────────────
    def _lock_vehicle(self, db: Session, vin: str) -> Vehicle:
        # FOR UPDATE serializes transitions on the same vehicle (no-op on SQLite)
        vehicle = db.query(Vehicle).filter(Vehicle.vin == vin).with_for_update().first()
        if not vehicle:
            raise NotFoundException(f"Vehicle with VIN {vin} not found")
        return vehicle

    def _active_for_vehicle(self, db: Session, vehicle: Vehicle) -> VehicleAssignment | None:
        if vehicle.activeAssignmentId is None:
            return None
        active = db.get(VehicleAssignment, vehicle.activeAssignmentId)
        if active is None or active.status != AssignmentStatus.ASSIGNED:
            return None
        return active

    def _active_for_driver(self, db: Session, curp: str) -> VehicleAssignment | None:
        return db.query(VehicleAssignment).filter(
            VehicleAssignment.driverCurp == curp,
            VehicleAssignment.status == AssignmentStatus.ASSIGNED,
        ).first()

    def _require_driver(self, drivers: DriverLookup, curp: str, label: str = "Driver") -> None:
        if not drivers.exists(curp):
            raise NotFoundException(f"{label} with CURP {curp} not found")

    def _commit(self, db: Session, conflict_message: str) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Assignment rejected by constraint: {e.orig}")
            raise ConflictException(conflict_message)

    # ─── Queries ──────────────────────────────────────────────────────────────
    def find_by_status(self, db: Session, status: AssignmentStatus) -> list[dict]:
        items = db.query(VehicleAssignment)\
                  .filter(VehicleAssignment.status == status)\
                  .order_by(VehicleAssignment.assignedAt, VehicleAssignment.id).all()
        if not items:
            raise NotFoundException(f"No vehicle assignments found with status: {status.value}")
        return [_serialize(a) for a in items]

    def history(self, db: Session) -> list[dict]:
        items = db.query(VehicleAssignment)\
                  .order_by(VehicleAssignment.assignedAt, VehicleAssignment.id).all()
        if not items:
            raise NotFoundException("No vehicle assignments found in the system")
        return [_serialize(a) for a in items]

    def find_by_vin(self, db: Session, vin: str) -> dict:
        vehicle = db.query(Vehicle).filter(Vehicle.vin == vin).first()
        if not vehicle:
            raise NotFoundException(f"Vehicle with VIN {vin} not found")
        active = self._active_for_vehicle(db, vehicle)
        if active is None:
            raise ConflictException(f"Vehicle with VIN {vin} is not assigned to any driver")
        return _serialize(active)

    # ─── Transitions ──────────────────────────────────────────────────────────
    def assign(self, db: Session, data: AssignRequest, drivers: DriverLookup,
               actor: str | None = None) -> dict:
        vehicle = self._lock_vehicle(db, data.vin)
        if self._active_for_vehicle(db, vehicle) is not None:
            raise ConflictException(f"Vehicle with VIN {data.vin} is already assigned to a driver")

        self._require_driver(drivers, data.driverCurp)
        if self._active_for_driver(db, data.driverCurp) is not None:
            raise ConflictException(f"Driver with CURP {data.driverCurp} is already assigned to a vehicle")

        assignment = VehicleAssignment(
            vehicleId=vehicle.id,
            driverCurp=data.driverCurp,
            assignedAt=_utcnow(),
            releasedAt=None,
            status=AssignmentStatus.ASSIGNED,
        )
        db.add(assignment)
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Assignment of {data.vin} rejected by constraint: {e.orig}")
            raise ConflictException(f"Vehicle with VIN {data.vin} or driver {data.driverCurp} is already assigned")

        vehicle.activeAssignmentId = assignment.id
        log_action(db, actor, "ASSIGN", "VehicleAssignment", assignment.id,
                   f"Driver {data.driverCurp} assigned to vehicle {data.vin}")
        self._commit(db, f"Vehicle with VIN {data.vin} or driver {data.driverCurp} is already assigned")
        logger.info(f"Vehicle {data.vin} assigned to driver {data.driverCurp}")
        return _serialize(assignment)

    def release(self, db: Session, data: ReleaseRequest, drivers: DriverLookup,
                actor: str | None = None) -> dict:
        vehicle = self._lock_vehicle(db, data.vin)
        active = self._active_for_vehicle(db, vehicle)
        if active is None:
            raise ConflictException(f"Vehicle with VIN {data.vin} is not assigned to any driver")

        self._require_driver(drivers, data.driverCurp)
        if active.driverCurp != data.driverCurp:
            raise BadRequestException(f"Driver CURP {data.driverCurp} does not match the assigned driver")

        active.releasedAt = _utcnow()
        active.status = AssignmentStatus.RELEASED
        vehicle.activeAssignmentId = None
        log_action(db, actor, "RELEASE", "VehicleAssignment", active.id,
                   f"Driver {data.driverCurp} released from vehicle {data.vin}")
        self._commit(db, f"Vehicle with VIN {data.vin} changed while it was being released")
        logger.info(f"Vehicle {data.vin} released by driver {data.driverCurp}")
        return _serialize(active)

    def change_driver(self, db: Session, data: ChangeDriverRequest, drivers: DriverLookup,
                      actor: str | None = None) -> dict:
        vehicle = self._lock_vehicle(db, data.vin)
        if self._active_for_vehicle(db, vehicle) is None:
            raise ConflictException(f"Vehicle with VIN {data.vin} is not assigned to any driver")

        self._require_driver(drivers, data.driverCurp)
        self._require_driver(drivers, data.changedDriverCurp, label="Changed driver")

        old = self._active_for_driver(db, data.driverCurp)
        if old is None:
            raise NotFoundException(f"Driver with CURP {data.driverCurp} is not assigned to any vehicle")
        if old.vehicleId != vehicle.id:
            raise NotFoundException(f"Driver with CURP {data.driverCurp} is not assigned to vehicle {data.vin}")

        if data.changedDriverCurp == data.driverCurp:
            raise ConflictException(f"Driver with CURP {data.changedDriverCurp} is already assigned to this vehicle")
        if self._active_for_driver(db, data.changedDriverCurp) is not None:
            raise ConflictException(f"Driver with CURP {data.changedDriverCurp} is already assigned to a vehicle")

        # Both records carry the same instant so old.releasedAt <= new.assignedAt
        now = _utcnow()
        old.releasedAt = now
        old.status = AssignmentStatus.CHANGED
        old.changedDriverCurp = data.changedDriverCurp
        # The old row must leave "assigned" before the new one enters it
        db.flush()

        new = VehicleAssignment(
            vehicleId=vehicle.id,
            driverCurp=data.changedDriverCurp,
            assignedAt=now,
            releasedAt=None,
            status=AssignmentStatus.ASSIGNED,
        )
        db.add(new)
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Driver change on {data.vin} rejected by constraint: {e.orig}")
            raise ConflictException(f"Driver with CURP {data.changedDriverCurp} is already assigned to a vehicle")

        vehicle.activeAssignmentId = new.id
        log_action(db, actor, "CHANGE_DRIVER", "VehicleAssignment", new.id,
                   f"Vehicle {data.vin} handed from {data.driverCurp} to {data.changedDriverCurp}")
        self._commit(db, f"Driver with CURP {data.changedDriverCurp} is already assigned to a vehicle")
        logger.info(f"Vehicle {data.vin} changed driver {data.driverCurp} -> {data.changedDriverCurp}")
        return _serialize(new)


assignment_service = AssignmentService()
