from sqlalchemy.orm import Session
from fleetops.models.audit_log import AuditLog


def log_action(
    db: Session,
    actor: str | None,
    action: str,
    entity_type: str,
    entity_id: int | None = None,
    description: str | None = None,
) -> None:
    """
    Write an audit log entry.

    Args:
        db:          Active DB session (adds but does NOT commit; caller commits)
        actor:       Who triggered the action (None = system action)
        action:      Verb: CREATE, UPDATE, ASSIGN, RELEASE, CHANGE_DRIVER
        entity_type: Model name: "Vehicle", "VehicleAssignment"
        entity_id:   Primary key of the affected record
        description: Human-readable description

    Usage:
        log_action(db, None, "ASSIGN", "VehicleAssignment", assignment.id,
                   f"Driver {curp} assigned to vehicle {vin}")
        db.commit()
    """
    entry = AuditLog(
        actor=actor,
        action=action,
        entityType=entity_type,
        entityId=entity_id,
        description=description,
    )
    db.add(entry)
    # Do NOT commit here; the caller's transaction commits everything together
