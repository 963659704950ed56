"""
Import all models here so that:
1. Alembic can auto-detect them when generating migrations
2. Relationships between models resolve correctly

Order matters: import parent tables before child tables.
"""

from fleetops.models.brand import Brand
from fleetops.models.vehicle_model import VehicleModel
from fleetops.models.vehicle import Vehicle
from fleetops.models.vehicle_identification import VehicleIdentification
from fleetops.models.vehicle_assignment import VehicleAssignment, AssignmentStatus
from fleetops.models.audit_log import AuditLog

__all__ = [
    "Brand",
    "VehicleModel",
    "Vehicle",
    "VehicleIdentification",
    "VehicleAssignment",
    "AssignmentStatus",
    "AuditLog",
]
