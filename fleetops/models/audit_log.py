from sqlalchemy import Column, Integer, String, Text, TIMESTAMP
from sqlalchemy.sql import func
from fleetops.database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id          = Column(Integer, primary_key=True, index=True)
    actor       = Column(String(100), nullable=True)        # NULL = system action
    action      = Column(String(100), nullable=False)       # e.g. CREATE, ASSIGN, RELEASE, CHANGE_DRIVER
    entityType  = Column(String(100), nullable=False)       # e.g. Vehicle, VehicleAssignment
    entityId    = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    createdAt   = Column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<AuditLog id={self.id} action={self.action} entity={self.entityType}:{self.entityId}>"
