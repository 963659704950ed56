from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship
from fleetops.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id                 = Column(Integer, primary_key=True, index=True)
    vin                = Column(String(32), unique=True, nullable=False, index=True)
    modelId            = Column(Integer, ForeignKey("models.id"), nullable=False)
    registrationDate   = Column(Date, nullable=True)
    # Id of the current "assigned" record, resolved through the ledger. NULL = idle.
    activeAssignmentId = Column(Integer, nullable=True)

    # ─── Relationships ─────────────────────────────────────────────────────────
    model          = relationship("VehicleModel", back_populates="vehicles")
    identification = relationship("VehicleIdentification", back_populates="vehicle",
                                  uselist=False, cascade="all, delete-orphan")
    assignments    = relationship("VehicleAssignment", back_populates="vehicle",
                                  order_by="VehicleAssignment.id")

    def __repr__(self):
        return f"<Vehicle id={self.id} vin={self.vin} activeAssignmentId={self.activeAssignmentId}>"
