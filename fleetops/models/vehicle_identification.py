from sqlalchemy import Column, Integer, String, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from fleetops.database import Base


class VehicleIdentification(Base):
    __tablename__ = "vehicle_identifications"

    id           = Column(Integer, primary_key=True, index=True)
    vehicleId    = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"),
                          unique=True, nullable=False)
    plate        = Column(String(20), unique=True, nullable=False, index=True)
    purchaseDate = Column(Date, nullable=True)
    photoUrl     = Column(String(500), nullable=False)
    cost         = Column(Numeric(12, 2), nullable=True)

    # ─── Relationships ─────────────────────────────────────────────────────────
    vehicle = relationship("Vehicle", back_populates="identification")

    def __repr__(self):
        return f"<VehicleIdentification id={self.id} plate={self.plate}>"
