from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from fleetops.database import Base


class VehicleModel(Base):
    __tablename__ = "models"

    id      = Column(Integer, primary_key=True, index=True)
    name    = Column(String(100), nullable=False, index=True)
    brandId = Column(Integer, ForeignKey("brands.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("brandId", "name", name="uq_model_brand_name"),
    )

    # ─── Relationships ─────────────────────────────────────────────────────────
    brand    = relationship("Brand", back_populates="models")
    vehicles = relationship("Vehicle", back_populates="model")

    def __repr__(self):
        return f"<VehicleModel id={self.id} name={self.name} brandId={self.brandId}>"
