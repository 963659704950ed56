from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from fleetops.database import Base


class Brand(Base):
    __tablename__ = "brands"

    id   = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    models = relationship("VehicleModel", back_populates="brand")

    def __repr__(self):
        return f"<Brand id={self.id} name={self.name}>"
