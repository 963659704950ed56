"""Helpers shared by the test modules: in-memory database and app wiring."""
import tempfile

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fleetops.models import Brand, VehicleModel, Vehicle, VehicleIdentification
from fleetops.clients.driver_client import InMemoryDriverLookup, get_driver_lookup
from fleetops.clients.image_store import LocalImageStore, get_image_store
from fleetops.database import Base, get_db


def make_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(bind=engine, autocommit=False, autoflush=False,
                                expire_on_commit=False)


def make_image_store(root: str | None = None) -> LocalImageStore:
    return LocalImageStore(
        root or tempfile.mkdtemp(prefix="fleetops-images-"),
        "/api/v1/vehicles/view",
        max_bytes=1024 * 1024,
        allowed_types=["image/jpeg", "image/png"],
    )


def make_client(app, session_factory, drivers: InMemoryDriverLookup, images: LocalImageStore) -> TestClient:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_driver_lookup] = lambda: drivers
    app.dependency_overrides[get_image_store] = lambda: images
    return TestClient(app, raise_server_exceptions=False)


def seed_vehicle(db, vin: str, plate: str | None = None, brand: str = "Nissan", model: str = "Versa"):
    """Insert a vehicle directly, bypassing the photo upload."""
    b = db.query(Brand).filter(Brand.name == brand).first() or Brand(name=brand)
    m = db.query(VehicleModel).filter(VehicleModel.name == model).first() \
        or VehicleModel(name=model, brand=b)
    vehicle = Vehicle(vin=vin, model=m)
    vehicle.identification = VehicleIdentification(
        plate=plate or f"PLT-{vin}", photoUrl=f"/api/v1/vehicles/view/{vin}.jpg",
    )
    db.add(vehicle)
    db.commit()
    return vehicle
