import logging
from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fleetops.clients.image_store import LocalImageStore
from fleetops.models.brand import Brand
from fleetops.models.vehicle import Vehicle
from fleetops.models.vehicle_assignment import VehicleAssignment
from fleetops.models.vehicle_identification import VehicleIdentification
from fleetops.models.vehicle_model import VehicleModel
from fleetops.schemas.vehicle import VehicleCreateRequest, VehicleUpdateRequest
from fleetops.utils.audit import log_action
from fleetops.utils.exceptions import (
    NotFoundException, DuplicateEntryException, UploadFailedException,
)

logger = logging.getLogger(__name__)


def _serialize(db: Session, v: Vehicle) -> dict:
    active = db.get(VehicleAssignment, v.activeAssignmentId) if v.activeAssignmentId else None
    ident = v.identification
    return {
        "vin":              v.vin,
        "brand":            v.model.brand.name,
        "model":            v.model.name,
        "plate":            ident.plate if ident else None,
        "photoUrl":         ident.photoUrl if ident else None,
        "purchaseDate":     ident.purchaseDate.isoformat() if ident and ident.purchaseDate else None,
        "cost":             str(ident.cost) if ident and ident.cost is not None else None,
        "registrationDate": v.registrationDate.isoformat() if v.registrationDate else None,
        "assignmentStatus": active.status.value if active else "unassigned",
        "assignmentId":     v.activeAssignmentId,
    }


def _resolve_model(db: Session, brand_name: str, model_name: str) -> VehicleModel:
    """Find the brand/model reference rows, creating whichever is missing."""
    brand = db.query(Brand).filter(Brand.name == brand_name).first()
    if not brand:
        brand = Brand(name=brand_name)
        db.add(brand)
        db.flush()

    model = db.query(VehicleModel).filter(
        VehicleModel.brandId == brand.id,
        VehicleModel.name == model_name,
    ).first()
    if not model:
        model = VehicleModel(name=model_name, brandId=brand.id)
        db.add(model)
        db.flush()
    return model


class VehicleService:

    def get_vehicle(self, db: Session, vin: str) -> dict:
        v = db.query(Vehicle).filter(Vehicle.vin == vin).first()
        if not v:
            raise NotFoundException(f"Vehicle with VIN {vin} not found")
        return _serialize(db, v)

    def list_by_model(self, db: Session, model_name: str) -> list[dict]:
        models = db.query(VehicleModel).filter(VehicleModel.name == model_name).all()
        if not models:
            raise NotFoundException(f"Model {model_name} not found")

        vehicles = db.query(Vehicle)\
                     .filter(Vehicle.modelId.in_([m.id for m in models]))\
                     .order_by(Vehicle.vin).all()
        if not vehicles:
            raise NotFoundException(f"No vehicles found for model {model_name}")
        return [_serialize(db, v) for v in vehicles]

    def list_vehicles(self, db: Session) -> list[dict]:
        vehicles = db.query(Vehicle).order_by(Vehicle.vin).all()
        if not vehicles:
            raise NotFoundException("No vehicles found in the system")
        return [_serialize(db, v) for v in vehicles]

    def create_vehicle(
        self, db: Session, data: VehicleCreateRequest, image: UploadFile,
        images: LocalImageStore, actor: str | None = None,
    ) -> dict:
        if db.query(Vehicle).filter(Vehicle.vin == data.vin).first():
            raise DuplicateEntryException(f"Vehicle with VIN {data.vin} already exists", field="vin")
        if db.query(VehicleIdentification).filter(VehicleIdentification.plate == data.plate).first():
            raise DuplicateEntryException(f"Plate {data.plate} already registered", field="plate")

        model = _resolve_model(db, data.brand, data.model)

        photo_url = images.upload(data.vin, image)
        if photo_url is None:
            db.rollback()
            raise UploadFailedException()

        vehicle = Vehicle(
            vin=data.vin,
            modelId=model.id,
            registrationDate=data.registrationDate,
            activeAssignmentId=None,
        )
        vehicle.identification = VehicleIdentification(
            plate=data.plate,
            purchaseDate=data.purchaseDate,
            photoUrl=photo_url,
            cost=data.cost,
        )
        db.add(vehicle)
        try:
            db.flush()
            log_action(db, actor, "CREATE", "Vehicle", vehicle.id,
                       f"Created vehicle {data.vin} ({data.brand} {data.model})")
            db.commit()
        except IntegrityError as e:
            # Lost a race against a concurrent create with the same VIN or plate
            db.rollback()
            images.delete(photo_url)
            logger.warning(f"Vehicle {data.vin} rejected by constraint: {e.orig}")
            raise DuplicateEntryException(f"Vehicle with VIN {data.vin} already exists", field="vin")

        db.refresh(vehicle)
        logger.info(f"Vehicle {vehicle.vin} created")
        return _serialize(db, vehicle)

    def update_vehicle(
        self, db: Session, vin: str, data: VehicleUpdateRequest, actor: str | None = None,
    ) -> dict:
        v = db.query(Vehicle).filter(Vehicle.vin == vin).first()
        if not v:
            raise NotFoundException(f"Vehicle with VIN {vin} not found")
        ident = v.identification

        if data.plate and data.plate != ident.plate:
            if db.query(VehicleIdentification).filter(
                VehicleIdentification.plate == data.plate,
                VehicleIdentification.vehicleId != v.id,
            ).first():
                raise DuplicateEntryException(f"Plate {data.plate} already used", field="plate")

        if data.brand or data.model:
            brand_name = data.brand or v.model.brand.name
            model_name = data.model or v.model.name
            v.model = _resolve_model(db, brand_name, model_name)

        if data.plate:                    ident.plate        = data.plate
        if data.purchaseDate:             ident.purchaseDate = data.purchaseDate
        if data.cost is not None:         ident.cost         = data.cost
        if data.registrationDate:         v.registrationDate = data.registrationDate

        log_action(db, actor, "UPDATE", "Vehicle", v.id, f"Updated vehicle {v.vin}")
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Update of vehicle {vin} rejected by constraint: {e.orig}")
            raise DuplicateEntryException(f"Plate {data.plate} already used", field="plate")
        db.refresh(v)
        return _serialize(db, v)


vehicle_service = VehicleService()
