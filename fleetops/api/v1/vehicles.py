from fastapi import APIRouter, Depends, File, Form, Header, UploadFile, status
from fastapi.responses import FileResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Optional

from fleetops.clients.image_store import LocalImageStore, get_image_store
from fleetops.database import get_db
from fleetops.schemas.vehicle import VehicleCreateRequest, VehicleUpdateRequest
from fleetops.schemas.common import success_response, ErrorResponse
from fleetops.services.vehicle_service import vehicle_service
from fleetops.utils.exceptions import BadRequestException

router = APIRouter(
    prefix="/vehicles",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)


@router.get("", summary="List all vehicles")
def list_vehicles(db: Session = Depends(get_db)):
    return success_response("Vehicles retrieved successfully", vehicle_service.list_vehicles(db))


@router.get("/model/{model}", summary="List vehicles of a model")
def list_by_model(model: str, db: Session = Depends(get_db)):
    return success_response("Vehicles retrieved successfully", vehicle_service.list_by_model(db, model))


@router.get("/view/{filename}", summary="View a vehicle photo")
def view_image(filename: str, images: LocalImageStore = Depends(get_image_store)):
    return FileResponse(images.path_for(filename))


@router.get("/{vin}", summary="Get vehicle by VIN")
def get_vehicle(vin: str, db: Session = Depends(get_db)):
    return success_response("Vehicle retrieved", vehicle_service.get_vehicle(db, vin.upper()))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create vehicle with photo")
def create_vehicle(
    vehicle:   str        = Form(..., description="Vehicle JSON document"),
    imageFile: UploadFile = File(...),
    db:        Session    = Depends(get_db),
    images:    LocalImageStore = Depends(get_image_store),
    actor:     Optional[str]   = Header(None, alias="X-Actor"),
):
    try:
        body = VehicleCreateRequest.model_validate_json(vehicle)
    except ValidationError as e:
        details = [{"field": ".".join(str(l) for l in err["loc"]) or "vehicle",
                    "message": err["msg"]} for err in e.errors()]
        raise BadRequestException("Invalid vehicle JSON", details=details)

    data = vehicle_service.create_vehicle(db, body, imageFile, images, actor)
    return success_response("Vehicle created successfully", data)


@router.put("/{vin}", summary="Update vehicle")
def update_vehicle(
    vin:   str,
    body:  VehicleUpdateRequest,
    db:    Session       = Depends(get_db),
    actor: Optional[str] = Header(None, alias="X-Actor"),
):
    data = vehicle_service.update_vehicle(db, vin.upper(), body, actor)
    return success_response("Vehicle updated successfully", data)
