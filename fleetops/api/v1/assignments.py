from fastapi import APIRouter, Depends, Header, status
from sqlalchemy.orm import Session
from typing import Optional

from fleetops.clients.driver_client import DriverLookup, get_driver_lookup
from fleetops.database import get_db
from fleetops.models.vehicle_assignment import AssignmentStatus
from fleetops.schemas.assignment import AssignRequest, ReleaseRequest, ChangeDriverRequest
from fleetops.schemas.common import success_response, ErrorResponse
from fleetops.services.assignment_service import assignment_service

router = APIRouter(
    prefix="/assignments",
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)


@router.get("/history", summary="Full assignment history")
def history(db: Session = Depends(get_db)):
    return success_response("Assignment history retrieved", assignment_service.history(db))


@router.get("/status/{assignment_status}", summary="List assignments by status")
def find_by_status(assignment_status: AssignmentStatus, db: Session = Depends(get_db)):
    data = assignment_service.find_by_status(db, assignment_status)
    return success_response("Assignments retrieved", data)


@router.get("/vin/{vin}", summary="Current assignment of a vehicle")
def find_by_vin(vin: str, db: Session = Depends(get_db)):
    return success_response("Assignment retrieved", assignment_service.find_by_vin(db, vin.upper()))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Assign vehicle to driver")
def assign(
    body:    AssignRequest,
    db:      Session       = Depends(get_db),
    drivers: DriverLookup  = Depends(get_driver_lookup),
    actor:   Optional[str] = Header(None, alias="X-Actor"),
):
    data = assignment_service.assign(db, body, drivers, actor)
    return success_response("Vehicle assigned to driver", data)


@router.patch("/release", summary="Release vehicle from driver")
def release(
    body:    ReleaseRequest,
    db:      Session       = Depends(get_db),
    drivers: DriverLookup  = Depends(get_driver_lookup),
    actor:   Optional[str] = Header(None, alias="X-Actor"),
):
    data = assignment_service.release(db, body, drivers, actor)
    return success_response("Vehicle released from driver", data)


@router.patch("/change-driver", summary="Hand vehicle over to another driver")
def change_driver(
    body:    ChangeDriverRequest,
    db:      Session       = Depends(get_db),
    drivers: DriverLookup  = Depends(get_driver_lookup),
    actor:   Optional[str] = Header(None, alias="X-Actor"),
):
    data = assignment_service.change_driver(db, body, drivers, actor)
    return success_response("Vehicle driver changed", data)
