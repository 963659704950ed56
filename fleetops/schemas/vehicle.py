from datetime import date
from decimal import Decimal
from pydantic import BaseModel, field_validator
from typing import Optional

from fleetops.schemas.common import validate_vin


# ─── Requests ─────────────────────────────────────────────────────────────────
class VehicleCreateRequest(BaseModel):
    """Sent as the ``vehicle`` JSON part of the multipart create request."""
    vin:              str
    brand:            str
    model:            str
    plate:            str
    purchaseDate:     Optional[date]    = None
    cost:             Optional[Decimal] = None
    registrationDate: Optional[date]    = None

    @field_validator("vin")
    @classmethod
    def check_vin(cls, v):
        return validate_vin(v)

    @field_validator("plate")
    @classmethod
    def check_plate(cls, v):
        if not v.strip(): raise ValueError("Field cannot be empty")
        return v.strip().upper()

    @field_validator("brand", "model")
    @classmethod
    def check_name(cls, v):
        if not v.strip(): raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("cost")
    @classmethod
    def check_cost(cls, v):
        if v is not None and v < 0: raise ValueError("Cost cannot be negative")
        return v


class VehicleUpdateRequest(BaseModel):
    brand:            Optional[str]     = None
    model:            Optional[str]     = None
    plate:            Optional[str]     = None
    purchaseDate:     Optional[date]    = None
    cost:             Optional[Decimal] = None
    registrationDate: Optional[date]    = None

    @field_validator("plate")
    @classmethod
    def check_plate(cls, v):
        if v is None: return v
        if not v.strip(): raise ValueError("Plate cannot be empty")
        return v.strip().upper()

    @field_validator("brand", "model")
    @classmethod
    def check_name(cls, v):
        if v is None: return v
        if not v.strip(): raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("cost")
    @classmethod
    def check_cost(cls, v):
        if v is not None and v < 0: raise ValueError("Cost cannot be negative")
        return v
