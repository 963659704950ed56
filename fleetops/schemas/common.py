from pydantic import BaseModel
from typing import Any
import re


# ─── Identifier Validators ────────────────────────────────────────────────────
# VINs and CURPs end up in file names and driver-service URLs
VIN_PATTERN  = re.compile(r"^[A-Z0-9]{1,17}$")
CURP_PATTERN = re.compile(r"^[A-Z0-9]{1,18}$")


def validate_vin(v: str) -> str:
    v = v.strip().upper()
    if not v:
        raise ValueError("VIN cannot be empty")
    if not VIN_PATTERN.match(v):
        raise ValueError("VIN must be 1 to 17 letters or digits")
    return v


def validate_curp(v: str) -> str:
    v = v.strip().upper()
    if not v:
        raise ValueError("CURP cannot be empty")
    if not CURP_PATTERN.match(v):
        raise ValueError("CURP must be 1 to 18 letters or digits")
    return v


# ─── Error Detail (per field) ──────────────────────────────────────────────────
class ErrorDetail(BaseModel):
    field: str
    message: str


# ─── Error Body ───────────────────────────────────────────────────────────────
class ErrorBody(BaseModel):
    code: str
    status: int
    path: str
    details: list[ErrorDetail] | None = None
    field: str | None = None


# ─── Error Response ───────────────────────────────────────────────────────────
class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: ErrorBody


# ─── Helper Functions ─────────────────────────────────────────────────────────
def success_response(message: str, data: Any = None) -> dict:
    """Return a standardized success dict (used in route handlers)."""
    return {"success": True, "message": message, "data": data}
