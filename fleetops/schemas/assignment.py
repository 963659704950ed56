from pydantic import BaseModel, field_validator

from fleetops.schemas.common import validate_vin, validate_curp


class AssignRequest(BaseModel):
    vin:        str
    driverCurp: str

    @field_validator("vin")
    @classmethod
    def check_vin(cls, v):
        return validate_vin(v)

    @field_validator("driverCurp")
    @classmethod
    def check_curp(cls, v):
        return validate_curp(v)


class ReleaseRequest(AssignRequest):
    pass


class ChangeDriverRequest(AssignRequest):
    changedDriverCurp: str

    @field_validator("changedDriverCurp")
    @classmethod
    def check_changed_curp(cls, v):
        return validate_curp(v)
