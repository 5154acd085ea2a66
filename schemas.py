from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError


TC_NO_LENGTH = 11

# Messages for required fields, keyed by body field name
REQUIRED_MESSAGES = {
    "tcNo": "T.C. identity number is required.",
    "fullName": "Full name is required.",
    "email": "Email is required.",
}
FIELD_ALIASES = {"tc_no": "tcNo", "full_name": "fullName", "email": "email"}
TC_NO_LENGTH_MESSAGE = "T.C. identity number must be 11 digits."


# Explicit input schema for the BTR guidance-program application form.
# Only the fields below are accepted; anything else in the body is ignored.
class ApplicationIn(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    tc_no: str = Field(alias="tcNo")
    full_name: str = Field(alias="fullName")
    branch: Optional[str] = None
    email: str = Field(alias="email")
    phone: Optional[str] = None
    weekly_hours: Optional[float] = Field(default=None, alias="weeklyHours")
    certificate_date: Optional[str] = Field(default=None, alias="certificateDate")
    norm_status: Optional[str] = Field(default=None, alias="normStatus")
    preferences: Optional[Dict[str, Any]] = None
    special_request: Optional[str] = Field(default=None, alias="specialRequest")
    teacher_date: Optional[str] = Field(default=None, alias="teacherDate")

    @field_validator("tc_no", mode="before")
    @classmethod
    def tc_no_as_string(cls, v):
        # forms sometimes post the identity number as a JSON number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("tc_no", "full_name", "email")
    @classmethod
    def not_blank(cls, v: str, info):
        if not v:
            raise PydanticCustomError("required", REQUIRED_MESSAGES[FIELD_ALIASES[info.field_name]])
        return v

    @field_validator("tc_no")
    @classmethod
    def tc_no_digits(cls, v: str):
        if len(v) != TC_NO_LENGTH or not (v.isascii() and v.isdigit()):
            raise PydanticCustomError("tc_no_length", TC_NO_LENGTH_MESSAGE)
        return v

    def to_columns(self) -> Dict[str, Any]:
        """Column values for the Application model."""
        return self.model_dump(by_alias=False)


class ApplicationCreated(BaseModel):
    success: bool = True
    message: str
    applicationId: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


def validation_messages(errors: List[Dict[str, Any]]) -> List[str]:
    """Turn pydantic/FastAPI validation errors into user-facing messages.

    Missing required fields get their form message, custom validator errors
    already carry one, anything else is prefixed with the field name.
    """
    messages: List[str] = []
    for err in errors:
        loc = [part for part in err.get("loc", ()) if part != "body"]
        field = str(loc[-1]) if loc else None
        kind = err.get("type")
        if field in REQUIRED_MESSAGES and (kind == "missing" or (kind == "string_type" and err.get("input") is None)):
            message = REQUIRED_MESSAGES[field]
        elif kind in ("required", "tc_no_length") or field is None:
            message = err.get("msg", "Invalid request body")
        else:
            message = f"{field}: {err.get('msg')}"
        if message not in messages:
            messages.append(message)
    return messages
