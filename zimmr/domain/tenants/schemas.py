"""Craftsman profile schemas"""

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from ...shared.schemas import ApiModel
from ...shared.validators import validate_email, validate_phone


class ProfileUpdate(ApiModel):
    """Editable profile fields; id and user_id are not accepted"""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    specialty: Optional[str] = None
    address: Optional[str] = None
    twilio_phone_number: Optional[str] = None
    vapi_assistant_id: Optional[str] = None
    assistant_enabled: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip() if v else v

    @field_validator("phone", "twilio_phone_number")
    @classmethod
    def validate_phone_fields(cls, v):
        if v:
            return validate_phone(v)
        return v

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        if v:
            return validate_email(v)
        return v


class CraftsmanResponse(ApiModel):
    id: int
    user_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    specialty: Optional[str] = None
    address: Optional[str] = None
    twilio_phone_number: Optional[str] = None
    vapi_assistant_id: Optional[str] = None
    assistant_enabled: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
