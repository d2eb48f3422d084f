"""Customer domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import field_validator

from ...shared.schemas import ApiModel
from ...shared.validators import validate_email, validate_phone


class CustomerBase(ApiModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    service_type: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone_field(cls, v):
        if v:
            return validate_phone(v)
        return v

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        if v:
            return validate_email(v)
        return v


class CustomerCreate(CustomerBase):
    name: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class CustomerUpdate(CustomerBase):
    name: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip() if v else v


class CustomerResponse(ApiModel):
    id: int
    craftsman_id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    service_type: Optional[str] = None
    notes: Optional[str] = None
    source: Optional[str] = None
    created_at: Optional[datetime] = None
