"""Material catalog schemas"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ...shared.schemas import ApiModel


class MaterialCreate(ApiModel):
    name: str
    unit: str
    price: float = Field(default=0.0, ge=0)

    @field_validator("name", "unit")
    @classmethod
    def validate_required_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Name and unit are required")
        return v.strip()


class MaterialUpdate(ApiModel):
    name: Optional[str] = None
    unit: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)

    @field_validator("name", "unit")
    @classmethod
    def validate_text(cls, v):
        if v is not None and not v.strip():
            raise ValueError("must not be empty")
        return v.strip() if v else v


class CatalogMaterialResponse(ApiModel):
    id: int
    craftsman_id: Optional[int] = None
    name: str
    unit: str
    price: float
    is_default: bool
    created_at: Optional[datetime] = None
