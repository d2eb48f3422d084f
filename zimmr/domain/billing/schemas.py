"""Quote and invoice schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, field_validator

from ...shared.schemas import ApiModel
from ...utils.timeutils import as_utc

QuoteStatus = Literal["draft", "sent", "accepted", "rejected", "converted"]
InvoiceStatus = Literal["draft", "sent", "paid", "overdue", "cancelled"]


class MaterialItem(ApiModel):
    """One line item: quantity x unit price"""

    name: str = Field(..., min_length=1, max_length=255)
    unit: Optional[str] = None
    quantity: float = Field(default=1.0, gt=0)
    unit_price: float = Field(default=0.0, ge=0)


class MaterialResponse(MaterialItem):
    id: int


class QuoteCreate(ApiModel):
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    status: QuoteStatus = "draft"
    tax_rate: float = Field(default=0.19, ge=0, le=1)
    notes: Optional[str] = None
    materials: list[MaterialItem] = Field(default_factory=list)


class QuoteUpdate(ApiModel):
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    status: Optional[QuoteStatus] = None
    tax_rate: Optional[float] = Field(default=None, ge=0, le=1)
    notes: Optional[str] = None
    materials: Optional[list[MaterialItem]] = None


class QuoteResponse(ApiModel):
    id: int
    craftsman_id: int
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    status: str
    amount: float
    tax_rate: float
    tax_amount: float
    total_amount: float
    notes: Optional[str] = None
    invoice_id: Optional[int] = None
    materials: list[MaterialResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class InvoiceCreate(ApiModel):
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    status: InvoiceStatus = "draft"
    tax_rate: float = Field(default=0.19, ge=0, le=1)
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    materials: list[MaterialItem] = Field(default_factory=list)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        if v is not None:
            return as_utc(v)
        return v


class InvoiceUpdate(ApiModel):
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    status: Optional[InvoiceStatus] = None
    tax_rate: Optional[float] = Field(default=None, ge=0, le=1)
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    materials: Optional[list[MaterialItem]] = None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v):
        if v is not None:
            return as_utc(v)
        return v


class InvoiceResponse(ApiModel):
    id: int
    craftsman_id: int
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    quote_id: Optional[int] = None
    invoice_number: str
    status: str
    amount: float
    tax_rate: float
    tax_amount: float
    total_amount: float
    notes: Optional[str] = None
    due_date: Optional[datetime] = None
    materials: list[MaterialResponse] = Field(default_factory=list)
    created_at: Optional[datetime] = None
