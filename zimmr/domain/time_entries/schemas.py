"""Time entry schemas"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from ...shared.schemas import ApiModel
from ...utils.timeutils import as_utc, stored_utc


class TimeEntryCreate(ApiModel):
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    description: Optional[str] = None
    is_billable: Optional[bool] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, v):
        if v is not None:
            return as_utc(v)
        return v

    @model_validator(mode="after")
    def check_order(self):
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("endTime must not be before startTime")
        return self


class TimeEntryResponse(ApiModel):
    id: int
    craftsman_id: int
    customer_id: Optional[int] = None
    appointment_id: Optional[int] = None
    description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    is_billable: bool
    hourly_rate: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("start_time", "end_time", "created_at")
    @classmethod
    def as_stored_utc(cls, v):
        return stored_utc(v)
