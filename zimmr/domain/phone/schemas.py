from datetime import datetime
from typing import Optional

from ...shared.schemas import ApiModel


class CallResponse(ApiModel):
    id: int
    craftsman_id: Optional[int] = None
    caller_number: Optional[str] = None
    caller_name: Optional[str] = None
    call_reason: Optional[str] = None
    preferred_date: Optional[str] = None
    transcript: Optional[str] = None
    created_at: Optional[datetime] = None


class WebhookResponse(ApiModel):
    call_id: int
    appointment_id: Optional[int] = None
    message: str
