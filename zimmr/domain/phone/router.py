"""
Phone assistant endpoints.

Vapi.ai calls the tool endpoints during a conversation and the webhook after
it; Twilio posts incoming voice calls. None of these carry a user session:
Vapi requests are authenticated with the shared secret and identify the
craftsman by id, Twilio calls by the forwarded number.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Form
from fastapi.responses import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from twilio.twiml.voice_response import VoiceResponse

from ...auth import get_current_craftsman_id
from ...config import VAPI_ASSISTANT_ID, VAPI_STREAM_URL
from ...database import get_db
from ...errors import ApiError, NotFoundError, UpstreamError, ValidationFailure
from ...utils.sanitization import sanitize_text
from ...utils.timeutils import local_tz, parse_day, stored_utc
from ..scheduling.availability import SlotAvailabilityEngine
from ..tenants.repository import CraftsmanRepository
from .booking import BookingService
from .repository import CallRepository
from .schemas import CallResponse, WebhookResponse
from .vapi import extract_tool_call, parse_int_id, tool_result, verify_vapi_secret

logger = logging.getLogger(__name__)

vapi_router = APIRouter(prefix="/vapi", tags=["Vapi"], dependencies=[Depends(verify_vapi_secret)])
twilio_router = APIRouter(prefix="/twilio", tags=["Twilio"])
phone_router = APIRouter(prefix="/phone", tags=["Phone"])

SAY_OPTIONS = {"voice": "Polly.Vicki", "language": "de-DE"}
MSG_SERVICE_UNAVAILABLE = "Entschuldigung, dieser Service ist nicht verfügbar."
MSG_TECHNICAL_ERROR = "Es ist ein technischer Fehler aufgetreten. Bitte versuchen Sie es später erneut."


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


@vapi_router.post("/check-calendar")
async def check_calendar(body: dict = Body(...), db: Session = Depends(get_db)):
    """Free slots of a craftsman on a day, as a Vapi tool result"""
    args, tool_call_id = extract_tool_call(body)
    craftsman_id = parse_int_id(args.get("craftsmanId"))
    date_value = args.get("date")
    if craftsman_id is None or not date_value:
        raise ValidationFailure("craftsmanId and date are required")
    try:
        day = parse_day(str(date_value))
    except ValueError:
        raise ValidationFailure("Invalid date, expected YYYY-MM-DD")

    if not CraftsmanRepository(db).get_by_id(craftsman_id):
        raise NotFoundError("Craftsman not found")
    availability = SlotAvailabilityEngine(db).available_slots(craftsman_id, day)

    slots = [
        {"start": s.start.isoformat(), "end": s.end.isoformat(), "displayTime": s.display_time}
        for s in availability.available_slots
    ]
    formatted = ", ".join(s["displayTime"] for s in slots) or "keine"
    logger.info(f"Vapi calendar check for craftsman {craftsman_id} on {day}: {len(slots)} free")
    return tool_result(
        tool_call_id,
        {
            "success": True,
            "date": day.isoformat(),
            "availableCount": len(slots),
            "slots": slots,
            "message": f"Available slots on {day.isoformat()}: {formatted}",
        },
    )


@vapi_router.post("/book-appointment")
async def book_appointment(
    body: dict = Body(...),
    booking: BookingService = Depends(get_booking_service),
):
    """Pending appointment from the conversation, as a Vapi tool result"""
    args, tool_call_id = extract_tool_call(body)
    customer_name = args.get("customerName")
    result = await booking.book(
        craftsman_id=parse_int_id(args.get("craftsmanId")),
        customer_phone=args.get("customerPhone"),
        customer_name=customer_name,
        preferred_date=args.get("preferredDate"),
        call_id=parse_int_id(args.get("callId")),
        notes=args.get("notes"),
    )

    local = stored_utc(result.appointment.scheduled_at).astimezone(local_tz())
    return tool_result(
        tool_call_id,
        {
            "success": True,
            "appointmentId": result.appointment.id,
            "customerId": result.customer.id,
            "status": "pending_approval",
            "message": (
                f"Appointment booked for {customer_name or 'customer'} on "
                f"{local.strftime('%d.%m.%Y')} at {local.strftime('%H:%M')}. "
                "Status: Pending craftsman approval."
            ),
        },
    )


@vapi_router.post("/webhook", response_model=WebhookResponse)
async def vapi_webhook(
    body: dict = Body(...),
    db: Session = Depends(get_db),
    booking: BookingService = Depends(get_booking_service),
):
    """
    End-of-call report: store the call and book the appointment if the
    assistant agreed on one. A failed booking does not fail the webhook.
    """
    args, _ = extract_tool_call(body)
    craftsman_id = parse_int_id(args.get("craftsmanId"))
    customer_phone = args.get("customerPhone")
    if craftsman_id is None or not customer_phone:
        raise ValidationFailure("craftsmanId and customerPhone are required")

    craftsman = booking.get_craftsman(craftsman_id)
    preferred_date = args.get("preferredDate")
    call_reason = sanitize_text(args.get("callReason"), max_length=2000)

    try:
        call = CallRepository(db).create(
            craftsman_id=craftsman.id,
            caller_number=str(customer_phone),
            caller_name=sanitize_text(args.get("customerName"), max_length=255),
            call_reason=call_reason,
            preferred_date=str(preferred_date) if preferred_date else None,
            transcript=sanitize_text(args.get("transcript")),
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise UpstreamError("Failed to save call record", cause=e) from e
    logger.info(f"Vapi webhook: call {call.id} stored for craftsman {craftsman.id}")

    appointment_id = None
    if args.get("shouldBookAppointment") and preferred_date:
        try:
            result = await booking.book(
                craftsman_id=craftsman.id,
                customer_phone=customer_phone,
                customer_name=args.get("customerName"),
                preferred_date=preferred_date,
                call_id=call.id,
                notes=args.get("callReason"),
            )
            appointment_id = result.appointment.id
        except ApiError as e:
            logger.error(f"Vapi webhook: booking for call {call.id} failed: {e.message}")

    return WebhookResponse(
        call_id=call.id, appointment_id=appointment_id, message="Call processed successfully"
    )


def _twiml(response: VoiceResponse) -> Response:
    return Response(content=str(response), media_type="application/xml")


def _say(message: str) -> Response:
    response = VoiceResponse()
    response.say(message, **SAY_OPTIONS)
    return _twiml(response)


@twilio_router.post("/incoming")
async def twilio_incoming(
    from_number: Optional[str] = Form(None, alias="From"),
    forwarded_from: Optional[str] = Form(None, alias="ForwardedFrom"),
    db: Session = Depends(get_db),
):
    """Route a forwarded call to the craftsman's Vapi assistant"""
    logger.info(f"Incoming call from {from_number} (forwarded from {forwarded_from or 'none'})")
    try:
        craftsmen = CraftsmanRepository(db)
        craftsman = craftsmen.get_by_phone(forwarded_from) if forwarded_from else None
        if not craftsman and from_number:
            craftsman = craftsmen.get_by_phone(from_number)

        if not craftsman:
            logger.warning(f"No craftsman for incoming call from {from_number}")
            CallRepository(db).create(
                craftsman_id=None,
                caller_number=from_number,
                call_reason="Unidentified craftsman",
                transcript=f"Unidentified call from {from_number} forwarded from {forwarded_from or 'unknown'}",
            )
            return _say(MSG_SERVICE_UNAVAILABLE)

        response = VoiceResponse()
        connect = response.connect()
        stream = connect.stream(url=VAPI_STREAM_URL)
        parameters = {
            "assistantId": craftsman.vapi_assistant_id or VAPI_ASSISTANT_ID,
            "craftsmanId": craftsman.id,
            "craftsmanName": craftsman.name,
            "customerPhone": from_number,
        }
        for name, value in parameters.items():
            if value is not None:
                stream.parameter(name=name, value=str(value))

        logger.info(f"Routing call from {from_number} to assistant of craftsman {craftsman.id}")
        return _twiml(response)

    except Exception as e:
        db.rollback()
        logger.error(f"Incoming call handling failed: {type(e).__name__}: {e}")
        return _say(MSG_TECHNICAL_ERROR)


@phone_router.get("/logs", response_model=list[CallResponse])
async def get_call_logs(
    craftsman_id: int = Depends(get_current_craftsman_id),
    db: Session = Depends(get_db),
):
    """Phone assistant calls of the logged-in craftsman, newest first"""
    return CallRepository(db).list_for_craftsman(craftsman_id)
