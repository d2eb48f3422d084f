"""
Twilio SMS Service
Sends appointment notifications to craftsmen and their customers
"""

import logging
from datetime import datetime
from typing import Optional

import httpx

from ..config import TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER
from ..shared.validators import is_e164
from ..utils.timeutils import local_tz, stored_utc

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


def is_configured() -> bool:
    return bool(TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN and TWILIO_PHONE_NUMBER)


async def send_sms(to_phone: Optional[str], message_body: str) -> tuple[bool, Optional[str]]:
    """
    Send SMS via Twilio

    Args:
        to_phone: Recipient phone number (must be in E.164 format)
        message_body: SMS message content

    Returns:
        Tuple of (success: bool, error_message: Optional[str])
    """
    if not to_phone:
        logger.debug("No phone number provided")
        return False, "No phone number provided"

    if not is_e164(to_phone):
        logger.warning(f"Phone number not in E.164 format: {to_phone}")
        return False, "Phone number must be in E.164 format (e.g., +491701234567)"

    if not is_configured():
        logger.info("Twilio not configured, skipping SMS")
        return False, "Twilio not configured"

    data = {"To": to_phone, "From": TWILIO_PHONE_NUMBER, "Body": message_body}

    try:
        logger.info(f"Sending SMS to {to_phone}")
        async with httpx.AsyncClient() as client:
            response = await client.post(
                f"{TWILIO_API_BASE}/Accounts/{TWILIO_ACCOUNT_SID}/Messages.json",
                auth=(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN),
                data=data,
                timeout=10.0,
            )

        if response.status_code in [200, 201]:
            message_sid = response.json().get("sid")
            logger.info(f"SMS sent successfully to {to_phone} (SID: {message_sid})")
            return True, None

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        error_message = error_data.get("message", f"HTTP {response.status_code}")
        error_code = error_data.get("code")
        logger.error(f"Twilio API error [{error_code}]: {error_message}")
        return False, error_message

    except httpx.HTTPError as e:
        logger.error(f"Twilio API error: {str(e)}")
        return False, str(e)


def _format_local(value: datetime) -> tuple[str, str]:
    local = stored_utc(value).astimezone(local_tz())
    return local.strftime("%d.%m.%Y"), local.strftime("%H:%M")


# SMS Template Functions
async def send_new_booking_notification(
    craftsman_phone: Optional[str], customer_name: str, scheduled_at: datetime
) -> tuple[bool, Optional[str]]:
    """Tell the craftsman that the phone assistant booked a pending appointment"""
    date_str, time_str = _format_local(scheduled_at)
    message = (
        "Neuer Termin vom KI-Assistenten:\n\n"
        f"Kunde: {customer_name}\n"
        f"Datum: {date_str} um {time_str}\n\n"
        "Bitte in der ZIMMR App bestätigen."
    )
    return await send_sms(craftsman_phone, message)


async def send_appointment_confirmation(
    customer_phone: Optional[str],
    scheduled_at: datetime,
    location: Optional[str] = None,
    craftsman_notes: Optional[str] = None,
) -> tuple[bool, Optional[str]]:
    date_str, time_str = _format_local(scheduled_at)
    lines = ["Ihr Termin wurde bestätigt!", "", f"Datum: {date_str}", f"Zeit: {time_str} Uhr"]
    if location:
        lines.append(f"Adresse: {location}")
    if craftsman_notes:
        lines.append(f"Hinweis: {craftsman_notes}")
    lines += ["", "Bei Fragen erreichen Sie uns unter dieser Nummer."]
    return await send_sms(customer_phone, "\n".join(lines))


async def send_appointment_rejection(
    customer_phone: Optional[str], scheduled_at: datetime, reason: Optional[str] = None
) -> tuple[bool, Optional[str]]:
    date_str, _ = _format_local(scheduled_at)
    lines = [
        "Leider können wir Ihren Termin nicht wie gewünscht durchführen.",
        "",
        f"Gewünschter Termin: {date_str}",
    ]
    if reason:
        lines.append(f"Grund: {reason}")
    lines += ["", "Bitte rufen Sie uns an, um einen alternativen Termin zu vereinbaren."]
    return await send_sms(customer_phone, "\n".join(lines))
