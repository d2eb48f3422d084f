"""Shared validation utilities"""

import re
from typing import Optional

DEFAULT_COUNTRY_CODE = "49"

E164_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")


def is_e164(phone: Optional[str]) -> bool:
    return bool(phone) and bool(E164_PATTERN.match(phone))


def validate_phone(phone: Optional[str], country_code: str = DEFAULT_COUNTRY_CODE) -> Optional[str]:
    """
    Normalize a phone number to E.164 format.

    Accepts international numbers (``+49 170 1234567``, ``0049 170 1234567``)
    and national numbers with a trunk prefix (``0170 1234567``), which get the
    default country code.

    Raises:
        ValueError: If the number cannot be normalized
    """
    if not phone:
        return phone

    stripped = phone.strip()
    digits = re.sub(r"\D", "", stripped)

    if stripped.startswith("+"):
        normalized = f"+{digits}"
    elif digits.startswith("00"):
        normalized = f"+{digits[2:]}"
    elif digits.startswith("0"):
        normalized = f"+{country_code}{digits[1:]}"
    else:
        normalized = f"+{digits}"

    if not is_e164(normalized):
        raise ValueError("Invalid phone number")

    return normalized


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email
