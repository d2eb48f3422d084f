import html
import re
from typing import Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def sanitize_text(value: Optional[str], max_length: int = 10000) -> Optional[str]:
    """
    Clean free text received from the phone assistant (transcripts, notes).

    Control characters are removed and HTML is escaped. Overlong input is
    truncated rather than rejected, since the caller cannot retry; the cut
    never splits an escaped entity.

    Args:
        value: Input text
        max_length: Maximum stored length

    Returns:
        Sanitized text, or None for empty input
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value:
        return None

    value = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", value)
    value = html.escape(value[:max_length], quote=True)
    if len(value) > max_length:
        value = re.sub(r"&[#a-zA-Z0-9]*$", "", value[:max_length])
    return value
