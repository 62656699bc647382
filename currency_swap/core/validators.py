"""
Validators for amount input and feed timestamps.
"""

import re
from datetime import UTC, datetime
from typing import Final

AMOUNT_TEXT_PATTERN: Final[re.Pattern[str]] = re.compile(r"\d*\.?\d*", re.ASCII)


def accept_amount_text(current_text: str, candidate_text: str) -> str:
    """
    Decide which amount text to keep while the user is typing.

    Only the syntax is checked here: an empty string, digits, and at most one
    decimal point. Values like "", "." or "0" are accepted and judged later
    by the rate calculator.

    Args:
        current_text: Text currently held by the input
        candidate_text: Text the user is trying to enter

    Returns:
        candidate_text if it is well formed, otherwise current_text
    """
    if AMOUNT_TEXT_PATTERN.fullmatch(candidate_text):
        return candidate_text
    return current_text


def validate_timestamp(v: str | datetime | None) -> datetime | None:
    """Validate and convert timestamp from string to datetime."""
    if v is None or v == "":
        return None

    if isinstance(v, datetime):
        return v

    if not isinstance(v, str):
        raise ValueError(f"Timestamp must be a string, got {type(v).__name__}")

    try:
        return datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(
            "Timestamp must be in ISO format (e.g., '2023-01-01T12:00:00Z')"
        ) from e


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so every feed date stays comparable."""
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value
