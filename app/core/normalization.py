"""Input normalization helpers shared by the identity and provider services."""

import re
from datetime import UTC, date, datetime
from email.utils import parsedate_to_datetime
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DATE_PREFIX_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")


class InvalidDateError(ValueError):
    """Raised when a date input cannot be reduced to a calendar day."""


def normalize_email(value: Any) -> str:
    """Trim and lowercase an email; ``None`` becomes an empty string."""
    if value is None:
        return ""
    return str(value).strip().lower()


def is_valid_email(value: str) -> bool:
    """Loose ``local@domain.tld`` shape check."""
    return bool(EMAIL_PATTERN.match(value))


def parse_nullable(value: Any) -> Any:
    """Treat an empty string as an explicit null."""
    return None if value == "" else value


def parse_boolean(value: Any) -> bool | None:
    """Accept real booleans and the strings ``"true"``/``"false"``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def only_digits(value: Any) -> str:
    return re.sub(r"\D", "", str(value or ""))


def _calendar_day(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_datetime(raw: str) -> datetime | None:
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(raw)
    except (TypeError, ValueError, IndexError):
        return None


def normalize_date_only(value: Any) -> date | None:
    """
    Reduce a birthdate-like input to a calendar day.

    ``None`` and blank strings mean "cleared" and return ``None``. A string
    starting with a valid ``YYYY-MM-DD`` is taken at face value, so no
    timezone shift can move the day. Anything else is parsed as an ISO-8601
    or RFC 2822 timestamp and converted to its UTC calendar day (naive
    timestamps are read as UTC).

    Raises:
        InvalidDateError: If the input cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value if value.tzinfo else value.replace(tzinfo=UTC)
        return parsed.astimezone(UTC).date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    if not raw:
        return None

    prefix = DATE_PREFIX_PATTERN.match(raw)
    if prefix:
        day = _calendar_day(*(int(part) for part in prefix.groups()))
        if day is not None:
            return day

    parsed = _parse_datetime(raw)
    if parsed is None:
        raise InvalidDateError(f"Invalid date: {raw!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC).date()
