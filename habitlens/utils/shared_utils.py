# habitlens/utils/shared_utils.py
'''
Shared date and time helpers used by the model layer and the CLI.
'''

from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser

from habitlens.utils.error_handler import ValidationError


def today_local() -> date:
    return date.today()


def parse_timestamp(value: Any, field_name: str = "timestamp") -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp ("2025-06-05T07:30:00Z", "2025-06-05").
    Returns None for empty values, raises ValidationError for garbage.
    The wall-clock hour is kept as written; no timezone conversion happens.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return date_parser.isoparse(str(value).strip())
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid {field_name}: '{value}' is not an ISO date")


def parse_calendar_date(value: Any, field_name: str = "date") -> date:
    """Parse the calendar day of an ISO date or timestamp."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_timestamp(value, field_name)
    if parsed is None:
        raise ValidationError(f"{field_name} is required")
    return parsed.date()


def date_range(start: date, days: int):
    """Yield `days` consecutive dates starting at `start`."""
    for offset in range(days):
        yield start + timedelta(days=offset)
