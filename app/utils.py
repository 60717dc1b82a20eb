# Utility functions for the schedulr api

import hashlib
import secrets
import string
import logging
import datetime
from typing import Optional, List
from dateutil import parser
import icalendar

from models import Schedule

logger = logging.getLogger(__name__)

def generate_user_id():
    """Generate a random 8-character alphanumeric user ID"""
    return ''.join(secrets.choice(string.ascii_letters + string.digits) for _ in range(8))

def generate_api_key():
    """Generate a random API key"""
    return secrets.token_urlsafe(32)

def hash_api_key(api_key):
    """Hash an API key using SHA-256"""
    return hashlib.sha256(api_key.encode()).hexdigest()

def validate_time_format(time_str):
    """
    Validate time format (ISO 8601) and return as datetime object

    Args:
        time_str: Time string to validate

    Returns:
        datetime: Parsed datetime object if valid, None otherwise
    """
    try:
        return parser.isoparse(time_str)
    except (ValueError, TypeError):
        logger.error(f"Invalid time format: {time_str}")
        return None

def validate_date_format(date_str) -> Optional[datetime.date]:
    """
    Parse an ISO 8601 date (a datetime is accepted and truncated to its date).

    Returns:
        date: Parsed date if valid, None otherwise
    """
    parsed = validate_time_format(date_str)
    if parsed is None:
        return None
    return parsed.date()

def normalize_datetime(value: datetime.datetime) -> datetime.datetime:
    """Convert aware datetimes to naive UTC, leave naive ones untouched."""
    if value.tzinfo is not None:
        return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return value

# iCalendar export helpers

def _schedule_to_ical_component(schedule: Schedule) -> icalendar.Event:
    """
    Convert a schedule to an iCalendar Event component.

    Args:
        schedule (Schedule): Schedule to convert.
    Returns:
        icalendar.Event: Event carrying the schedule's fields.
    """
    ical_ev = icalendar.Event()
    ical_ev.add("uid", f"schedulr-{schedule.calendar_id}-{schedule.id}")
    ical_ev.add("summary", schedule.title)
    if schedule.description:
        ical_ev.add("description", schedule.description)
    if schedule.location:
        ical_ev.add("location", schedule.location)
    ical_ev.add("dtstart", schedule.start_time)
    ical_ev.add("dtend", schedule.end_time)
    ical_ev.add("SCHEDULR-USER-ID", schedule.user_id)
    return ical_ev

def build_ical_from_schedules(schedules: List[Schedule], calendar_name: Optional[str] = None) -> bytes:
    """
    Builds an iCalendar document from a list of schedules, converting each one to an event.

    Args:
        schedules (List[Schedule]): Schedules to export.
        calendar_name (Optional[str]): Display name written as X-WR-CALNAME.
    Returns:
        bytes: Serialized iCalendar document.
    """
    cal = icalendar.Calendar()
    cal.add("prodid", "-//schedulr//calendar//EN")
    cal.add("version", "2.0")
    if calendar_name:
        cal.add("x-wr-calname", calendar_name)
    for schedule in schedules:
        cal.add_component(_schedule_to_ical_component(schedule))
    return cal.to_ical()
