"""Project a booking record into the boarding pass shown on the kiosk.

Selection rule: the primary passenger is the first passenger in the
booking's order-preserving passenger list, and the primary activity is the
first activity. A booking with neither cannot be displayed.
"""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from kiosk.errors import MalformedDataError
from kiosk.models import Activity, BoardingPass, BookingRecord, Passenger


def primary_passenger(record: BookingRecord) -> Passenger:
    if not record.passengers:
        raise MalformedDataError("Booking has no passengers.")
    return record.passengers[0]


def primary_activity(record: BookingRecord) -> Activity:
    if not record.activities:
        raise MalformedDataError("Booking has no activities.")
    return record.activities[0]


def _localize(dt: datetime, tz: tzinfo) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz)


def format_date(dt: datetime, tz: tzinfo) -> str:
    """``Saturday, June 1, 2024``"""
    local = _localize(dt, tz)
    return f"{local:%A}, {local:%B} {local.day}, {local.year}"


def format_time(dt: datetime, tz: tzinfo) -> str:
    """``09:00 AM``"""
    return _localize(dt, tz).strftime("%I:%M %p")


def build_boarding_pass(
    record: BookingRecord, tz: tzinfo, fallback_ref: str = ""
) -> BoardingPass:
    """Pure function of the record: same booking in, same pass out."""
    passenger = primary_passenger(record)
    activity = primary_activity(record)

    return BoardingPass(
        experience_name=activity.title or "",
        date=format_date(activity.start_time, tz),
        time=format_time(activity.start_time, tz),
        booking_ref=record.booking_ref or fallback_ref,
        customer_name=passenger.display_name,
        pax=len(record.passengers),
    )
