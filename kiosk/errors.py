"""Check-in failure kinds.

Each error carries the HTTP status the kiosk should see and a message that
is safe to show it. Remote response bodies and tracebacks stay in the logs.
"""

from __future__ import annotations


class CheckInError(Exception):
    """Base class for failures surfaced to the kiosk as ``{"error": ...}``."""

    status_code: int = 500
    message: str = "An internal error occurred on the server."

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(CheckInError):
    """The booking reference is missing or blank."""

    status_code = 400
    message = "Booking reference is required"


class BookingLookupError(CheckInError):
    """The booking platform did not return the booking.

    ``status_code`` mirrors the remote status (504 when the call timed out).
    """

    message = "Booking not found or API key is invalid."

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message=message, status_code=status_code)


class UpdateError(CheckInError):
    """Marking participants as arrived failed. Logged, never returned."""

    message = "Could not update participant statuses."


class MalformedDataError(CheckInError):
    """The booking payload lacks the passengers or activities we display."""

    status_code = 502
    message = "Booking data from the booking platform is incomplete."


class InternalError(CheckInError):
    status_code = 500
