"""Abstract base class for booking platform providers.

Defines the two capabilities the check-in flow needs from a booking
platform: finding a booking by reference and marking participants with a
status. Any backend (Bokun, a test double, etc.) implements this ABC.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from kiosk.errors import UpdateError


@dataclass(frozen=True)
class StatusUpdateResult:
    """Outcome of a participant status update."""

    ok: bool
    status_code: int | None = None
    detail: str = ""

    def raise_for_status(self) -> None:
        if not self.ok:
            raise UpdateError(status_code=self.status_code)


class BookingProvider(ABC):
    """Abstract booking platform backend."""

    @abstractmethod
    async def find_booking(self, booking_ref: str) -> dict[str, Any]:
        """Look up a booking by its reference.

        Args:
            booking_ref: Reference code supplied by the kiosk.

        Returns:
            The raw booking object from the platform.

        Raises:
            BookingLookupError: The platform did not return the booking.
        """

    @abstractmethod
    async def update_participant_statuses(
        self,
        booking_id: int | str,
        participant_ids: list[int | str],
        status: str,
    ) -> StatusUpdateResult:
        """Set ``status`` on every listed participant of a booking.

        Implementations report failure through the returned result rather
        than raising.
        """
