"""Bokun booking provider implementation.

Talks to the Bokun REST API with the static access/secret key pair that
Bokun issues per vendor. Every call opens its own ``httpx.AsyncClient`` so
no connection state is shared between kiosk requests.

The lookup path is a template taken from configuration because Bokun's
find-by-reference contract is not pinned down: it may address the booking
by path or query parameter and may answer with a single object or a list.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from kiosk.errors import BookingLookupError

from .base import BookingProvider, StatusUpdateResult

logger = logging.getLogger(__name__)

DEFAULT_LOOKUP_PATH = "/booking/find-by-reference/{booking_ref}"
DEFAULT_UPDATE_PATH = "/booking/update-participant-statuses"


class BokunBookingProvider(BookingProvider):
    """BookingProvider backed by the Bokun REST API."""

    def __init__(
        self,
        api_url: str,
        access_key: str,
        secret_key: str,
        lookup_path: str = DEFAULT_LOOKUP_PATH,
        update_path: str = DEFAULT_UPDATE_PATH,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._access_key = access_key
        self._secret_key = secret_key
        self._lookup_path = lookup_path
        self._update_path = update_path
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Any) -> BokunBookingProvider:
        return cls(
            api_url=settings.bokun_api_url,
            access_key=settings.bokun_access_key,
            secret_key=settings.bokun_secret_key,
            lookup_path=settings.bokun_lookup_path,
            update_path=settings.bokun_update_path,
            timeout=settings.bokun_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "X-Bokun-AccessKey": self._access_key,
            "X-Bokun-SecretKey": self._secret_key,
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._api_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        )

    def lookup_url_path(self, booking_ref: str) -> str:
        """Fill the configured lookup template with the encoded reference."""
        return self._lookup_path.replace("{booking_ref}", quote(booking_ref, safe=""))

    # ------------------------------------------------------------------
    # BookingProvider interface
    # ------------------------------------------------------------------

    async def find_booking(self, booking_ref: str) -> dict[str, Any]:
        """Fetch a booking by reference.

        A list response is unwrapped to its first element; an empty list
        means the reference is unknown and is reported as a 404.
        """
        path = self.lookup_url_path(booking_ref)
        try:
            async with self._client() as client:
                resp = await client.get(path)
        except httpx.TimeoutException:
            logger.error("Timed out finding booking %s after %ss", booking_ref, self._timeout)
            raise BookingLookupError(
                504, "The booking platform did not respond in time."
            ) from None

        if not resp.is_success:
            logger.error(
                "Error finding booking %s. Bokun API responded with status %d: %s",
                booking_ref,
                resp.status_code,
                resp.text,
            )
            raise BookingLookupError(resp.status_code)

        data = resp.json()
        if isinstance(data, list):
            if not data:
                logger.error("Bokun returned no bookings for reference %s", booking_ref)
                raise BookingLookupError(404)
            data = data[0]
        return data

    async def update_participant_statuses(
        self,
        booking_id: int | str,
        participant_ids: list[int | str],
        status: str,
    ) -> StatusUpdateResult:
        """POST a participant status change. Transport faults become a failed result."""
        body = {
            "bookingId": booking_id,
            "participantIds": participant_ids,
            "status": status,
        }
        try:
            async with self._client() as client:
                resp = await client.post(self._update_path, json=body)
        except httpx.HTTPError as e:
            return StatusUpdateResult(ok=False, detail=f"{type(e).__name__}: {e}")

        if not resp.is_success:
            return StatusUpdateResult(
                ok=False, status_code=resp.status_code, detail=resp.text
            )
        return StatusUpdateResult(ok=True, status_code=resp.status_code)
