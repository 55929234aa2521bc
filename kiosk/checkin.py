"""Kiosk check-in flow.

``CheckInOrchestrator.check_in`` runs three steps against the booking
platform for one booking reference:

  1. find the booking (a failure here stops the flow)
  2. mark every participant as arrived (best effort, failure is logged)
  3. format the boarding pass from the primary passenger and activity
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from kiosk.boarding_pass import build_boarding_pass
from kiosk.booking_providers.base import BookingProvider
from kiosk.errors import MalformedDataError, UpdateError, ValidationError
from kiosk.models import BoardingPass, BookingRecord

logger = logging.getLogger(__name__)


class CheckInOrchestrator:
    """Turn a booking reference into a boarding pass.

    Holds no per-request state, so one instance serves every request.
    """

    def __init__(
        self,
        provider: BookingProvider,
        display_timezone: tzinfo,
        arrived_status: str = "ARRIVED",
    ) -> None:
        self._provider = provider
        self._tz = display_timezone
        self._arrived_status = arrived_status

    async def check_in(self, booking_ref: str | None) -> BoardingPass:
        ref = (booking_ref or "").strip()
        if not ref:
            raise ValidationError()

        logger.info("1. Attempting to find booking: %s", ref)
        record = self._parse_booking(await self._provider.find_booking(ref), ref)
        logger.info(
            "   - Success: found booking %s with %d passenger(s)",
            record.id,
            len(record.passengers),
        )

        await self._mark_arrived(record)

        boarding_pass = build_boarding_pass(record, self._tz, fallback_ref=ref)
        logger.info("3. Sending boarding pass for %s to the kiosk", ref)
        return boarding_pass

    @staticmethod
    def _parse_booking(data: Any, ref: str) -> BookingRecord:
        try:
            return BookingRecord.model_validate(data)
        except PydanticValidationError as e:
            logger.error(
                "Booking %s payload could not be read (%d error(s)): %s",
                ref,
                e.error_count(),
                e,
            )
            raise MalformedDataError() from e

    async def _mark_arrived(self, record: BookingRecord) -> None:
        """Best-effort status update. Never raises for a remote failure."""
        participant_ids = record.participant_ids
        if not participant_ids:
            logger.warning("2. Booking %s has no participants to mark", record.id)
            return

        logger.info(
            "2. Attempting to mark %d participant(s) as %s...",
            len(participant_ids),
            self._arrived_status,
        )
        result = await self._provider.update_participant_statuses(
            record.id, participant_ids, self._arrived_status
        )
        try:
            result.raise_for_status()
        except UpdateError as e:
            # The pass is still shown; only this step's failure is absorbed.
            logger.error(
                "   - Error: %s Booking %s, status %s: %s",
                e.message,
                record.id,
                result.status_code if result.status_code is not None else "n/a",
                result.detail,
            )
        else:
            logger.info("   - Success: participants marked as arrived")
