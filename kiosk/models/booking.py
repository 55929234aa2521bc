"""Pydantic models for booking records and boarding passes."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Booking platform payloads use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Passenger(_CamelModel):
    """An individual on a booking who can be marked as arrived."""

    id: int | str
    first_name: str | None = None
    last_name: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class Activity(_CamelModel):
    """A booked experience. ``start_time`` accepts ISO-8601 or epoch millis."""

    title: str | None = None
    start_time: datetime


class BookingRecord(_CamelModel):
    """Booking as returned by the booking platform's lookup."""

    id: int | str
    booking_ref: str = ""
    passengers: list[Passenger] = Field(default_factory=list)
    activities: list[Activity] = Field(default_factory=list)

    @property
    def participant_ids(self) -> list[int | str]:
        return [p.id for p in self.passengers]


class BoardingPass(_CamelModel):
    """Display-ready projection returned to the kiosk."""

    experience_name: str
    date: str
    time: str
    booking_ref: str
    customer_name: str
    pax: int
