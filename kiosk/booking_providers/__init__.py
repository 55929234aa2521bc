"""Booking platform provider abstractions and implementations."""

from .base import BookingProvider, StatusUpdateResult

__all__ = ["BookingProvider", "StatusUpdateResult"]
