"""Data models for the check-in layer."""

from .booking import Activity, BoardingPass, BookingRecord, Passenger

__all__ = ["Activity", "BoardingPass", "BookingRecord", "Passenger"]
