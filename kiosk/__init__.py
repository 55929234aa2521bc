"""Kiosk check-in proxy for the Bokun booking platform."""
