"""Application configuration via environment variables."""

from __future__ import annotations

import logging
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger("kiosk.config")

DEFAULT_ALLOWED_ORIGINS = [
    "http://kiosk.seatripsreykjavik.com",
    "http://localhost",
    "http://127.0.0.1",
]


class Settings(BaseSettings):
    # Bokun API
    bokun_api_url: str = "https://api.bokun.io"
    bokun_access_key: str = ""
    bokun_secret_key: str = ""
    bokun_lookup_path: str = "/booking/find-by-reference/{booking_ref}"
    bokun_update_path: str = "/booking/update-participant-statuses"
    bokun_timeout_seconds: float = 15.0

    # Check-in
    arrived_status: str = "ARRIVED"
    display_timezone: str = "Atlantic/Reykjavik"

    # Kiosk pages allowed to read our responses cross-origin
    allowed_origins: list[str] = DEFAULT_ALLOWED_ORIGINS

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", frozen=True
    )

    def validate_startup(self) -> list[str]:
        """Validate configuration at startup. Returns warnings, raises on errors."""
        warnings: list[str] = []
        _placeholders = {"your-access-key", "your-secret-key", "..."}

        if "{booking_ref}" not in self.bokun_lookup_path:
            raise ValueError(
                "BOKUN_LOOKUP_PATH must contain a {booking_ref} placeholder, "
                f"got {self.bokun_lookup_path!r}."
            )

        if self.bokun_timeout_seconds <= 0:
            raise ValueError("BOKUN_TIMEOUT_SECONDS must be positive.")

        try:
            ZoneInfo(self.display_timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(
                f"DISPLAY_TIMEZONE {self.display_timezone!r} is not a known timezone."
            ) from e

        if not self.bokun_access_key or self.bokun_access_key in _placeholders:
            warnings.append(
                "BOKUN_ACCESS_KEY is missing or a placeholder. Booking lookups will be rejected."
            )
        if not self.bokun_secret_key or self.bokun_secret_key in _placeholders:
            warnings.append(
                "BOKUN_SECRET_KEY is missing or a placeholder. Booking lookups will be rejected."
            )

        if not self.allowed_origins:
            warnings.append(
                "ALLOWED_ORIGINS is empty. No kiosk page will be able to read responses."
            )

        return warnings


settings = Settings()
