"""FastAPI application: HTTP endpoints for kiosk check-in.

Endpoints:

  GET /api/booking/{booking_ref}   Check in a booking, return its boarding pass
  GET /api/booking                 Missing reference → 400
  GET /health                      Health check

The check-in flow:
  1. Kiosk page requests /api/booking/ABC123
  2. We find the booking on Bokun by its reference
  3. We mark every participant as ARRIVED (failure is logged, not fatal)
  4. We return the boarding pass JSON for display

Errors always come back as ``{"error": "..."}``.
"""

from __future__ import annotations

# Load .env into os.environ early so BOKUN_* credentials are visible to
# Settings before it is instantiated.
from dotenv import load_dotenv
load_dotenv()

import logging
import time
from zoneinfo import ZoneInfo

# Configure root logger early so all app loggers (kiosk.checkin, etc.)
# have a handler and are visible when run via `uvicorn kiosk.app:app`.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)-20s %(levelname)-7s %(message)s",
)

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kiosk.access import AccessGate
from kiosk.booking_providers.base import BookingProvider
from kiosk.booking_providers.bokun import BokunBookingProvider
from kiosk.checkin import CheckInOrchestrator
from kiosk.config import Settings, settings as default_settings
from kiosk.errors import CheckInError, InternalError

log = logging.getLogger("kiosk.app")

_START_TIME = time.time()


def _error(exc: CheckInError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def create_app(
    settings: Settings | None = None,
    provider: BookingProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``settings`` and ``provider`` default to the environment configuration
    and the Bokun API; tests pass their own.
    """
    if settings is None:
        settings = default_settings
    for warning in settings.validate_startup():
        log.warning(warning)

    if provider is None:
        provider = BokunBookingProvider.from_settings(settings)
    orchestrator = CheckInOrchestrator(
        provider,
        display_timezone=ZoneInfo(settings.display_timezone),
        arrived_status=settings.arrived_status,
    )

    app = FastAPI(
        title="Kiosk Check-In Proxy",
        description="Bokun check-in proxy serving boarding passes to kiosk pages",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.orchestrator = orchestrator

    app.add_middleware(AccessGate, allowed_origins=settings.allowed_origins)

    # ── Health check ───────────────────────────────────────────

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health check. Confirms the event loop is responsive."""
        uptime = round(time.time() - _START_TIME, 1)
        return JSONResponse({"status": "ok", "uptime": uptime})

    # ── Check-in ───────────────────────────────────────────────

    @app.get("/api/booking")
    @app.get("/api/booking/")
    async def booking_missing_ref(request: Request) -> JSONResponse:
        return await _check_in(request, "")

    @app.get("/api/booking/{booking_ref}")
    async def booking(request: Request, booking_ref: str) -> JSONResponse:
        """Find the booking, mark it arrived and return its boarding pass."""
        return await _check_in(request, booking_ref)

    return app


async def _check_in(request: Request, booking_ref: str) -> JSONResponse:
    orchestrator: CheckInOrchestrator = request.app.state.orchestrator
    try:
        boarding_pass = await orchestrator.check_in(booking_ref)
    except CheckInError as e:
        log.warning("Check-in for %r failed with %d: %s", booking_ref, e.status_code, e.message)
        return _error(e)
    except Exception:
        log.exception("An unexpected internal server error occurred")
        return _error(InternalError())
    return JSONResponse(boarding_pass.model_dump(by_alias=True))


# ── Module-level app instance for uvicorn ──────────────────────

app = create_app()


if __name__ == "__main__":
    import uvicorn

    log_config = uvicorn.config.LOGGING_CONFIG
    log_config["formatters"]["default"]["fmt"] = (
        "%(asctime)s %(name)-12s %(levelname)-8s %(message)s"
    )

    log.info("Bokun proxy server listening on port %d", default_settings.port)
    uvicorn.run(
        "kiosk.app:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
        log_config=log_config,
    )
