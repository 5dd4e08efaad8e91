"""
Per-client request limits for the API.

Clients are keyed by the first X-Forwarded-For address when the app
sits behind a proxy, otherwise by the socket address. Metadata-only
search requests get a more generous limit than regular ones.

The limiter is shared by every app in the process, so the limits and
the on/off switch are read from the current app's settings on each
request. The counter storage is shared as well and follows the
storage URI of the most recently created app.
"""
import logging

from flask import Flask, current_app, request
from flask_limiter import Limiter

from ..core.config import Settings

logger = logging.getLogger(__name__)


def get_remote_address() -> str:
    """Client address, honouring the first X-Forwarded-For entry."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first = forwarded.split(",")[0].strip()
    return first or request.remote_addr or "127.0.0.1"


limiter = Limiter(get_remote_address)


def api_rate_limit() -> str:
    """Limit string for the current request, read from the app settings."""
    limits = current_app.config["DUECH_SETTINGS"].rate_limits
    if request.args.get("meta") == "true":
        return limits.metadata
    return limits.default


def rate_limit_disabled() -> bool:
    return not current_app.config["DUECH_SETTINGS"].rate_limits.enabled


def api_limit():
    """Decorator applying the API limit unless the current app turns it off."""
    return limiter.limit(api_rate_limit, exempt_when=rate_limit_disabled)


def init_limiter(app: Flask, settings: Settings):
    # Disabling is per app through the exemption; the shared switch stays on.
    app.config["RATELIMIT_ENABLED"] = True
    app.config["RATELIMIT_STORAGE_URI"] = settings.rate_limits.storage_uri
    app.config["RATELIMIT_HEADERS_ENABLED"] = True
    limiter.init_app(app)
    logger.info(
        f"Rate limiting {'enabled' if settings.rate_limits.enabled else 'disabled'}: "
        f"{settings.rate_limits.default} ({settings.rate_limits.metadata} for metadata)"
    )
