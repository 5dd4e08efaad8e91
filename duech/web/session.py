"""
Request-scoped session handling: cookie in, ``g.user`` out.
"""
import logging
from functools import wraps

from flask import Response, g, request

from ..auth import SessionUser
from ..core.errors import AuthenticationError
from .services import get_services

logger = logging.getLogger(__name__)


def load_session_user():
    """Resolve the session cookie into ``g.user``; flag stale cookies for removal."""
    services = get_services()
    token = request.cookies.get(services.settings.auth.cookie_name)
    g.user = services.sessions.resolve(token)
    g.clear_session_cookie = bool(token) and g.user is None


def drop_stale_cookie(response: Response) -> Response:
    if g.get("clear_session_cookie") and not g.get("session_cookie_set"):
        clear_session_cookie(response)
    return response


def current_user() -> SessionUser | None:
    return g.get("user")


def set_session_cookie(response: Response, token: str):
    settings = get_services().settings
    response.set_cookie(
        settings.auth.cookie_name,
        token,
        max_age=settings.auth.max_age,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="Lax",
        path="/",
    )
    g.session_cookie_set = True


def clear_session_cookie(response: Response):
    settings = get_services().settings
    response.delete_cookie(
        settings.auth.cookie_name,
        path="/",
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="Lax",
    )


def editor_mode_requested() -> bool:
    return (
        request.headers.get("X-Editor-Mode", "").lower() == "true"
        or request.args.get("editorMode") == "true"
    )


def editor_mode() -> bool:
    """Editor mode is only granted to authenticated users."""
    return editor_mode_requested() and current_user() is not None


def login_required(view):
    """Reject anonymous requests with 401."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            raise AuthenticationError("Unauthorized")
        return view(*args, **kwargs)
    return wrapper
