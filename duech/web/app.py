"""
Flask application factory.

Usage:
    from duech.web import create_app
    app = create_app()
    app.run()
"""
import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.config import Settings, get_settings
from ..core.database import Database
from ..core.errors import DuechError
from .api import BLUEPRINTS
from .rate_limiting import init_limiter
from .services import build_services
from .session import drop_stale_cookie, load_session_user

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> Flask:
    """
    Build the API application.

    Args:
        settings: Settings to use; defaults to the cached environment settings
        database: Pre-built database (tests); defaults to the configured path
    """
    settings = settings or get_settings()

    app = Flask(__name__)
    app.config["DUECH_SETTINGS"] = settings
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    app.extensions["duech"] = build_services(settings, database)
    init_limiter(app, settings)

    app.before_request(load_session_user)
    app.after_request(drop_stale_cookie)

    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
    register_error_handlers(app)

    logger.info(f"DUECh API ready ({settings.app.env})")
    return app


def register_error_handlers(app: Flask):
    @app.errorhandler(DuechError)
    def domain_error(error: DuechError):
        if error.status_code >= 500:
            logger.error(f"Domain error: {error}", exc_info=True)
        return jsonify({"success": False, "error": str(error)}), error.status_code

    @app.errorhandler(429)
    def rate_limited(error):
        logger.warning(f"Rate limit exceeded: {error.description}")
        return jsonify({"success": False, "error": "Too Many Requests"}), 429

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        return jsonify({"success": False, "error": error.description}), error.code

    @app.errorhandler(Exception)
    def unexpected_error(error: Exception):
        logger.exception(f"Unhandled exception: {error}")
        return jsonify({"success": False, "error": "Internal server error"}), 500
