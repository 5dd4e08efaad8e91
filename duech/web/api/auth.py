"""
Login, logout, current user and password change.
"""
import logging

from flask import Blueprint, jsonify, request

from ...core.errors import AuthenticationError, ValidationError
from ..services import get_services
from ..session import clear_session_cookie, current_user, set_session_cookie
from .common import json_body

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.route("/login", methods=["POST"])
def login():
    """
    Authenticate by e-mail or username.

    Body: ``{email, password, redirectTo?}``; ``email`` may hold a username.
    """
    body = json_body()
    identifier = body.get("email") or body.get("username")
    password = body.get("password")
    if not isinstance(identifier, str) or not isinstance(password, str) or not identifier or not password:
        raise ValidationError("Email and password are required")

    user, token = get_services().sessions.login(identifier, password)
    response = jsonify({
        "success": True,
        "redirectTo": body.get("redirectTo") or "/",
        "user": user.to_dict(),
    })
    set_session_cookie(response, token)
    return response


@bp.route("/logout", methods=["POST"])
def logout():
    get_services().sessions.logout(current_user())
    response = jsonify({
        "success": True,
        "redirectTo": request.args.get("redirect") or "/login",
    })
    clear_session_cookie(response)
    return response


@bp.route("/me", methods=["GET"])
def me():
    user = current_user()
    if user is None:
        return jsonify({"user": None}), 401
    return jsonify({"user": user.to_dict()})


@bp.route("/change-password", methods=["POST"])
def change_password():
    """Set a new password with a reset token; body ``{token, newPassword}``."""
    body = json_body()
    token = body.get("token")
    new_password = body.get("newPassword")
    if not isinstance(token, str) or not isinstance(new_password, str):
        raise ValidationError("Token y contraseña son requeridos")

    try:
        get_services().accounts.change_password(token, new_password)
    except AuthenticationError:
        logger.warning("Password change with an unknown token")
        raise
    return jsonify({"success": True, "message": "Contraseña actualizada exitosamente"})
