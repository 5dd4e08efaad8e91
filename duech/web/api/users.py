"""
User administration endpoints (admin and superadmin only).

No e-mail is sent: endpoints that issue a password-reset token return
the reset link to the administrator instead.
"""
import logging

from flask import Blueprint, jsonify

from ...core.errors import ValidationError
from ..services import get_services
from ..session import current_user
from .common import json_body

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__, url_prefix="/api/users")


def parse_user_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("Invalid user ID") from None


def reset_link(token: str) -> str:
    host = get_services().settings.app.host_url
    scheme = "https" if get_services().settings.app.is_production else "http"
    return f"{scheme}://{host}/cambiar-contrasena?token={token}"


@bp.route("", methods=["GET"])
def list_users():
    users = get_services().accounts.list_users(current_user())
    return jsonify({"success": True, "data": [u.to_dict() for u in users]})


@bp.route("", methods=["POST"])
def create_user():
    """Create a user with a generated password; body ``{username, email, role}``."""
    body = json_body()
    user, password, token = get_services().accounts.create_user(
        current_user(),
        body.get("username"),
        body.get("email"),
        body.get("role"),
    )
    return jsonify({
        "success": True,
        "data": {
            "user": user.to_dict(),
            "generatedPassword": password,
            "resetLink": reset_link(token),
        },
    }), 201


@bp.route("/<user_id>", methods=["GET"])
def get_user(user_id: str):
    accounts = get_services().accounts
    accounts.require_admin(current_user())
    user = accounts.get_user(current_user(), parse_user_id(user_id))
    return jsonify({"success": True, "data": user.to_dict()})


@bp.route("/<user_id>", methods=["PUT"])
def update_user(user_id: str):
    accounts = get_services().accounts
    accounts.require_admin(current_user())
    target_id = parse_user_id(user_id)
    body = json_body()
    user = accounts.update_user(
        current_user(),
        target_id,
        username=body.get("username"),
        email=body.get("email"),
        role=body.get("role"),
    )
    return jsonify({"success": True, "data": user.to_dict()})


@bp.route("/<user_id>", methods=["DELETE"])
def delete_user(user_id: str):
    accounts = get_services().accounts
    accounts.require_admin(current_user())
    user = accounts.delete_user(current_user(), parse_user_id(user_id))
    return jsonify({"success": True, "data": {"id": user.id, "username": user.username}})


@bp.route("/<user_id>/reset-password", methods=["POST"])
def reset_password(user_id: str):
    accounts = get_services().accounts
    accounts.require_admin(current_user())
    user, token = accounts.reset_password(current_user(), parse_user_id(user_id))
    logger.info(f"Reset link issued for '{user.username}' by {current_user().name}")
    return jsonify({"success": True, "data": {"resetLink": reset_link(token)}})
