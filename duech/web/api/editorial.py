"""
Editorial workflow options for the signed-in user.
"""
from flask import Blueprint, jsonify

from ...editorial import assignable_users, status_options_for_role, vocabulary_options
from ..services import get_services
from ..session import current_user, login_required

bp = Blueprint("editorial", __name__, url_prefix="/api/editorial")


@bp.route("/options", methods=["GET"])
@login_required
def options():
    """Statuses and assignees the caller may pick, plus the meaning vocabularies."""
    user = current_user()
    users = [u.to_dict() for u in get_services().users.list_users()]
    me = {"id": user.id, "username": user.name, "role": user.role}
    return jsonify({
        "success": True,
        "data": {
            "statuses": status_options_for_role(user.role),
            "assignees": assignable_users(users, me),
            "vocabularies": vocabulary_options(),
        },
    })
