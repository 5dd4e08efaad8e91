"""
Bibliographic sources cited in examples.
"""
from flask import Blueprint, jsonify

from ...core.errors import NotFoundError
from ..rate_limiting import api_limit
from ..services import get_services
from ..session import editor_mode

bp = Blueprint("sources", __name__, url_prefix="/api/sources")


@bp.route("", methods=["GET"])
@api_limit()
def list_sources():
    sources = get_services().index.get_unique_sources(include_drafts=editor_mode())
    return jsonify({"success": True, "data": sources})


@bp.route("/<path:publication>", methods=["GET"])
@api_limit()
def words_by_source(publication: str):
    """Words citing ``publication``, alphabetical."""
    words = get_services().index.get_words_by_source(publication, include_drafts=editor_mode())
    if not words:
        raise NotFoundError(f"No words cite '{publication}'")
    return jsonify({
        "success": True,
        "data": {"publication": publication, "words": [w.to_dict() for w in words]},
    })
