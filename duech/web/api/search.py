"""
Search endpoint.

GET /api/search?q=...&categories=a,b&letters=c&page=1&limit=20

Facets are comma-separated lists; marker facets use their camelCase key
as the parameter name (e.g. ``socialValuations=vulg``). ``meta=true``
returns only the filter metadata.
"""
import logging

from flask import Blueprint, jsonify, request

from ...core.errors import ValidationError
from ...core.vocabulary import MARKER_KEYS
from ...search import SearchFilters, clamp_pagination, coerce_int
from ..rate_limiting import api_limit
from ..services import get_services
from ..session import editor_mode
from .common import parse_list

logger = logging.getLogger(__name__)

bp = Blueprint("search", __name__, url_prefix="/api")


def parse_filters() -> SearchFilters:
    settings = get_services().settings
    query = request.args.get("q", "").strip()
    if len(query) > settings.search.max_query_length:
        raise ValidationError("Query too long")

    return SearchFilters(
        query=query or None,
        categories=parse_list("categories"),
        origins=parse_list("origins"),
        letters=parse_list("letters"),
        dictionaries=parse_list("dictionaries"),
        markers={key: parse_list(key) for key in MARKER_KEYS},
        status=request.args.get("status", "").strip() or None,
        assigned_to=parse_list("assignedTo"),
    )


@bp.route("/search", methods=["GET"])
@api_limit()
def search():
    """Ranked, faceted, paginated word search."""
    services = get_services()
    filters = parse_filters()
    page, limit = clamp_pagination(
        coerce_int(request.args.get("page"), 1),
        coerce_int(request.args.get("limit"), services.settings.search.default_limit),
        services.settings.search.max_limit,
    )
    metadata = services.index.search_metadata()

    if request.args.get("meta") == "true":
        return jsonify({
            "success": True,
            "data": {
                "results": [],
                "metadata": metadata,
                "pagination": {
                    "page": 1,
                    "limit": limit,
                    "total": 0,
                    "totalPages": 0,
                    "hasNext": False,
                    "hasPrev": False,
                },
            },
        })

    result = services.index.search(filters, page=page, page_size=limit, editor_mode=editor_mode())
    data = result.to_dict()
    data["metadata"] = metadata
    return jsonify({"success": True, "data": data})
