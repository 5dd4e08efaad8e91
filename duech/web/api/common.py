"""
Request parsing helpers shared by the API blueprints.
"""
from flask import request

from ...core.errors import ValidationError


def json_body() -> dict:
    """The request's JSON object; anything else is a 400."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Solicitud inválida: se esperaba un objeto JSON")
    return body


def parse_list(name: str) -> list[str]:
    """Comma-separated query parameter as a list of non-blank values."""
    raw = request.args.get(name, "")
    return [value.strip() for value in raw.split(",") if value.strip()]
