"""
Word endpoints: lookup, create, update, delete, word of the day,
and the redacted-words report.
"""
import logging
from datetime import date

from flask import Blueprint, jsonify, request

from ...core.errors import NotFoundError, ValidationError
from ...editorial import UNSET, parse_word, resolve_user_id
from ..rate_limiting import api_limit
from ..services import get_services
from ..session import current_user, editor_mode, login_required
from .common import json_body

logger = logging.getLogger(__name__)

bp = Blueprint("words", __name__, url_prefix="/api/words")

MAX_LEMMA_LENGTH = 100


@bp.route("/of-the-day", methods=["GET"])
@api_limit()
def word_of_the_day():
    """Deterministic daily word; ``?date=YYYY-MM-DD`` picks another day."""
    raw_date = request.args.get("date")
    try:
        day = date.fromisoformat(raw_date) if raw_date else None
    except ValueError:
        raise ValidationError("Invalid date, expected YYYY-MM-DD") from None

    try:
        daily = get_services().word_of_the_day.pick(day)
    except LookupError as e:
        raise NotFoundError(str(e)) from e
    return jsonify({"success": True, "data": daily.to_dict()})


@bp.route("/redacted", methods=["GET"])
@login_required
def redacted_words():
    """Words in status 'redacted', with meanings and notes."""
    words = get_services().index.get_redacted_words()
    return jsonify({
        "success": True,
        "words": [w.to_dict() for w in words],
        "count": len(words),
    })


@bp.route("/<path:lemma>", methods=["GET"])
@api_limit()
def get_word(lemma: str):
    lemma = lemma.strip()
    if not lemma:
        raise ValidationError("Invalid lemma parameter")
    if len(lemma) > MAX_LEMMA_LENGTH:
        raise ValidationError("Lemma too long")

    entry = get_services().index.get_word_by_lemma(lemma, include_drafts=editor_mode())
    if entry is None:
        raise NotFoundError("Word not found")
    return jsonify({"success": True, "data": entry.to_dict()})


@bp.route("/<path:lemma>", methods=["POST"])
@api_limit()
@login_required
def create_word(lemma: str):
    """Create a word; a word without meanings gets a placeholder one."""
    body = json_body()
    user = current_user()
    payload = {
        "lemma": body.get("lemma") if isinstance(body.get("lemma"), str) else "",
        "root": body.get("root") if isinstance(body.get("root"), str) else "",
        "meanings": body.get("values", body.get("meanings")),
    }
    if not payload["lemma"].strip():
        raise ValidationError("El lema es obligatorio")

    services = get_services()
    word = services.editor.create_word(
        parse_word(payload).with_placeholder_meaning(),
        letter=body.get("letter") if isinstance(body.get("letter"), str) else None,
        status=body.get("status") if isinstance(body.get("status"), str) else None,
        created_by=user.id,
        assigned_to=resolve_user_id(body.get("assignedTo")),
        actor_role=user.role,
    )
    return jsonify({"success": True, "data": word}), 201


@bp.route("/<path:lemma>", methods=["PUT"])
@login_required
def update_word(lemma: str):
    """
    Update a word and/or add a comment.

    Body: ``{word?, status?, assignedTo?, comment?}``. The word's meanings
    are replaced wholesale; ``status`` and ``assignedTo`` are only touched
    when present. A comment sent with a word is saved together with it,
    or not at all.
    """
    body = json_body()
    user = current_user()
    editor = get_services().editor

    comment = body.get("comment")
    comment = comment.strip() if isinstance(comment, str) else ""
    word = body.get("word")

    if word:
        note = editor.update_word_by_lemma(
            lemma,
            word,
            status=body["status"] if isinstance(body.get("status"), str) else UNSET,
            assigned_to=resolve_user_id(body["assignedTo"]) if "assignedTo" in body else UNSET,
            actor_role=user.role,
            note=comment or None,
            note_by=user.id,
        )
    elif comment:
        note = editor.add_note(lemma, comment, user.id)
    else:
        raise ValidationError("No se proporcionaron cambios para actualizar")

    response: dict = {"success": True}
    if note is not None:
        response["data"] = {"comment": note.model_dump(by_alias=True, mode="json")}
    return jsonify(response)


@bp.route("/<path:lemma>", methods=["DELETE"])
@login_required
def delete_word(lemma: str):
    get_services().editor.delete_word_by_lemma(lemma)
    return jsonify({"success": True})
