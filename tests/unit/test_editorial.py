"""
Unit tests for word mutations and workflow rules.
"""
import pytest

from duech.core.errors import (
    DuplicateWordError,
    PermissionDeniedError,
    ValidationError,
    WordNotFoundError,
)
from duech.editorial import (
    UNSET,
    assignable_users,
    can_assign_status,
    resolve_user_id,
    status_options_for_role,
    vocabulary_options,
)


class TestCreateWord:

    def test_create_defaults(self, editor, index):
        result = editor.create_word({"lemma": "  Fome ", "values": [{"meaning": "Aburrido."}]})

        assert result["lemma"] == "Fome"
        assert result["letter"] == "f"
        entry = index.get_word_by_lemma("Fome", include_drafts=True)
        assert entry.status == "included"
        assert entry.meanings[0].meaning == "Aburrido."

    def test_requested_letter_wins(self, editor):
        result = editor.create_word({"lemma": "al tiro"}, letter="Tiro")
        assert result["letter"] == "t"

    def test_enye_letter(self, editor):
        assert editor.create_word({"lemma": "Ñandú"})["letter"] == "ñ"

    def test_blank_lemma_rejected(self, editor):
        with pytest.raises(ValidationError):
            editor.create_word({"lemma": "   "})

    def test_duplicate_rejected(self, editor):
        editor.create_word({"lemma": "fome"})
        with pytest.raises(DuplicateWordError, match='"fome"'):
            editor.create_word({"lemma": "fome"})

    def test_payload_normalization(self, editor, index):
        editor.create_word({
            "lemma": "cuático",
            "values": [
                {"meaning": "", "categories": ["adj", "m"], "styleMarkers": ["esm"],
                 "examples": [{"value": ""}, {"value": "Está cuático.", "source": "El Mercurio", "year": 1999}]},
                {"meaning": "Exagerado."},
            ],
        })
        meanings = index.get_word_by_lemma("cuático", include_drafts=True).meanings

        assert [m.number for m in meanings] == [1, 2]
        assert meanings[0].meaning == "Definición 1"
        assert meanings[0].grammar_category == "adj"
        assert meanings[0].style_markers == "esm"
        assert len(meanings[0].examples) == 1
        assert meanings[0].examples[0].publication == "El Mercurio"
        assert meanings[0].examples[0].year == "1999"

    def test_role_status_check(self, editor):
        with pytest.raises(PermissionDeniedError):
            editor.create_word({"lemma": "fome"}, status="published", actor_role="lexicographer")
        editor.create_word({"lemma": "fome"}, status="redacted", actor_role="lexicographer")


class TestUpdateWord:

    @pytest.fixture
    def fome(self, editor):
        editor.create_word({
            "lemma": "fome",
            "values": [{"meaning": "Aburrido.", "examples": [{"value": "Qué fome."}]}],
        })

    def test_replaces_meanings(self, editor, index, fome):
        editor.update_word_by_lemma("fome", {
            "lemma": "fome",
            "root": "fome",
            "values": [{"meaning": "Sin gracia."}, {"meaning": "Insípido."}],
        })
        entry = index.get_word_by_lemma("fome", include_drafts=True)

        assert [m.meaning for m in entry.meanings] == ["Sin gracia.", "Insípido."]
        assert entry.meanings[0].examples == []
        assert entry.root == "fome"

    def test_examples_cascade_with_meanings(self, editor, database, fome):
        editor.update_word_by_lemma("fome", {"lemma": "fome", "values": []})
        with database.connect() as conn:
            assert conn.execute("SELECT COUNT(*) FROM examples").fetchone()[0] == 0
            assert conn.execute("SELECT COUNT(*) FROM meanings").fetchone()[0] == 0

    def test_rename(self, editor, index, fome):
        editor.update_word_by_lemma("fome", {"lemma": "fomeque"})

        assert index.get_word_by_lemma("fome", include_drafts=True) is None
        assert index.get_word_by_lemma("fomeque", include_drafts=True) is not None

    def test_rename_onto_existing_lemma(self, editor, fome):
        editor.create_word({"lemma": "lata"})
        with pytest.raises(DuplicateWordError):
            editor.update_word_by_lemma("fome", {"lemma": "lata"})

    def test_unknown_lemma(self, editor):
        with pytest.raises(WordNotFoundError):
            editor.update_word_by_lemma("nada", {"lemma": "nada"})

    def test_status_and_assignee_optional(self, editor, index, users, fome):
        editor.update_word_by_lemma("fome", {"lemma": "fome"}, status="redacted",
                                    assigned_to=users["lexi"].id)
        editor.update_word_by_lemma("fome", {"lemma": "fome"})
        entry = index.get_word_by_lemma("fome", include_drafts=True)

        assert entry.status == "redacted"
        assert entry.assigned_to == users["lexi"].id

        editor.update_word_by_lemma("fome", {"lemma": "fome"}, assigned_to=None)
        assert index.get_word_by_lemma("fome", include_drafts=True).assigned_to is None

    def test_status_change_refused_for_role(self, editor, fome):
        with pytest.raises(PermissionDeniedError):
            editor.update_word_by_lemma("fome", {"lemma": "fome"}, status="published",
                                        actor_role="coordinator")

    def test_unchanged_status_is_not_checked(self, editor, fome):
        # "included" is outside the lexicographer subset but is the current status
        editor.update_word_by_lemma("fome", {"lemma": "fome"}, status="included",
                                    actor_role="lexicographer")

    def test_unset_leaves_status(self, editor, index, fome):
        editor.update_word_by_lemma("fome", {"lemma": "fome"}, status=UNSET, actor_role="editor")
        assert index.get_word_by_lemma("fome", include_drafts=True).status == "included"

    def test_note_saved_with_update(self, editor, index, users, fome):
        note = editor.update_word_by_lemma("fome", {"lemma": "fomeque"},
                                           note=" Renombrada ", note_by=users["coord"].id)

        assert note.note == "Renombrada"
        assert note.user.username == "coord"
        assert [n.note for n in index.get_word_by_lemma("fomeque", include_drafts=True).notes] == ["Renombrada"]

    def test_no_note_without_text(self, editor, fome):
        assert editor.update_word_by_lemma("fome", {"lemma": "fome"}, note="   ") is None

    def test_refused_update_keeps_no_note(self, editor, database, users, fome):
        editor.create_word({"lemma": "lata"})
        with pytest.raises(DuplicateWordError):
            editor.update_word_by_lemma("fome", {"lemma": "lata"}, note="ojo", note_by=users["coord"].id)
        with pytest.raises(PermissionDeniedError):
            editor.update_word_by_lemma("fome", {"lemma": "fome"}, status="published",
                                        actor_role="lexicographer", note="ojo")

        with database.connect() as conn:
            assert conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0] == 0


class TestDeleteAndNotes:

    def test_delete_cascades(self, editor, database, users):
        editor.create_word({"lemma": "fome", "values": [{"meaning": "x", "examples": [{"value": "y"}]}]})
        editor.add_note("fome", "ojo", users["lexi"].id)
        editor.delete_word_by_lemma("fome")

        with database.connect() as conn:
            for table in ("words", "meanings", "examples", "notes"):
                assert conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0] == 0

    def test_delete_unknown(self, editor):
        with pytest.raises(WordNotFoundError):
            editor.delete_word_by_lemma("nada")

    def test_add_note_returns_author(self, editor, users):
        editor.create_word({"lemma": "fome"})
        note = editor.add_note("fome", "  Revisar  ", users["coord"].id)

        assert note.note == "Revisar"
        assert note.user.username == "coord"
        assert note.resolved is False

    def test_anonymous_note(self, editor):
        editor.create_word({"lemma": "fome"})
        assert editor.add_note("fome", "sin autor", None).user is None

    def test_notes_newest_first(self, editor, index, users):
        editor.create_word({"lemma": "fome"})
        editor.add_note("fome", "primera", users["coord"].id)
        editor.add_note("fome", "segunda", users["coord"].id)

        notes = index.get_word_by_lemma("fome", include_drafts=True).notes
        assert [n.note for n in notes] == ["segunda", "primera"]

    def test_note_on_unknown_word(self, editor):
        with pytest.raises(WordNotFoundError):
            editor.add_note("nada", "x", None)


class TestWorkflow:

    def values(self, role):
        return [o["value"] for o in status_options_for_role(role)]

    def test_admin_options(self):
        expected = ["included", "preredacted", "redacted", "reviewed", "published", "archaic", "quarantined"]
        assert self.values("admin") == expected
        assert self.values("superadmin") == expected

    def test_coordinator_options(self):
        assert self.values("coordinator") == ["preredacted", "reviewed"]

    def test_lexicographer_options(self):
        assert self.values("lexicographer") == ["preredacted", "redacted"]

    @pytest.mark.parametrize("role", ["editor", None, "unknown"])
    def test_other_roles_get_nothing(self, role):
        assert self.values(role) == []

    def test_vocabulary_options(self):
        vocabularies = vocabulary_options()

        assert {"value": "m", "label": "Sustantivo masculino"} in vocabularies["categories"]
        assert {"value": "nahua", "label": "Náhuatl"} in vocabularies["origins"]
        assert vocabularies["dictionaries"][0] == {"value": "duech", "label": "DUECh"}
        assert vocabularies["markers"]["styleMarkers"] == {
            "label": "Marca de estilo",
            "options": [{"value": "espon", "label": "Espontáneo"}, {"value": "esm", "label": "Esmerado"}],
        }

    def test_can_assign_status(self):
        assert can_assign_status("coordinator", "reviewed")
        assert not can_assign_status("coordinator", "published")
        assert not can_assign_status("admin", "imported")

    def test_assignable_users(self):
        pool = [
            {"id": 1, "username": "ana", "role": "lexicographer"},
            {"id": 2, "username": "beto", "role": "coordinator"},
            {"id": 3, "username": "caro", "role": "admin"},
        ]
        assert [o["label"] for o in assignable_users(pool, {"username": "caro", "role": "admin"})] == ["ana", "beto"]
        assert assignable_users(pool, {"username": "ana", "role": "lexicographer"}) == [{"value": "1", "label": "ana"}]
        assert assignable_users(pool, {"username": "x", "role": "editor"}) == []
        assert assignable_users(pool, None) == []

    @pytest.mark.parametrize("raw,expected", [
        (5, 5), ("7", 7), (["3", "4"], 3), ("abc", None), (None, None), (True, None), ([], None),
    ])
    def test_resolve_user_id(self, raw, expected):
        assert resolve_user_id(raw) == expected
