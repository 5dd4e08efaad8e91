"""
API tests for word lookup, editing, word of the day and editorial options.
"""
from conftest import login

from duech.core.config import AuthSettings, RateLimitSettings, Settings
from duech.core.database import Database
from duech.web import create_app

EDITOR = {"X-Editor-Mode": "true"}


class TestWordLookup:

    def test_get_published_word(self, client):
        response = client.get("/api/words/chancho")
        data = response.get_json()["data"]

        assert response.status_code == 200
        assert data["lemma"] == "chancho"
        assert data["meanings"][0]["examples"][0]["publication"] == "Martín Rivas"

    def test_lemma_with_space(self, client):
        assert client.get("/api/words/al tiro").status_code == 200

    def test_draft_hidden_from_public(self, client):
        response = client.get("/api/words/pololear")

        assert response.status_code == 404
        assert response.get_json() == {"success": False, "error": "Word not found"}

    def test_draft_visible_in_editor_mode(self, client):
        login(client, "lexi")
        response = client.get("/api/words/pololear", headers=EDITOR)
        assert response.get_json()["data"]["status"] == "redacted"

    def test_lemma_too_long(self, client):
        assert client.get("/api/words/" + "a" * 101).status_code == 400


class TestWordOfTheDay:

    def test_of_the_day(self, client, editor):
        editor.create_word({"lemma": "once", "values": [{"meaning": "Merienda."}]}, status="published")
        response = client.get("/api/words/of-the-day", query_string={"date": "2025-01-01"})
        data = response.get_json()["data"]

        assert response.status_code == 200
        assert data["date"] == "2025-01-01"
        assert data["word"]["status"] == "published"

    def test_invalid_date(self, client):
        assert client.get("/api/words/of-the-day?date=mañana").status_code == 400

    def test_empty_dictionary(self, tmp_path):
        settings = Settings(
            auth=AuthSettings(AUTH_SECRET="test-secret"),
            rate_limits=RateLimitSettings(RATE_LIMIT_ENABLED=False),
        )
        app = create_app(settings, database=Database(tmp_path / "empty.db"))
        response = app.test_client().get("/api/words/of-the-day")

        assert response.status_code == 404
        assert response.get_json()["success"] is False


class TestRedactedReport:

    def test_requires_login(self, client):
        assert client.get("/api/words/redacted").status_code == 401

    def test_report(self, client):
        login(client, "coord")
        client.put("/api/words/pololear", json={"comment": "Falta ejemplo"})
        data = client.get("/api/words/redacted").get_json()

        assert data["count"] == 1
        assert data["words"][0]["lemma"] == "pololear"
        assert data["words"][0]["comments"][0]["note"] == "Falta ejemplo"


class TestCreateWord:

    def test_requires_login(self, client):
        response = client.post("/api/words/fome", json={"lemma": "fome"})
        assert response.status_code == 401

    def test_create_with_placeholder_meaning(self, client, users):
        login(client, "lexi")
        response = client.post("/api/words/fome", json={"lemma": "fome"})

        assert response.status_code == 201
        assert response.get_json()["data"]["letter"] == "f"

        word = client.get("/api/words/fome", headers=EDITOR).get_json()["data"]
        assert word["status"] == "included"
        assert word["createdBy"] == users["lexi"].id
        assert [m["meaning"] for m in word["meanings"]] == ["Definición pendiente"]

    def test_create_with_meanings_and_assignee(self, client, users):
        login(client, "admin")
        response = client.post("/api/words/cuático", json={
            "lemma": "cuático",
            "status": "published",
            "assignedTo": [str(users["lexi"].id)],
            "values": [{"meaning": "Exagerado.", "grammarCategory": "adj"}],
        })
        assert response.status_code == 201

        word = client.get("/api/words/cuático").get_json()["data"]
        assert word["assignedTo"] == users["lexi"].id
        assert word["meanings"][0]["grammarCategory"] == "adj"

    def test_duplicate(self, client):
        login(client, "lexi")
        response = client.post("/api/words/chancho", json={"lemma": "chancho"})

        assert response.status_code == 409
        assert response.get_json()["error"] == 'Ya existe una palabra con el lema "chancho"'

    def test_status_outside_role(self, client):
        login(client, "lexi")
        response = client.post("/api/words/fome", json={"lemma": "fome", "status": "published"})
        assert response.status_code == 403

    def test_missing_lemma(self, client):
        login(client, "lexi")
        assert client.post("/api/words/fome", json={"root": "fome"}).status_code == 400

    def test_non_json_body(self, client):
        login(client, "lexi")
        response = client.post("/api/words/fome", data="lemma=fome")
        assert response.status_code == 400


class TestUpdateWord:

    def test_update_word_and_status(self, client, users):
        login(client, "admin")
        response = client.put("/api/words/pololear", json={
            "word": {"lemma": "pololear", "values": [{"meaning": "Andar de novios."}]},
            "status": "published",
            "assignedTo": users["coord"].id,
        })
        assert response.status_code == 200

        word = client.get("/api/words/pololear").get_json()["data"]
        assert word["status"] == "published"
        assert word["assignedTo"] == users["coord"].id
        assert word["meanings"][0]["meaning"] == "Andar de novios."

    def test_update_without_status_keeps_it(self, client):
        login(client, "lexi")
        client.put("/api/words/pololear", json={"word": {"lemma": "pololear", "values": []}})

        word = client.get("/api/words/pololear", headers=EDITOR).get_json()["data"]
        assert word["status"] == "redacted"
        assert word["meanings"] == []

    def test_comment_only(self, client):
        login(client, "coord")
        response = client.put("/api/words/chancho", json={"comment": "  Revisar  "})
        comment = response.get_json()["data"]["comment"]

        assert comment["note"] == "Revisar"
        assert comment["user"]["username"] == "coord"

    def test_comment_with_word(self, client):
        login(client, "coord")
        response = client.put("/api/words/pololear", json={
            "word": {"lemma": "pololear"}, "comment": "Sin acepciones",
        })

        assert response.get_json()["data"]["comment"]["note"] == "Sin acepciones"
        report = client.get("/api/words/redacted").get_json()
        assert [c["note"] for c in report["words"][0]["comments"]] == ["Sin acepciones"]

    def test_comment_dropped_when_update_refused(self, client):
        login(client, "lexi")
        response = client.put("/api/words/pololear", json={
            "word": {"lemma": "pololear"}, "status": "published", "comment": "Lista",
        })
        assert response.status_code == 403

        report = client.get("/api/words/redacted").get_json()
        assert report["words"][0]["lemma"] == "pololear"
        assert report["words"][0]["comments"] == []

    def test_nothing_to_update(self, client):
        login(client, "coord")
        assert client.put("/api/words/chancho", json={}).status_code == 400

    def test_status_forbidden_for_role(self, client):
        login(client, "lexi")
        response = client.put("/api/words/chancho", json={
            "word": {"lemma": "chancho"}, "status": "archaic",
        })
        assert response.status_code == 403

    def test_rename_conflict(self, client):
        login(client, "admin")
        response = client.put("/api/words/chancho", json={"word": {"lemma": "pololo"}})
        assert response.status_code == 409

    def test_unknown_word(self, client):
        login(client, "admin")
        response = client.put("/api/words/nada", json={"word": {"lemma": "nada"}})
        assert response.status_code == 404


class TestDeleteWord:

    def test_delete(self, client):
        login(client, "admin")

        assert client.delete("/api/words/chancho").get_json() == {"success": True}
        assert client.get("/api/words/chancho").status_code == 404

    def test_delete_requires_login(self, client):
        assert client.delete("/api/words/chancho").status_code == 401

    def test_delete_unknown(self, client):
        login(client, "admin")
        assert client.delete("/api/words/nada").status_code == 404


class TestEditorialOptions:

    def test_requires_login(self, client):
        assert client.get("/api/editorial/options").status_code == 401

    def test_lexicographer(self, client, users):
        login(client, "lexi")
        data = client.get("/api/editorial/options").get_json()["data"]

        assert [s["value"] for s in data["statuses"]] == ["preredacted", "redacted"]
        assert data["assignees"] == [{"value": str(users["lexi"].id), "label": "lexi"}]

    def test_admin(self, client):
        login(client, "admin")
        data = client.get("/api/editorial/options").get_json()["data"]

        assert len(data["statuses"]) == 7
        assert sorted(a["label"] for a in data["assignees"]) == ["coord", "lexi"]

    def test_vocabularies(self, client):
        login(client, "lexi")
        vocabularies = client.get("/api/editorial/options").get_json()["data"]["vocabularies"]

        assert {"value": "adj", "label": "Adjetivo"} in vocabularies["categories"]
        assert vocabularies["markers"]["socialValuations"]["label"] == "Valoración social"
        assert {"value": "vulgar", "label": "Vulgar"} in vocabularies["markers"]["socialValuations"]["options"]
