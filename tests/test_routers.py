"""
Tests for the HTTP API.

Every service behind the routers is replaced in conftest's ``client``
fixture, so these tests exercise request validation, status mapping and
camelCase serialization only.
"""

import dataclasses

from explainer.ai.detail_levels import get_detail_config
from explainer.ai.styles import PRESETS

from tests.conftest import IMG_1_URL, error_response


class TestExplainEndpoint:
    """Tests for POST /api/explain."""

    def test_success(self, client, fake_completion):
        response = client.post("/api/explain", json={"question": "How do volcanoes work?"})

        assert response.status_code == 200
        data = response.json()
        assert data["preset"] == PRESETS[0].name
        assert IMG_1_URL in data["html"]
        assert [c["role"] for c in fake_completion.calls] == ["plan", "render"]

    def test_short_with_custom_style(self, client, fake_completion):
        response = client.post("/api/explain", json={
            "question": "What is DNS?",
            "detailLevel": "short",
            "customStyle": {"accentColor": "#06B6D4", "fontPairing": "midnight-scholar", "mode": "light"},
        })

        assert response.status_code == 200
        assert response.json()["preset"] == "custom-light"
        assert [c["role"] for c in fake_completion.calls] == ["short"]

    def test_missing_question(self, client, fake_completion):
        response = client.post("/api/explain", json={})
        assert response.status_code == 422
        assert fake_completion.calls == []

    def test_blank_question(self, client, fake_completion):
        response = client.post("/api/explain", json={"question": "   "})

        assert response.status_code == 422
        assert response.json()["detail"] == "Question is required"
        assert fake_completion.calls == []

    def test_question_too_long(self, client):
        response = client.post("/api/explain", json={"question": "x" * 501})
        assert response.status_code == 422

    def test_bad_accent_color(self, client, fake_completion):
        response = client.post("/api/explain", json={
            "question": "What is DNS?",
            "customStyle": {"accentColor": "cyan"},
        })
        assert response.status_code == 422
        assert fake_completion.calls == []

    def test_bad_detail_level(self, client):
        response = client.post("/api/explain", json={"question": "What is DNS?", "detailLevel": "epic"})
        assert response.status_code == 422

    def test_upstream_failure(self, client, fake_completion):
        fake_completion.failures["render"] = error_response("OpenRouter API error (500): overloaded", 500)

        response = client.post("/api/explain", json={"question": "How do volcanoes work?"})

        assert response.status_code == 502
        assert "overloaded" in response.json()["detail"]

    def test_timeout(self, client, fake_completion, monkeypatch):
        monkeypatch.setattr(
            "explainer.ai.pipeline.orchestrator.get_detail_config",
            lambda level: dataclasses.replace(get_detail_config(level), render_timeout_s=0.05),
        )
        fake_completion.delays["short"] = 5

        response = client.post("/api/explain", json={"question": "What is DNS?", "detailLevel": "short"})

        assert response.status_code == 504
        assert response.json()["detail"].startswith("Request timed out")


class TestPreviewEndpoint:
    """Tests for POST /api/preview."""

    def test_success(self, client):
        response = client.post("/api/preview", json={"question": "Why do volcanoes erupt?"})

        assert response.status_code == 200
        assert response.json() == {"text": "Volcanoes vent molten rock from deep below the crust."}

    def test_upstream_failure(self, client, fake_completion):
        fake_completion.failures["preview"] = error_response("OpenRouter returned an empty or malformed response")

        response = client.post("/api/preview", json={"question": "Why do volcanoes erupt?"})

        assert response.status_code == 502


class TestExportEndpoints:
    """Tests for POST /api/export and GET /api/downloads/{token}."""

    def test_png_export_and_download(self, client, fake_renderer):
        response = client.post("/api/export", json={
            "html": "<h1>Hi</h1><script>x()</script>",
            "format": "png",
            "filename": "volcanoes",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["filename"] == "volcanoes.png"
        assert data["mediaType"] == "image/png"
        assert data["pageCount"] == 1
        assert data["expiresIn"] == 60
        assert "<script" not in fake_renderer.captured[0]

        download = client.get(data["downloadUrl"])
        assert download.status_code == 200
        assert download.headers["content-type"] == "image/png"
        assert 'filename="volcanoes.png"' in download.headers["content-disposition"]
        assert download.content.startswith(b"\x89PNG")

    def test_pdf_export(self, client):
        response = client.post("/api/export", json={"html": "<h1>Hi</h1>", "format": "pdf"})

        assert response.status_code == 200
        download = client.get(response.json()["downloadUrl"])
        assert download.content.startswith(b"%PDF")

    def test_revoked_download(self, client, downloads):
        data = client.post("/api/export", json={"html": "<h1>Hi</h1>"}).json()
        token = data["downloadUrl"].rsplit("/", 1)[-1]

        downloads.revoke(token)

        assert client.get(data["downloadUrl"]).status_code == 404

    def test_unknown_token(self, client):
        assert client.get("/api/downloads/nope").status_code == 404

    def test_capture_failure(self, client, fake_renderer, downloads):
        from explainer.export import ExportError

        fake_renderer.error = ExportError("Export capture failed: boom", phase="capture")

        response = client.post("/api/export", json={"html": "<h1>Hi</h1>"})

        assert response.status_code == 500
        assert response.json()["detail"].startswith("Export failed")
        assert downloads.issued_count == 0

    def test_bad_format(self, client):
        response = client.post("/api/export", json={"html": "<h1>Hi</h1>", "format": "gif"})
        assert response.status_code == 422

    def test_empty_html(self, client):
        assert client.post("/api/export", json={"html": ""}).status_code == 422


class TestHistoryEndpoints:
    """Tests for /api/history."""

    DRAFT = {
        "question": "What is DNS?",
        "html": "<p>DNS</p>",
        "previewText": "DNS maps names to addresses.",
        "presetName": "midnight-scholar",
        "detailLevel": "short",
    }

    def test_empty(self, client):
        response = client.get("/api/history")
        assert response.status_code == 200
        assert response.json() == []

    def test_add_and_list(self, client):
        created = client.post("/api/history", json=self.DRAFT)

        assert created.status_code == 201
        entry = created.json()
        assert entry["id"]
        assert entry["htmlSize"] == len("<p>DNS</p>")
        assert entry["presetName"] == "midnight-scholar"

        listed = client.get("/api/history").json()
        assert len(listed) == 1
        assert listed[0]["id"] == entry["id"]
        assert listed[0]["relativeTime"] == "now"
        assert listed[0]["previewText"] == "DNS maps names to addresses."

    def test_get_one(self, client):
        entry = client.post("/api/history", json=self.DRAFT).json()

        assert client.get(f"/api/history/{entry['id']}").json()["question"] == "What is DNS?"
        assert client.get("/api/history/missing").status_code == 404

    def test_delete_one(self, client):
        keep = client.post("/api/history", json=self.DRAFT).json()
        drop = client.post("/api/history", json=self.DRAFT).json()

        assert client.delete(f"/api/history/{drop['id']}").status_code == 204

        assert [e["id"] for e in client.get("/api/history").json()] == [keep["id"]]

    def test_clear(self, client):
        client.post("/api/history", json=self.DRAFT)

        assert client.delete("/api/history").status_code == 204
        assert client.get("/api/history").json() == []

    def test_usage(self, client):
        client.post("/api/history", json=self.DRAFT)

        usage = client.get("/api/history/usage").json()
        assert usage["entryCount"] == 1
        assert usage["total"] == 4_500_000
        assert usage["used"] > 0

    def test_missing_fields(self, client):
        assert client.post("/api/history", json={"question": "x"}).status_code == 422


class TestMiscEndpoints:
    """Tests for health, stats and the shell page."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert "openrouter_configured" in response.json()

    def test_stats(self, client):
        response = client.get("/api/stats?limit=0")

        assert response.status_code == 200
        data = response.json()
        for key in ("total_requests", "success_rate", "requests_by_stage", "recent"):
            assert key in data
        assert len(data["recent"]) <= 1

    def test_shell_page(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert 'sandbox=""' in response.text
        assert "__FONT_OPTIONS__" not in response.text
        assert 'value="forest-green"' in response.text
