"""Integration tests for FastAPI API endpoints using TestClient."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import feedpulse.main as main_module
from feedpulse.config.lexicons import SAMPLE_FEEDBACK
from feedpulse.config.settings import Settings
from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.main import build_services, create_app
from feedpulse.providers.store.memory_store import MemoryFeedbackStore
from feedpulse.utils.errors import BackendUnavailableError, InternalError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_test_app(store: IFeedbackStore | None = None) -> FastAPI:
    """Create the full app with services wired to *store* on app.state."""
    app = create_app()
    for key, value in build_services(store or MemoryFeedbackStore(), {}).items():
        setattr(app.state, key, value)
    return app


@pytest.fixture
def client() -> TestClient:
    return TestClient(_create_test_app())


def _broken_store(error: Exception) -> MagicMock:
    store = MagicMock(spec=IFeedbackStore)
    store.list_all = AsyncMock(side_effect=error)
    store.get_provider_name.return_value = "broken"
    return store


# ======================================================================
# /api/feedback
# ======================================================================


class TestFeedbackEndpoints:

    def test_list_empty(self, client: TestClient) -> None:
        resp = client.get("/api/feedback")
        assert resp.status_code == 200
        assert resp.json() == {"data": []}

    def test_create_and_list(self, client: TestClient) -> None:
        resp = client.post(
            "/api/feedback",
            json={"text": "Great product!", "sentiment": "positive", "confidence": 0.6},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["id"] == 1
        assert body["text"] == "Great product!"
        assert body["sentiment"] == "positive"
        assert body["confidence"] == 0.6
        assert "created_at" in body

        listing = client.get("/api/feedback").json()["data"]
        assert [r["id"] for r in listing] == [1]

    def test_create_without_classification(self, client: TestClient) -> None:
        body = client.post("/api/feedback", json={"text": "Plain note"}).json()
        assert body["sentiment"] is None
        assert body["confidence"] is None

    @pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": "   "}, {"text": None}])
    def test_create_requires_text(self, client: TestClient, payload: dict) -> None:
        resp = client.post("/api/feedback", json=payload)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Feedback text is required"}

    def test_create_rejects_bad_sentiment(self, client: TestClient) -> None:
        resp = client.post("/api/feedback", json={"text": "x", "sentiment": "ecstatic"})
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("Invalid request")

    def test_create_rejects_malformed_json(self, client: TestClient) -> None:
        resp = client.post(
            "/api/feedback",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400

    def test_delete_by_query(self, client: TestClient) -> None:
        client.post("/api/feedback", json={"text": "to delete"})

        resp = client.delete("/api/feedback", params={"id": "1"})
        assert resp.status_code == 200
        assert resp.json() == {"deleted": 1}

        resp = client.delete("/api/feedback", params={"id": "1"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Feedback not found"}

    def test_delete_by_path(self, client: TestClient) -> None:
        client.post("/api/feedback", json={"text": "to delete"})
        assert client.delete("/api/feedback/1").json() == {"deleted": 1}

    def test_delete_requires_id(self, client: TestClient) -> None:
        resp = client.delete("/api/feedback")
        assert resp.status_code == 400
        assert resp.json() == {"error": "ID is required"}

    def test_delete_rejects_non_integer_id(self, client: TestClient) -> None:
        resp = client.delete("/api/feedback", params={"id": "abc"})
        assert resp.status_code == 400
        assert "integer" in resp.json()["error"]

    @pytest.mark.parametrize("record_id", ["0", "-3"])
    def test_delete_unmatched_id_is_404(self, client: TestClient, record_id: str) -> None:
        client.post("/api/feedback", json={"text": "kept"})

        resp = client.delete("/api/feedback", params={"id": record_id})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Feedback not found"}
        assert len(client.get("/api/feedback").json()["data"]) == 1

    def test_ids_not_reused(self, client: TestClient) -> None:
        client.post("/api/feedback", json={"text": "first"})
        client.post("/api/feedback", json={"text": "second"})
        client.delete("/api/feedback", params={"id": "2"})
        assert client.post("/api/feedback", json={"text": "third"}).json()["id"] == 3


# ======================================================================
# Protocol behaviour: CORS, OPTIONS, 405, 404, 500
# ======================================================================


class TestProtocol:

    def test_cors_headers_on_every_response(self, client: TestClient) -> None:
        resp = client.get("/api/feedback")
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert "DELETE" in resp.headers["Access-Control-Allow-Methods"]
        assert "Content-Type" in resp.headers["Access-Control-Allow-Headers"]

    @pytest.mark.parametrize("path", ["/api/feedback", "/api/report", "/anything/else"])
    def test_options_returns_empty_200(self, client: TestClient, path: str) -> None:
        resp = client.options(path)
        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_unsupported_method(self, client: TestClient) -> None:
        resp = client.put("/api/feedback", json={"text": "x"})
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method not allowed"}
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_unknown_path(self, client: TestClient) -> None:
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert "error" in resp.json()

    def test_unexpected_error_is_500_json(self) -> None:
        client = TestClient(_create_test_app(_broken_store(RuntimeError("boom"))))
        resp = client.get("/api/feedback")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error", "message": "boom"}
        assert resp.headers["Access-Control-Allow-Origin"] == "*"

    def test_internal_error_renders_like_unhandled_error(self) -> None:
        client = TestClient(_create_test_app(_broken_store(InternalError("snapshot lost"))))
        resp = client.get("/api/feedback")

        assert resp.status_code == 500
        assert resp.json() == {"error": "Internal server error", "message": "snapshot lost"}

    def test_backend_error_without_fallback_is_503(self) -> None:
        error = BackendUnavailableError("connection refused", provider_name="upstash_redis")
        client = TestClient(_create_test_app(_broken_store(error)))
        resp = client.get("/api/feedback")

        assert resp.status_code == 503
        assert resp.json() == {
            "error": "BackendUnavailableError",
            "message": "connection refused",
        }


# ======================================================================
# Ingestion, report, clear, health
# ======================================================================


class TestIngestAndReport:

    def test_ingest_text(self, client: TestClient) -> None:
        resp = client.post(
            "/api/ingest",
            json={"text": "Great product, very satisfied!\ngreat product very satisfied\nok"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["submitted"] == 3
        assert body["unique"] == 1
        assert body["duplicates"] == 1
        assert body["items"][0]["sentiment"] == "positive"

    def test_ingest_upload(self, client: TestClient) -> None:
        resp = client.post(
            "/api/ingest/upload",
            files={"file": ("export.csv", b"Loved the fast shipping\nReceived a damaged item\n", "text/csv")},
        )
        assert resp.status_code == 200
        assert resp.json()["stored"] == 2

    def test_ingest_upload_rejects_extension(self, client: TestClient) -> None:
        resp = client.post(
            "/api/ingest/upload",
            files={"file": ("export.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert resp.status_code == 400
        assert resp.json() == {"error": "Only .csv, .txt files are allowed."}

    def test_ingest_upload_rejects_oversized_file(self, client: TestClient) -> None:
        payload = b"great product\n" * 80_000
        resp = client.post(
            "/api/ingest/upload",
            files={"file": ("big.txt", payload, "text/plain")},
        )
        assert resp.status_code == 400
        assert "too large" in resp.json()["error"]

    def test_report_empty(self, client: TestClient) -> None:
        body = client.get("/api/report").json()
        assert body["total"] == 0
        assert body["has_data"] is False
        assert body["top_theme"] is None

    def test_report_after_ingest(self, client: TestClient) -> None:
        client.post(
            "/api/ingest",
            json={"text": "Loved the fast shipping\nShipping was late\nEasy to use website"},
        )
        body = client.get("/api/report").json()

        assert body["total"] == 3
        assert body["theme_counts"]["Shipping"] == 2
        assert body["ranked_themes"][0] == ["Shipping", 2]
        assert body["top_theme"] == {"name": "Shipping", "count": 2, "percentage": 67}

    def test_clear_data(self, client: TestClient) -> None:
        client.post("/api/feedback", json={"text": "first"})
        resp = client.post("/api/clear-data")

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "All feedback data cleared"}
        assert client.get("/api/feedback").json() == {"data": []}
        assert client.post("/api/feedback", json={"text": "again"}).json()["id"] == 1

    def test_health(self, client: TestClient) -> None:
        client.post("/api/feedback", json={"text": "first"})
        assert client.get("/api/health").json() == {
            "status": "ok",
            "version": "0.1.0",
            "store": "memory",
            "degraded": False,
            "records": 1,
        }


# ======================================================================
# Application lifespan
# ======================================================================


def test_lifespan_seeds_samples(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        main_module,
        "settings",
        Settings(
            _env_file=None,
            feedback_backend="memory",
            seed_sample_feedback=True,
            seed_csv_path=str(tmp_path / "absent.csv"),
        ),
    )

    with TestClient(create_app()) as client:
        health = client.get("/api/health").json()
        assert health["records"] == len(SAMPLE_FEEDBACK)

        report = client.get("/api/report").json()
        assert report["total"] == len(SAMPLE_FEEDBACK)
        assert report["has_data"] is True


def test_lifespan_imports_legacy_csv(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    csv_path = tmp_path / "feedback.csv"
    csv_path.write_text("Great product!\nLate delivery.\n", encoding="utf-8")
    monkeypatch.setattr(
        main_module,
        "settings",
        Settings(_env_file=None, feedback_backend="memory", seed_csv_path=str(csv_path)),
    )

    with TestClient(create_app()) as client:
        data = client.get("/api/feedback").json()["data"]
        assert [r["text"] for r in data] == ["Great product!", "Late delivery."]
