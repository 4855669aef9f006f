"""Tests for the HTTP service."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from profileextract.api import PROFILE_SOURCE_HEADER, create_app
from profileextract.settings import Settings
from profileextract.verifiers import empty_record
from profileextract.shared import SourceKind

from conftest import ORCID_BASE_URL, ORCID_ID, build_pdf, make_extractor, make_orcid_client


ADA = {"firstName": "Ada", "lastName": "Lovelace", "skills": ["Mathematics"]}


@pytest.fixture
def make_client(settings, orcid_client):
    def _make(extractor=None, *, app_settings=None, http_client=None, raise_server_exceptions=True):
        app = create_app(
            app_settings or settings,
            http_client=http_client or orcid_client,
            extractor=extractor if extractor is not None else make_extractor(ADA),
        )
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)
    return _make


@pytest.fixture
def client(make_client):
    with make_client() as c:
        yield c


class TestHealth:
    def test_reports_generation_configured(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "generationConfigured": True}

    def test_reports_unconfigured(self, unconfigured_settings, orcid_client):
        app = create_app(unconfigured_settings, http_client=orcid_client)
        with TestClient(app) as c:
            assert c.get("/health").json()["generationConfigured"] is False


class TestParsePdf:
    def test_parses_upload(self, client, linkedin_pdf_bytes):
        response = client.post("/api/parse-pdf", files={"file": ("profile.pdf", linkedin_pdf_bytes, "application/pdf")})
        assert response.status_code == 200
        body = response.json()
        assert "Ada Lovelace" in body["text"]
        assert body["pages"] == 1
        assert body["message"] == "PDF parsed successfully"

    def test_rejects_other_media_types(self, client, linkedin_pdf_bytes):
        response = client.post("/api/parse-pdf", files={"file": ("profile.txt", linkedin_pdf_bytes, "text/plain")})
        assert response.status_code == 400
        assert response.json() == {"error": "Only PDF files are allowed"}

    def test_missing_file(self, client):
        response = client.post("/api/parse-pdf")
        assert response.status_code == 400
        assert response.json() == {"error": "No file uploaded"}

    def test_too_large(self, make_client, linkedin_pdf_bytes):
        small = Settings(openai_api_key="k", orcid_base_url=ORCID_BASE_URL, max_upload_bytes=64)
        with make_client(app_settings=small) as c:
            response = c.post("/api/parse-pdf", files={"file": ("profile.pdf", linkedin_pdf_bytes, "application/pdf")})
        assert response.status_code == 413
        assert "File too large" in response.json()["error"]

    def test_no_text(self, client):
        response = client.post("/api/parse-pdf", files={"file": ("blank.pdf", build_pdf([]), "application/pdf")})
        assert response.status_code == 400
        assert response.json()["error"].startswith("Could not extract text from PDF")

    def test_corrupted_pdf_is_400(self, client, linkedin_pdf_bytes):
        with patch("profileextract.acquirers.pdf_acquirer.PdfReader", side_effect=TypeError("bad object")):
            response = client.post("/api/parse-pdf", files={"file": ("profile.pdf", linkedin_pdf_bytes, "application/pdf")})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid PDF file. Please upload a valid PDF."}


class TestFetchOrcid:
    def test_fetches_record(self, client):
        response = client.post("/api/fetch-orcid", json={"orcidId": ORCID_ID})
        assert response.status_code == 200
        body = response.json()
        assert body["orcidId"] == ORCID_ID
        assert set(body["data"]) == {"profile", "works", "educations", "employments"}
        assert body["message"] == "ORCID profile fetched successfully"

    def test_invalid_id(self, client, orcid_calls):
        response = client.post("/api/fetch-orcid", json={"orcidId": "not-an-id"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid ORCID ID format"}
        assert orcid_calls == []

    def test_missing_id(self, client):
        response = client.post("/api/fetch-orcid", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "ORCID ID is required"}

    def test_not_found(self, make_client):
        with make_orcid_client({}) as empty, make_client(http_client=empty) as c:
            response = c.post("/api/fetch-orcid", json={"orcidId": ORCID_ID})
        assert response.status_code == 404
        assert response.json() == {"error": "ORCID profile not found or not public"}


class TestExtractProfile:
    def test_returns_record(self, client):
        response = client.post("/api/extract-profile", json={"text": "Ada Lovelace"})
        assert response.status_code == 200
        assert response.headers[PROFILE_SOURCE_HEADER] == "extracted"
        body = response.json()
        assert body["firstName"] == "Ada"
        assert body["experience"] == []

    def test_missing_text(self, client):
        response = client.post("/api/extract-profile", json={"text": "  "})
        assert response.status_code == 400
        assert response.json() == {"error": "No text provided"}

    def test_malformed_body(self, client):
        response = client.post("/api/extract-profile", content=b"{not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400

    def test_mock_when_unconfigured(self, unconfigured_settings, orcid_client):
        app = create_app(unconfigured_settings, http_client=orcid_client)
        with TestClient(app) as c:
            response = c.post("/api/extract-profile", json={"text": "Ada Lovelace"})
        assert response.status_code == 200
        assert response.headers[PROFILE_SOURCE_HEADER] == "mock"
        assert response.json()["firstName"] == "John"
        assert response.json()["lastName"] == "Doe"

    def test_unparseable_generation_returns_safe_record(self, make_client):
        with make_client(make_extractor(content="no json here")) as c:
            response = c.post("/api/extract-profile", json={"text": "Ada"})
        assert response.status_code == 200
        assert response.headers[PROFILE_SOURCE_HEADER] == "fallback"
        assert response.json() == empty_record(SourceKind.LinkedIn)

    def test_quota_is_429(self, make_client):
        extractor = make_extractor(side_effect=RuntimeError("You exceeded your current quota"))
        with make_client(extractor) as c:
            response = c.post("/api/extract-profile", json={"text": "Ada"})
        assert response.status_code == 429
        assert response.json() == {"error": "AI service quota exceeded. Please try again later."}


class TestExtractOrcidProfile:
    def test_fetch_then_extract(self, client):
        fetched = client.post("/api/fetch-orcid", json={"orcidId": ORCID_ID}).json()
        response = client.post("/api/extract-orcid-profile", json={"orcidData": fetched, "orcidId": ORCID_ID})
        assert response.status_code == 200
        body = response.json()
        assert body["orcidId"] == ORCID_ID
        assert [p["title"] for p in body["publications"]] == ["Notes on the Engine", "On Bernoulli Numbers"]
        assert body["experience"][0]["location"] == "London, GB"

    def test_missing_data(self, client):
        response = client.post("/api/extract-orcid-profile", json={"orcidId": ORCID_ID})
        assert response.status_code == 400
        assert response.json() == {"error": "ORCID data is required"}


class TestProfileComplete:
    def test_scores_profile(self, client):
        response = client.post("/api/profile-complete", json={"firstName": "Ada", "lastName": "Lovelace"})
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "completionPercentage": 14,
            "completedFields": 2,
            "totalFields": 14,
        }

    def test_empty_object_counts_every_field(self, client):
        response = client.post("/api/profile-complete", json={})
        assert response.status_code == 200
        assert response.json()["totalFields"] == 14
        assert response.json()["completedFields"] == 0


class TestUnhandledErrors:
    def test_unexpected_error_is_500(self, make_client, monkeypatch):
        with make_client(raise_server_exceptions=False) as c:
            def boom(orcid_id):
                raise RuntimeError("unexpected")

            monkeypatch.setattr(c.app.state.pipeline, "acquire_orcid", boom)
            response = c.post("/api/fetch-orcid", json={"orcidId": ORCID_ID})
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
