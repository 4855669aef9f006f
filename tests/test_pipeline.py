"""Tests for the end-to-end profile pipeline."""

import pytest

from profileextract.errors import ExtractionParseError, InvalidIdentifier, UnsupportedMediaType, UpstreamQuotaExceeded
from profileextract.extractors import ProfileExtractor
from profileextract.pipeline import PipelineResult, ProfilePipeline
from profileextract.settings import Settings
from profileextract.shared import SourceKind, StepName
from profileextract.verifiers import empty_record, required_fields

from conftest import (
    ORCID_BASE_URL,
    ORCID_ID,
    full_orcid_responses,
    make_extractor,
    make_orcid_client,
    orcid_document_dict,
)


ADA = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "headline": "Programmer",
    "experience": [{"title": "Programmer", "company": "Babbage Labs"}],
    "skills": ["Mathematics"],
}

ADA_ORCID = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "orcidId": "",
    "publications": [{"title": "Invented paper"}],
    "experience": [],
    "education": [],
    "keywords": ["Computing"],
}


def _pipeline(extractor, client=None):
    settings = Settings(openai_api_key="test-key", orcid_base_url=ORCID_BASE_URL)
    return ProfilePipeline.from_settings(settings, http_client=client, extractor=extractor)


class _Exploding(ProfileExtractor):
    def __init__(self, exc):
        self.exc = exc

    def extract(self, work):
        raise self.exc


class TestLinkedInPipeline:
    """Tests for text and document flows."""

    def test_record_has_every_required_field(self):
        result = _pipeline(make_extractor(ADA)).extract_linkedin("Ada Lovelace\nProgrammer")
        assert isinstance(result, PipelineResult)
        assert result.ok and not result.mocked
        assert result.source == "extracted"
        for field in required_fields(SourceKind.LinkedIn):
            assert field in result.record
        assert result.record["firstName"] == "Ada"
        assert result.record["email"] == ""
        assert "defaulted missing field: email" in result.work.step_statuses[StepName.Validate].warnings

    def test_document_upload_flow(self, tmp_path, linkedin_pdf_bytes):
        path = tmp_path / "upload.pdf"
        path.write_bytes(linkedin_pdf_bytes)
        extractor = make_extractor(ADA)
        result = _pipeline(extractor).run_pdf(path, "application/pdf")
        for field in required_fields(SourceKind.LinkedIn):
            assert field in result.record
        prompt = extractor.client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert "Ada Lovelace" in prompt

    def test_acquisition_errors_propagate(self, tmp_path, linkedin_pdf_bytes):
        path = tmp_path / "upload.pdf"
        path.write_bytes(linkedin_pdf_bytes)
        with pytest.raises(UnsupportedMediaType):
            _pipeline(make_extractor(ADA)).run_pdf(path, "image/png")

    def test_idempotent_with_deterministic_generation(self):
        pipeline = _pipeline(make_extractor(ADA))
        first = pipeline.extract_linkedin("Ada Lovelace")
        second = pipeline.extract_linkedin("Ada Lovelace")
        assert first.record == second.record


class TestFailClosed:
    """Tests for collapsing later-stage failures to the safe record."""

    def test_parse_error_collapses_to_empty_record(self):
        result = _pipeline(make_extractor(content="I cannot help with that")).extract_linkedin("Ada")
        assert result.record == empty_record(SourceKind.LinkedIn)
        assert isinstance(result.error, ExtractionParseError)
        assert not result.ok
        assert result.source == "fallback"
        assert result.work.step_statuses[StepName.Extract].errors

    def test_unexpected_error_collapses_and_is_logged(self, caplog):
        result = _pipeline(_Exploding(KeyError("boom"))).extract_orcid(orcid_document_dict(), ORCID_ID)
        assert result.record == empty_record(SourceKind.Orcid)
        assert isinstance(result.error, KeyError)
        assert any("Extract step failed" in r.getMessage() for r in caplog.records)

    def test_quota_error_surfaces(self):
        exc = RuntimeError("Error code: 429 - {'error': {'code': 'insufficient_quota'}}")
        with pytest.raises(UpstreamQuotaExceeded) as exc_info:
            _pipeline(make_extractor(side_effect=exc)).extract_linkedin("Ada")
        assert exc_info.value.status_code == 429

    def test_rate_limit_error_surfaces(self):
        with pytest.raises(UpstreamQuotaExceeded):
            _pipeline(_Exploding(RuntimeError("rate_limit_exceeded"))).extract_linkedin("Ada")

    def test_reply_mentioning_quota_still_collapses(self):
        extractor = make_extractor(content="Your quota of profiles is exhausted")
        result = _pipeline(extractor).extract_linkedin("Ada")
        assert result.record == empty_record(SourceKind.LinkedIn)
        assert isinstance(result.error, ExtractionParseError)


class TestMockDegrade:
    """Tests for running without generation credentials."""

    def test_no_credential_returns_exact_mock(self, unconfigured_settings):
        pipeline = ProfilePipeline.from_settings(unconfigured_settings)
        result = pipeline.extract_linkedin("anything at all")
        assert result.mocked
        assert result.source == "mock"
        assert result.record["firstName"] == "John"
        assert result.record["lastName"] == "Doe"

    def test_no_credential_orcid_mock_carries_caller_id(self, unconfigured_settings):
        pipeline = ProfilePipeline.from_settings(unconfigured_settings)
        result = pipeline.extract_orcid(orcid_document_dict(), ORCID_ID)
        assert result.mocked
        assert result.record["orcidId"] == ORCID_ID
        assert result.record["lastName"] == "Smith"


class TestOrcidPipeline:
    """Tests for the ORCID flow."""

    def test_reconciled_lists_override_generated(self):
        result = _pipeline(make_extractor(ADA_ORCID)).extract_orcid({"data": orcid_document_dict()}, ORCID_ID)
        record = result.record
        assert [p["title"] for p in record["publications"]] == ["Notes on the Engine", "On Bernoulli Numbers"]
        assert record["education"][0]["institution"] == "University of London"
        assert record["experience"][0]["company"] == "Babbage Labs"
        assert record["orcidId"] == ORCID_ID
        for field in required_fields(SourceKind.Orcid):
            assert field in record

    def test_identifier_taken_from_envelope(self):
        result = _pipeline(make_extractor(ADA_ORCID)).extract_orcid({"data": orcid_document_dict(), "orcidId": ORCID_ID})
        assert result.record["orcidId"] == ORCID_ID

    def test_fetch_with_failed_education_section(self, orcid_calls):
        responses = full_orcid_responses()
        responses[f"{ORCID_ID}/educations"] = (500, {})
        with make_orcid_client(responses, orcid_calls) as client:
            extractor = make_extractor(ADA_ORCID)
            result = _pipeline(extractor, client).run_orcid(ORCID_ID)
        assert result.ok
        assert len(result.record["publications"]) == 2
        assert result.record["experience"][0]["company"] == "Babbage Labs"
        assert result.record["education"] == []
        prompt = extractor.client.chat.completions.create.call_args.kwargs["messages"][1]["content"]
        assert "Lovelace" in prompt

    def test_bad_identifier_fails_before_network(self, orcid_client, orcid_calls):
        with pytest.raises(InvalidIdentifier):
            _pipeline(make_extractor(ADA_ORCID), orcid_client).run_orcid("0000-0001-2345-67")
        assert orcid_calls == []
