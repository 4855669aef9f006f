"""
Profile extraction pipeline.

Runs Acquire -> Compact -> Extract -> Reconcile -> Validate for one request.

Acquisition errors propagate to the caller with their own status. Once a
source has been acquired the caller always gets a well-shaped record:
unexpected failures in later stages are logged and collapse to the empty
record for the source kind. Quota and rate-limit refusals from the
generation service are the one exception and surface as
UpstreamQuotaExceeded so the caller can retry later.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from .acquirers import OrcidAcquirer, PdfAcquirer
from .compaction import PayloadCompactor
from .errors import ConfigurationMissing, UpstreamQuotaExceeded, is_quota_error
from .extractors import MockProfileExtractor, OpenAIProfileExtractor, ProfileExtractor
from .logging_utils import LOG
from .reconcile import Reconciler
from .settings import Settings
from .shared import DocumentText, OrcidDocument, SourceKind, StepName, UnitOfWork
from .verifiers import ProfileSchemaVerifier, ProfileVerifier, RequiredFieldsVerifier, empty_record


@dataclass
class PipelineResult:
    """
    Outcome of one pipeline run.

    record is always well-shaped. error holds the exception that forced the
    empty fallback record, if any; mocked is True when the placeholder
    extractor produced the record.
    """
    record: Dict[str, Any]
    work: UnitOfWork
    error: Optional[BaseException] = None
    mocked: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def source(self) -> str:
        if self.mocked:
            return "mock"
        return "fallback" if self.error is not None else "extracted"


class ProfilePipeline:
    """Compose acquirers, compactor, extractor, reconciler and verifiers."""

    def __init__(
        self,
        extractor: Optional[ProfileExtractor] = None,
        *,
        pdf_acquirer: Optional[PdfAcquirer] = None,
        orcid_acquirer: Optional[OrcidAcquirer] = None,
        compactor: Optional[PayloadCompactor] = None,
        reconciler: Optional[Reconciler] = None,
        verifiers: Optional[List[ProfileVerifier]] = None,
        fallback_extractor: Optional[ProfileExtractor] = None,
    ):
        self.extractor = extractor or OpenAIProfileExtractor()
        self.pdf_acquirer = pdf_acquirer or PdfAcquirer()
        self.orcid_acquirer = orcid_acquirer or OrcidAcquirer()
        self.compactor = compactor or PayloadCompactor()
        self.reconciler = reconciler or Reconciler()
        self.verifiers = verifiers if verifiers is not None else [
            RequiredFieldsVerifier(),
            ProfileSchemaVerifier(),
        ]
        self.fallback_extractor = fallback_extractor or MockProfileExtractor()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        http_client: Optional[httpx.Client] = None,
        extractor: Optional[ProfileExtractor] = None,
    ) -> "ProfilePipeline":
        """Build a pipeline whose collaborators are configured from `settings`."""
        if extractor is None:
            extractor = OpenAIProfileExtractor(
                model=settings.openai_model,
                orcid_model=settings.orcid_model,
                api_key=settings.openai_api_key,
                timeout_s=settings.generation_timeout_s,
            )
        return cls(
            extractor,
            pdf_acquirer=PdfAcquirer(max_bytes=settings.max_upload_bytes),
            orcid_acquirer=OrcidAcquirer(
                http_client,
                base_url=settings.orcid_base_url,
                user_agent=settings.orcid_user_agent,
                timeout_s=settings.http_timeout_s,
            ),
            compactor=PayloadCompactor(
                max_prompt_tokens=settings.max_prompt_tokens,
                chars_per_token=settings.chars_per_token,
            ),
        )

    def close(self) -> None:
        self.orcid_acquirer.close()

    # ------------------------- Acquisition -------------------------

    def acquire_pdf(self, path: Path, media_type: Optional[str]) -> DocumentText:
        return self.pdf_acquirer.acquire(path, media_type)

    def acquire_orcid(self, orcid_id: str) -> OrcidDocument:
        return self.orcid_acquirer.acquire(orcid_id)

    # ------------------------- Structuring -------------------------

    def extract_linkedin(self, text: str) -> PipelineResult:
        """Structure LinkedIn profile text (e.g. from a PDF export)."""
        work = UnitOfWork(kind=SourceKind.LinkedIn, raw=DocumentText(text=text))
        return self._process(work)

    def extract_orcid(self, orcid_data: Any, orcid_id: str = "") -> PipelineResult:
        """Structure ORCID data as returned by acquire_orcid or the fetch endpoint."""
        if not orcid_id:
            if isinstance(orcid_data, OrcidDocument):
                orcid_id = orcid_data.orcid_id
            elif isinstance(orcid_data, dict):
                orcid_id = orcid_data.get("orcidId") or ""
        work = UnitOfWork(kind=SourceKind.Orcid, identifier=orcid_id, raw=orcid_data)
        return self._process(work)

    # ------------------------- End to end -------------------------

    def run_pdf(self, path: Path, media_type: Optional[str]) -> PipelineResult:
        document = self.acquire_pdf(path, media_type)
        return self.extract_linkedin(document.text)

    def run_orcid(self, orcid_id: str) -> PipelineResult:
        document = self.acquire_orcid(orcid_id)
        return self.extract_orcid(document, orcid_id)

    # ------------------------- Internals -------------------------

    def _process(self, work: UnitOfWork) -> PipelineResult:
        try:
            self.extractor.ensure_configured()
        except ConfigurationMissing:
            self.fallback_extractor.extract(work)
            return PipelineResult(record=work.record, work=work, mocked=True)

        step = StepName.Compact
        try:
            self.compactor.compact(work)
            step = StepName.Extract
            self.extractor.extract(work)
            if work.kind is SourceKind.Orcid:
                step = StepName.Reconcile
                self.reconciler.reconcile(work)
            step = StepName.Validate
            for verifier in self.verifiers:
                verifier.verify(work)
        except Exception as e:
            if is_quota_error(e):
                raise UpstreamQuotaExceeded(detail=str(e)) from e
            LOG.error("%s step failed for %s profile: %s", step.value, work.kind.value, e, exc_info=True)
            work.add_error(step, f"exception: {type(e).__name__}")
            work.record = empty_record(work.kind)
            return PipelineResult(record=work.record, work=work, error=e)

        if not work.has_no_warnings_or_errors():
            LOG.info(work.summary())
        return PipelineResult(record=work.record, work=work)
