"""
HTTP service for profile extraction.

FastAPI application exposing document parsing, ORCID fetching, structured
extraction and profile completion scoring. Dependencies are wired once in
create_app and kept on app.state.
"""

from __future__ import annotations

import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from fastapi import Body, FastAPI, File, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .completion import profile_completion
from .errors import InvalidInput, ProfileExtractError
from .extractors import ProfileExtractor
from .logging_utils import LOG
from .pipeline import PipelineResult, ProfilePipeline
from .settings import Settings

PROFILE_SOURCE_HEADER = "X-Profile-Source"

_SPOOL_CHUNK = 64 * 1024


class TextRequest(BaseModel):
    text: Optional[str] = None


class OrcidFetchRequest(BaseModel):
    orcidId: Optional[str] = None


class OrcidExtractRequest(BaseModel):
    orcidData: Optional[Any] = None
    orcidId: Optional[str] = None


def _spool_upload(upload: UploadFile, max_bytes: int) -> Path:
    """Copy at most max_bytes + 1 bytes of the upload to a temporary file."""
    remaining = max_bytes + 1
    with tempfile.NamedTemporaryFile(prefix="profileextract-", suffix=".pdf", delete=False) as tmp:
        while remaining > 0:
            chunk = upload.file.read(min(_SPOOL_CHUNK, remaining))
            if not chunk:
                break
            tmp.write(chunk)
            remaining -= len(chunk)
    return Path(tmp.name)


def _record_response(result: PipelineResult) -> JSONResponse:
    return JSONResponse(content=result.record, headers={PROFILE_SOURCE_HEADER: result.source})


def create_app(
    settings: Optional[Settings] = None,
    *,
    http_client: Optional[httpx.Client] = None,
    extractor: Optional[ProfileExtractor] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Process configuration; read from the environment when None.
        http_client: httpx client for ORCID calls. Owned by the caller.
        extractor: Structured extractor; OpenAI configured from settings when None.
    """
    settings = settings or Settings.from_env()
    pipeline = ProfilePipeline.from_settings(settings, http_client=http_client, extractor=extractor)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.pipeline.close()

    app = FastAPI(
        title="profileextract",
        description="Profile extraction from LinkedIn PDF exports and ORCID records",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pipeline = pipeline

    @app.exception_handler(ProfileExtractError)
    async def profile_error_handler(request: Request, exc: ProfileExtractError):
        if exc.status_code >= 500:
            LOG.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            LOG.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        LOG.error("Unhandled exception on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    @app.get("/health")
    def health(request: Request) -> Dict[str, Any]:
        return {
            "status": "ok",
            "generationConfigured": request.app.state.settings.generation_configured,
        }

    @app.post("/api/parse-pdf")
    def parse_pdf(request: Request, file: Optional[UploadFile] = File(None)) -> Dict[str, Any]:
        if file is None:
            raise InvalidInput("No file uploaded")
        limit = request.app.state.settings.max_upload_bytes
        path = _spool_upload(file, limit)
        document = request.app.state.pipeline.acquire_pdf(path, file.content_type)
        return {"text": document.text, "message": "PDF parsed successfully", "pages": document.pages}

    @app.post("/api/fetch-orcid")
    def fetch_orcid(request: Request, body: OrcidFetchRequest) -> Dict[str, Any]:
        document = request.app.state.pipeline.acquire_orcid(body.orcidId)
        return {
            "data": document.as_dict(),
            "message": "ORCID profile fetched successfully",
            "orcidId": document.orcid_id,
        }

    @app.post("/api/extract-profile")
    def extract_profile(request: Request, body: TextRequest):
        if not body.text or not body.text.strip():
            raise InvalidInput("No text provided")
        return _record_response(request.app.state.pipeline.extract_linkedin(body.text))

    @app.post("/api/extract-orcid-profile")
    def extract_orcid_profile(request: Request, body: OrcidExtractRequest):
        if not body.orcidData:
            raise InvalidInput("ORCID data is required")
        result = request.app.state.pipeline.extract_orcid(body.orcidData, body.orcidId or "")
        return _record_response(result)

    @app.post("/api/profile-complete")
    def profile_complete(profile: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
        return {"success": True, **profile_completion(profile)}

    return app
