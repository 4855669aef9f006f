"""
Error taxonomy for profile extraction.

Every error carries the HTTP status the service answers with and a
user-facing message. Acquisition errors reach the caller unchanged;
later-stage errors are collapsed by the pipeline into a safe record.
"""

from __future__ import annotations

from typing import Optional


class ProfileExtractError(Exception):
    """Base class for all profileextract errors."""

    status_code: int = 500
    default_message: str = "Failed to extract profile data. Please try again."

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message if detail is None else f"{self.message} ({detail})")


class InvalidInput(ProfileExtractError):
    status_code = 400
    default_message = "Invalid request."


class UnsupportedMediaType(ProfileExtractError):
    status_code = 400
    default_message = "Only PDF files are allowed"


class PayloadTooLarge(ProfileExtractError):
    status_code = 413
    default_message = "File too large. Maximum size is 10MB."


class ExtractionFailed(ProfileExtractError):
    status_code = 400
    default_message = (
        "Could not extract text from PDF. Please ensure the PDF contains readable text."
    )


class InvalidIdentifier(ProfileExtractError):
    status_code = 400
    default_message = "Invalid ORCID ID format"


class NotFound(ProfileExtractError):
    status_code = 404
    default_message = "ORCID profile not found or not public"


class UpstreamError(ProfileExtractError):
    status_code = 502
    default_message = "Failed to fetch ORCID profile. Please try again."


class UpstreamUnavailable(UpstreamError):
    status_code = 503
    default_message = "Unable to connect to ORCID. Please try again later."


class UpstreamQuotaExceeded(ProfileExtractError):
    status_code = 429
    default_message = "AI service quota exceeded. Please try again later."


class ExtractionParseError(ProfileExtractError):
    status_code = 500
    default_message = "Failed to parse AI response. Please try again."


class ConfigurationMissing(ProfileExtractError):
    status_code = 500
    default_message = "Generation service is not configured."


_QUOTA_MARKERS = ("quota", "rate_limit")


def is_quota_error(exc: BaseException) -> bool:
    """True when the generation service refused the call for quota or rate reasons."""
    if isinstance(exc, ProfileExtractError):
        # Our own errors may quote model output; only upstream failures count.
        return False
    msg = str(exc)
    return any(m in msg for m in _QUOTA_MARKERS)


__all__ = [
    "ProfileExtractError",
    "InvalidInput",
    "UnsupportedMediaType",
    "PayloadTooLarge",
    "ExtractionFailed",
    "InvalidIdentifier",
    "NotFound",
    "UpstreamError",
    "UpstreamUnavailable",
    "UpstreamQuotaExceeded",
    "ExtractionParseError",
    "ConfigurationMissing",
    "is_quota_error",
]
