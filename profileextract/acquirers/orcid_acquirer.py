"""
ORCID public API acquirer.

Fetches a researcher's public record and its works, educations and
employments sub-resources. The sub-resources are fetched concurrently and
independently: a failed sub-fetch is logged and recorded as None so the
rest of the profile can still be used. Nothing is retried.
"""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

import httpx

from ..errors import InvalidIdentifier, InvalidInput, NotFound, UpstreamError, UpstreamUnavailable
from ..logging_utils import LOG
from ..settings import ORCID_API_BASE_URL, ORCID_USER_AGENT
from ..shapes import EDUCATIONS, EMPLOYMENTS, WORKS
from ..shared import OrcidDocument
from .base import SourceAcquirer

ORCID_ID_RE = re.compile(r"^\d{4}-\d{4}-\d{4}-\d{3}[\dX]$")

SUB_RESOURCES = (WORKS, EDUCATIONS, EMPLOYMENTS)


def validate_orcid_id(orcid_id: Optional[str]) -> str:
    """Return the identifier unchanged, or raise if it is missing or malformed."""
    if not orcid_id:
        raise InvalidInput("ORCID ID is required")
    if not isinstance(orcid_id, str) or not ORCID_ID_RE.match(orcid_id):
        raise InvalidIdentifier(detail=repr(orcid_id))
    return orcid_id


class OrcidAcquirer(SourceAcquirer):
    """Fetch a public ORCID record and its activity sub-resources."""

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        *,
        base_url: str = ORCID_API_BASE_URL,
        user_agent: str = ORCID_USER_AGENT,
        timeout_s: float = 10.0,
        **kwargs,
    ):
        self._client = client
        self._owns_client = client is None
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout_s = float(timeout_s)

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout_s, follow_redirects=True)
        return self._client

    def close(self) -> None:
        """Close the HTTP client if this acquirer created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    @property
    def headers(self) -> Dict[str, str]:
        return {"Accept": "application/json", "User-Agent": self.user_agent}

    def acquire(self, orcid_id: str) -> OrcidDocument:
        """
        Fetch the record for `orcid_id`.

        Raises:
            InvalidInput / InvalidIdentifier: Before any network call.
            NotFound: The record does not exist or is not public.
            UpstreamError: Any other non-success response.
            UpstreamUnavailable: ORCID could not be reached.
        """
        orcid_id = validate_orcid_id(orcid_id)

        profile = self._fetch_profile(orcid_id)

        with ThreadPoolExecutor(max_workers=len(SUB_RESOURCES)) as executor:
            futures = {
                section: executor.submit(self._fetch_section, orcid_id, section)
                for section in SUB_RESOURCES
            }
            sections = {section: future.result() for section, future in futures.items()}

        fetched = [s for s, data in sections.items() if data is not None]
        LOG.info("ORCID %s: fetched record and sections %s", orcid_id, ", ".join(fetched) or "none")

        return OrcidDocument(
            orcid_id=orcid_id,
            profile=profile,
            works=sections[WORKS],
            educations=sections[EDUCATIONS],
            employments=sections[EMPLOYMENTS],
        )

    def _fetch_profile(self, orcid_id: str) -> Dict[str, Any]:
        url = f"{self.base_url}/{orcid_id}"
        try:
            response = self.client.get(url, headers=self.headers)
        except httpx.RequestError as e:
            raise UpstreamUnavailable(detail=str(e)) from e

        if response.status_code == 404:
            raise NotFound(detail=orcid_id)
        if not response.is_success:
            raise UpstreamError(detail=f"ORCID API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(detail="ORCID API returned invalid JSON") from e
        if not isinstance(data, dict):
            raise UpstreamError(detail="ORCID API returned an unexpected document")
        return data

    def _fetch_section(self, orcid_id: str, section: str) -> Optional[Dict[str, Any]]:
        url = f"{self.base_url}/{orcid_id}/{section}"
        try:
            response = self.client.get(url, headers=self.headers)
            if not response.is_success:
                LOG.warning("ORCID %s: %s fetch failed with HTTP %d", orcid_id, section, response.status_code)
                return None
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            LOG.warning("ORCID %s: %s fetch failed: %s", orcid_id, section, e)
            return None

        if not isinstance(data, dict):
            LOG.warning("ORCID %s: %s returned an unexpected document", orcid_id, section)
            return None
        return data
