"""
Payload compaction.

Reduces a raw source to something that fits a single generation request,
while keeping the fully normalized registry lists on the side for the
reconciler. ORCID payloads shrink in steps until they fit the budget:

    full      identity + person + publication analytics + affiliation samples
    minimal   identity + essential person fields + publication count
    identity  orcid-identifier + person name + publication count
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional

from .logging_utils import LOG
from .settings import CHARS_PER_TOKEN, MAX_PROMPT_TOKENS
from .shapes import EDUCATIONS, EMPLOYMENTS, WORKS, dig, normalize_affiliations, normalize_works, year_of
from .shared import CompactedPayload, DocumentText, OrcidDocument, StepName, UnitOfWork, serialize_payload

SAMPLE_RECENT_PUBLICATIONS = 15
SAMPLE_AFFILIATIONS = 5

BRANCH_FULL = "full"
BRANCH_MINIMAL = "minimal"
BRANCH_IDENTITY = "identity"

_ESSENTIAL_PERSON_FIELDS = ("name", "emails", "biography", "researcher-urls", "addresses", "keywords")


def estimate_tokens(payload: Any, chars_per_token: float = CHARS_PER_TOKEN) -> int:
    """Rough token count: length of the prompt serialization divided by a fixed ratio."""
    return math.ceil(len(serialize_payload(payload)) / chars_per_token)


def unwrap_orcid_data(orcid_data: Any) -> Dict[str, Any]:
    """
    Accept what callers send: an OrcidDocument, the fetch endpoint's
    {"data": {...}} envelope, or the inner dict itself.
    """
    if isinstance(orcid_data, OrcidDocument):
        return orcid_data.as_dict()
    if not isinstance(orcid_data, dict):
        return {}
    inner = orcid_data.get("data")
    return inner if isinstance(inner, dict) else orcid_data


def extract_complete_data(data: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    """Normalize every list-shaped sub-resource into one flat list per category."""
    return {
        WORKS: normalize_works(data.get(WORKS)),
        EDUCATIONS: normalize_affiliations(data.get(EDUCATIONS), EDUCATIONS),
        EMPLOYMENTS: normalize_affiliations(data.get(EMPLOYMENTS), EMPLOYMENTS),
    }


def publication_analytics(
    works: List[Dict[str, Any]], sample_size: int = SAMPLE_RECENT_PUBLICATIONS
) -> Dict[str, Any]:
    """
    Aggregate statistics plus a sample of the most recent works.

    Works without a year sort after dated ones and are left out of the
    year range. The sort is stable, so equal years keep source order.
    """
    years = [year_of(w.get("publication-date")) for w in works]
    dated = [y for y in years if y is not None]
    order = sorted(range(len(works)), key=lambda i: -(years[i] or 0))
    return {
        "totalPublications": len(works),
        "yearRange": {"earliest": min(dated), "latest": max(dated)} if dated else None,
        "sampleRecentPublications": [works[i] for i in order[:sample_size]],
    }


class PayloadCompactor:
    """Fit a raw source into the generation request budget."""

    def __init__(
        self,
        max_prompt_tokens: int = MAX_PROMPT_TOKENS,
        chars_per_token: float = CHARS_PER_TOKEN,
        sample_size: int = SAMPLE_RECENT_PUBLICATIONS,
        affiliation_sample: int = SAMPLE_AFFILIATIONS,
    ):
        self.max_prompt_tokens = int(max_prompt_tokens)
        self.chars_per_token = float(chars_per_token)
        self.sample_size = sample_size
        self.affiliation_sample = affiliation_sample

    def compact(self, work: UnitOfWork) -> UnitOfWork:
        """Compact work.raw into work.compacted."""
        raw = work.raw
        if isinstance(raw, DocumentText):
            work.compacted = self.compact_text(raw.text)
        elif isinstance(raw, str):
            work.compacted = self.compact_text(raw)
        else:
            work.compacted = self.compact_orcid(raw)

        if work.compacted.branch != BRANCH_FULL:
            work.add_warning(StepName.Compact, f"payload reduced to {work.compacted.branch} branch")
        return work

    def compact_text(self, text: str) -> CompactedPayload:
        max_chars = int(self.max_prompt_tokens * self.chars_per_token)
        branch = BRANCH_FULL
        if len(text) > max_chars:
            LOG.warning("Profile text too large (%d characters), truncating to %d", len(text), max_chars)
            text = text[:max_chars]
            branch = "truncated"
        return CompactedPayload(
            payload=text,
            branch=branch,
            estimated_tokens=estimate_tokens(text, self.chars_per_token),
        )

    def compact_orcid(self, orcid_data: Any) -> CompactedPayload:
        data = unwrap_orcid_data(orcid_data)
        complete = extract_complete_data(data)
        LOG.debug(
            "ORCID complete data: %d works, %d educations, %d employments",
            len(complete[WORKS]),
            len(complete[EDUCATIONS]),
            len(complete[EMPLOYMENTS]),
        )

        profile = data.get("profile") if isinstance(data.get("profile"), dict) else {}
        person = data.get("person") or dig(profile, "person") or {}
        identifier = profile.get("orcid-identifier") or {}

        full = {
            "profile": {"orcid-identifier": identifier},
            "person": person,
            "publicationAnalytics": publication_analytics(complete[WORKS], self.sample_size),
            "educations": complete[EDUCATIONS][: self.affiliation_sample],
            "employments": complete[EMPLOYMENTS][: self.affiliation_sample],
        }
        candidates = [
            (BRANCH_FULL, lambda: full),
            (BRANCH_MINIMAL, lambda: self._minimal(identifier, person, len(complete[WORKS]))),
            (BRANCH_IDENTITY, lambda: self._identity(identifier, person, len(complete[WORKS]))),
        ]

        payload: Optional[Dict[str, Any]] = None
        tokens = 0
        branch = BRANCH_FULL
        for branch, build in candidates:
            payload = build()
            tokens = estimate_tokens(payload, self.chars_per_token)
            if tokens <= self.max_prompt_tokens:
                break
            LOG.warning(
                "ORCID payload too large for %s branch (%d tokens > %d)",
                branch,
                tokens,
                self.max_prompt_tokens,
            )

        return CompactedPayload(
            payload=payload,
            complete_data=complete,
            branch=branch,
            estimated_tokens=tokens,
        )

    @staticmethod
    def _minimal(identifier: Any, person: Dict[str, Any], total: int) -> Dict[str, Any]:
        return {
            "profile": {"orcid-identifier": identifier},
            "person": {
                key: person.get(key) or ({} if key != "biography" else None)
                for key in _ESSENTIAL_PERSON_FIELDS
            },
            "publicationAnalytics": {"totalCount": total, "sampleRecent": []},
            "employment": [],
            "education": [],
        }

    @staticmethod
    def _identity(identifier: Any, person: Dict[str, Any], total: int) -> Dict[str, Any]:
        return {
            "profile": {"orcid-identifier": identifier},
            "person": {"name": person.get("name") or {}},
            "publicationAnalytics": {"totalCount": total, "sampleRecent": []},
        }
