"""
Reconciliation of generated records against verbatim registry data.

The generation step summarizes list-shaped data unreliably (dropped items,
merged entries, invented counts), so publications, education and experience
are re-derived deterministically from the complete normalized lists kept
by the compactor. A category is only replaced when its verbatim list is
non-empty; otherwise the generated value stays.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from .logging_utils import LOG
from .shapes import EDUCATIONS, EMPLOYMENTS, WORKS, dig, format_fuzzy_date, text_of
from .shared import StepName, UnitOfWork

OPEN_END_DATE = "Present"


# ------------------------- Field helpers -------------------------


def publication_title(work: Dict[str, Any]) -> str:
    return text_of(work.get("title"), "title")


def publication_subtitle(work: Dict[str, Any]) -> str:
    return text_of(dig(work, "title", "subtitle")) or text_of(work.get("subtitle"), "title")


def publication_journal(work: Dict[str, Any]) -> str:
    return text_of(work.get("journal-title")) or text_of(work.get("journal"))


def publication_year(work: Dict[str, Any]) -> str:
    date = work.get("publication-date")
    return text_of(dig(date, "year")) if isinstance(date, dict) else ""


def publication_doi(work: Dict[str, Any]) -> str:
    ids = dig(work, "external-ids", "external-id")
    if not isinstance(ids, list):
        return ""
    for ext in ids:
        if isinstance(ext, dict) and str(ext.get("external-id-type", "")).lower() == "doi":
            return text_of(ext.get("external-id-value"))
    return ""


def publication_authors(work: Dict[str, Any]) -> str:
    authors = work.get("authors")
    if isinstance(authors, list) and authors:
        return ", ".join(text_of(a) for a in authors if text_of(a))
    return ""


def _summary(item: Dict[str, Any], wrapper: str) -> Dict[str, Any]:
    inner = item.get(wrapper)
    return inner if isinstance(inner, dict) else item


def _end_date(summary: Dict[str, Any]) -> str:
    return format_fuzzy_date(summary.get("end-date")) or OPEN_END_DATE


def organization_location(summary: Dict[str, Any]) -> str:
    address = dig(summary, "organization", "address")
    if not isinstance(address, dict):
        return ""
    parts = [text_of(address.get(k)).strip() for k in ("city", "region", "country")]
    return ", ".join(p for p in parts if p)


# ------------------------- Item builders -------------------------


def publication_from_work(work: Dict[str, Any]) -> Dict[str, str]:
    return {
        "title": publication_title(work),
        "subtitle": publication_subtitle(work),
        "journal": publication_journal(work),
        "year": publication_year(work),
        "type": text_of(work.get("type")),
        "doi": publication_doi(work),
        "authors": publication_authors(work),
    }


def education_from_affiliation(item: Dict[str, Any]) -> Dict[str, str]:
    summary = _summary(item, "education-summary")
    return {
        "institution": text_of(dig(summary, "organization", "name")),
        "degree": text_of(summary.get("role-title")),
        "fieldOfStudy": text_of(summary.get("department-name")),
        "startDate": format_fuzzy_date(summary.get("start-date")),
        "endDate": _end_date(summary),
        "description": text_of(summary.get("description")),
    }


def experience_from_affiliation(item: Dict[str, Any]) -> Dict[str, str]:
    summary = _summary(item, "employment-summary")
    department = text_of(summary.get("department-name"))
    return {
        "title": text_of(summary.get("role-title")) or department,
        "company": text_of(dig(summary, "organization", "name")),
        "location": organization_location(summary),
        "startDate": format_fuzzy_date(summary.get("start-date")),
        "endDate": _end_date(summary),
        "description": text_of(summary.get("description")) or department,
    }


# (source category, record field, item builder, primary field)
_RULES: List[tuple[str, str, Callable[[Dict[str, Any]], Dict[str, str]], str]] = [
    (WORKS, "publications", publication_from_work, "title"),
    (EDUCATIONS, "education", education_from_affiliation, "institution"),
    (EMPLOYMENTS, "experience", experience_from_affiliation, "company"),
]


def reconcile_record(record: Dict[str, Any], complete_data: Dict[str, List[Dict[str, Any]]]) -> Dict[str, Any]:
    """
    Overwrite list fields of `record` in place with items rebuilt from
    `complete_data`. Returns the record.
    """
    for category, field, build, primary in _RULES:
        items = complete_data.get(category) or []
        if not items:
            LOG.debug("No verbatim %s, keeping generated %s", category, field)
            continue
        rebuilt = [build(item) for item in items if isinstance(item, dict)]
        record[field] = [entry for entry in rebuilt if entry[primary].strip()]
        LOG.debug("Reconciled %s: %d verbatim -> %d entries", field, len(items), len(record[field]))
    return record


def _count(value: Any) -> int:
    return len(value) if isinstance(value, list) else 0


class Reconciler:
    """Replace generated list fields with values derived from verbatim source data."""

    def reconcile(self, work: UnitOfWork) -> UnitOfWork:
        if work.record is None:
            raise ValueError("Reconciliation requires an extracted record")
        if work.compacted is None or not work.compacted.complete_data:
            return work

        before = {field: _count(work.record.get(field)) for _, field, _, _ in _RULES}
        reconcile_record(work.record, work.compacted.complete_data)
        for _, field, _, _ in _RULES:
            after = _count(work.record.get(field))
            if after != before[field]:
                work.add_warning(
                    StepName.Reconcile,
                    f"{field}: generated {before[field]}, reconciled {after}",
                )
        return work
