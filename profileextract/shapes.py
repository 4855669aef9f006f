"""
Shape detection for ORCID registry JSON.

The public API returns the same data in several nestings depending on the
endpoint and on how the caller assembled it. Each category has a fixed list
of known shapes, detected in priority order, and one normalizer per shape.

List shapes (works, educations, employments):

    FLAT_LIST           [item, item, ...]
    GROUPED             {"group": [{"work-summary": [item, ...]}, ...]}
                        {"affiliation-group": [{"summaries": [item, ...]}, ...]}
    ACTIVITIES_SUMMARY  {"activities-summary": {"works": ..., "educations": ...}}
    DIRECT_SUMMARY      {"summary": item | [item, ...]}   (affiliations only)
    EMPTY               anything else

Value shapes (individual fields):

    SCALAR              "text" or 2020
    VALUE_WRAPPER       {"value": "text"}
    NAMED_OBJECT        {"title": {"value": "text"}} / {"title": "text"}
    ABSENT              None or an unrecognized object
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

WORKS = "works"
EDUCATIONS = "educations"
EMPLOYMENTS = "employments"

_WORK_SUMMARY_KEYS = ("work-summary", "summary", "works")
_AFFILIATION_SUMMARY_KEYS = ("summaries", "summary", "affiliations")


class ListShape(str, Enum):
    FLAT_LIST = "flat_list"
    GROUPED = "grouped"
    ACTIVITIES_SUMMARY = "activities_summary"
    DIRECT_SUMMARY = "direct_summary"
    EMPTY = "empty"


class ValueShape(str, Enum):
    SCALAR = "scalar"
    VALUE_WRAPPER = "value_wrapper"
    NAMED_OBJECT = "named_object"
    ABSENT = "absent"


# ------------------------- List shapes -------------------------


def detect_works_shape(data: Any) -> ListShape:
    if isinstance(data, list):
        return ListShape.FLAT_LIST
    if isinstance(data, dict):
        if isinstance(data.get("group"), list):
            return ListShape.GROUPED
        if isinstance(data.get("activities-summary"), dict):
            return ListShape.ACTIVITIES_SUMMARY
    return ListShape.EMPTY


def detect_affiliations_shape(data: Any) -> ListShape:
    if isinstance(data, list):
        return ListShape.FLAT_LIST
    if isinstance(data, dict):
        if isinstance(data.get("affiliation-group"), list):
            return ListShape.GROUPED
        if isinstance(data.get("activities-summary"), dict):
            return ListShape.ACTIVITIES_SUMMARY
        if data.get("summary"):
            return ListShape.DIRECT_SUMMARY
    return ListShape.EMPTY


def _first_list(group: Dict[str, Any], keys) -> List[Any]:
    for key in keys:
        value = group.get(key)
        if value:
            return value if isinstance(value, list) else [value]
    return []


def normalize_works(data: Any) -> List[Dict[str, Any]]:
    """
    Flatten a works payload into one list of work summaries.

    Grouped payloads contribute only the first summary of each group: ORCID
    groups duplicates of the same work from different sources, and the
    public profile page counts one per group.
    """
    shape = detect_works_shape(data)
    if shape is ListShape.FLAT_LIST:
        return [w for w in data if isinstance(w, dict)]
    if shape is ListShape.GROUPED:
        works: List[Dict[str, Any]] = []
        for group in data["group"]:
            if not isinstance(group, dict):
                continue
            summaries = _first_list(group, _WORK_SUMMARY_KEYS)
            if summaries and isinstance(summaries[0], dict):
                works.append(summaries[0])
        return works
    if shape is ListShape.ACTIVITIES_SUMMARY:
        return normalize_works(data["activities-summary"].get(WORKS))
    return []


def normalize_affiliations(data: Any, category: str) -> List[Dict[str, Any]]:
    """Flatten an educations/employments payload into one list of summaries."""
    shape = detect_affiliations_shape(data)
    if shape is ListShape.FLAT_LIST:
        return [a for a in data if isinstance(a, dict)]
    if shape is ListShape.GROUPED:
        items: List[Dict[str, Any]] = []
        for group in data["affiliation-group"]:
            if not isinstance(group, dict):
                continue
            items.extend(s for s in _first_list(group, _AFFILIATION_SUMMARY_KEYS) if isinstance(s, dict))
        return items
    if shape is ListShape.ACTIVITIES_SUMMARY:
        return normalize_affiliations(data["activities-summary"].get(category), category)
    if shape is ListShape.DIRECT_SUMMARY:
        summary = data["summary"]
        summaries = summary if isinstance(summary, list) else [summary]
        return [s for s in summaries if isinstance(s, dict)]
    return []


# ------------------------- Value shapes -------------------------


def detect_value_shape(value: Any, name: Optional[str] = None) -> ValueShape:
    if isinstance(value, bool):
        return ValueShape.ABSENT
    if isinstance(value, (str, int, float)):
        return ValueShape.SCALAR
    if isinstance(value, dict):
        if name is not None and value.get(name) is not None:
            return ValueShape.NAMED_OBJECT
        if value.get("value") is not None:
            return ValueShape.VALUE_WRAPPER
    return ValueShape.ABSENT


def text_of(value: Any, name: Optional[str] = None) -> str:
    """
    Read a text field whatever its nesting.

    `name` enables the named sub-object shape, e.g. text_of(work["title"], "title")
    for {"title": {"value": "..."}}.
    """
    shape = detect_value_shape(value, name)
    if shape is ValueShape.SCALAR:
        return str(value)
    if shape is ValueShape.NAMED_OBJECT:
        return text_of(value[name])
    if shape is ValueShape.VALUE_WRAPPER:
        return text_of(value["value"])
    return ""


def dig(data: Any, *path: str) -> Any:
    """Walk nested dicts, returning None as soon as a step is missing."""
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def year_of(date: Any) -> Optional[int]:
    """Numeric year of an ORCID fuzzy date ({"year": {"value": "2020"}}), if any."""
    raw = text_of(dig(date, "year")) if isinstance(date, dict) else ""
    try:
        year = int(raw.strip())
    except ValueError:
        return None
    return year if year > 0 else None


def format_fuzzy_date(date: Any) -> str:
    """Render an ORCID fuzzy date as "YYYY-MM" or "YYYY"; empty when no year."""
    if not isinstance(date, dict):
        return ""
    year = text_of(dig(date, "year")).strip()
    if not year:
        return ""
    month = text_of(dig(date, "month")).strip()
    if month.isdigit() and 1 <= int(month) <= 12:
        return f"{year}-{int(month):02d}"
    return year
