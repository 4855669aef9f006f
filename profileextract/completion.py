"""
Profile completion scoring.

Required fields count 1 each and optional fields 0.5 each. Keys may be
given in camelCase (as produced by the extractors) or snake_case (as stored
by the web application); snake_case wins when both are present.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Mapping

REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "headline",
    "summary",
    "location",
    "skills",
    "keywords",
)

OPTIONAL_FIELDS = (
    "website",
    "phone",
    "experience",
    "education",
    "publications",
    "languages",
)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def to_snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def normalize_keys(profile: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in profile.items():
        snake = to_snake_case(key)
        if snake in out and snake != key:
            continue
        out[snake] = value
    return out


def is_filled(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return bool(value)


def profile_completion(profile: Mapping[str, Any] | None) -> Dict[str, Any]:
    """
    Score how complete a stored profile is.

    Returns a dict with completionPercentage (0-100, rounded half up),
    completedFields and totalFields. A missing profile scores zero.
    """
    total = len(REQUIRED_FIELDS) + len(OPTIONAL_FIELDS)
    if profile is None:
        return {"completionPercentage": 0, "completedFields": 0, "totalFields": 0}

    data = normalize_keys(profile)
    completed = 0.0
    for name in REQUIRED_FIELDS:
        if is_filled(data.get(name)):
            completed += 1
    for name in OPTIONAL_FIELDS:
        if is_filled(data.get(name)):
            completed += 0.5

    percentage = min(int(math.floor(completed / total * 100 + 0.5)), 100)
    if completed == int(completed):
        completed = int(completed)
    return {
        "completionPercentage": percentage,
        "completedFields": completed,
        "totalFields": total,
    }
