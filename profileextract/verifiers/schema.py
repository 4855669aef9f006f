"""
Access to the bundled profile schema contracts.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib.resources import files
from typing import Any, Dict, List

from ..shared import SourceKind

_SCHEMA_FILES = {
    SourceKind.LinkedIn: "linkedin_profile_schema.json",
    SourceKind.Orcid: "orcid_profile_schema.json",
}


@lru_cache(maxsize=None)
def load_profile_schema(kind: SourceKind) -> Dict[str, Any]:
    """Load the JSON schema describing the record for `kind`."""
    resource = files("profileextract.contracts").joinpath(_SCHEMA_FILES[kind])
    return json.loads(resource.read_text(encoding="utf-8"))


def required_fields(kind: SourceKind) -> List[str]:
    return list(load_profile_schema(kind).get("required", []))


def zero_value(kind: SourceKind, field: str) -> Any:
    """Empty value for a field: [] for arrays, "" for everything else."""
    prop = load_profile_schema(kind).get("properties", {}).get(field, {})
    return [] if prop.get("type") == "array" else ""


def empty_record(kind: SourceKind) -> Dict[str, Any]:
    """Minimal safe record: every required field present and empty."""
    return {field: zero_value(kind, field) for field in required_fields(kind)}
