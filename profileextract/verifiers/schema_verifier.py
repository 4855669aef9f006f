"""
Schema verifier for structured profile records.

Validates field types and list item shapes against the bundled schema
contracts. Problems are reported as warnings: the caller still receives
the record.
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..shared import SourceKind, UnitOfWork, VerificationResult
from .base import ProfileVerifier
from .schema import load_profile_schema


class ProfileSchemaVerifier(ProfileVerifier):
    """
    Verifier that checks a record against its profile schema contract.

    Uses basic structure validation: top-level types, item object shape,
    item required fields and string-typed item properties.
    """

    def check(self, record: Dict[str, Any], kind: SourceKind) -> VerificationResult:
        schema = load_profile_schema(kind)
        props: Dict[str, Any] = schema.get("properties", {})
        warns: List[str] = []

        for field in schema.get("required", []):
            if field not in record:
                warns.append(f"missing required field: {field}")

        for field, rule in props.items():
            if field not in record or record[field] is None:
                continue
            value = record[field]
            expected = rule.get("type")
            if expected == "string" and not isinstance(value, str):
                warns.append(f"{field} must be a string")
            elif expected == "array":
                if not isinstance(value, list):
                    warns.append(f"{field} must be an array")
                else:
                    warns.extend(self._check_items(field, value, rule.get("items", {})))

        return VerificationResult(ok=not warns, errors=[], warnings=warns)

    def _check_items(self, field: str, items: List[Any], rule: Dict[str, Any]) -> List[str]:
        warns: List[str] = []
        item_type = rule.get("type")
        for idx, item in enumerate(items):
            if item_type == "string":
                if not isinstance(item, str):
                    warns.append(f"{field}[{idx}] must be a string")
                continue
            if not isinstance(item, dict):
                warns.append(f"{field}[{idx}] must be an object")
                continue
            for key in rule.get("required", []):
                if key not in item:
                    warns.append(f"{field}[{idx}] missing required field: {key}")
            for key, prop in rule.get("properties", {}).items():
                if key in item and item[key] is not None and prop.get("type") == "string" and not isinstance(item[key], str):
                    warns.append(f"{field}[{idx}].{key} must be a string")
        return warns

    def verify(self, work: UnitOfWork) -> UnitOfWork:
        result = self.check(work.record or {}, work.kind)
        return self._record(work, result.errors, result.warnings)
