"""
Required-field verifier.

Guarantees that the final record carries every field its schema contract
requires, defaulting missing ones to their empty value. Never fails.
"""

from __future__ import annotations

from typing import List

from ..shared import SourceKind, UnitOfWork
from .base import ProfileVerifier
from .schema import required_fields, zero_value


class RequiredFieldsVerifier(ProfileVerifier):
    """
    Fill absent required fields with "" or [] and stamp the ORCID identifier.

    A field holding null counts as absent. The ORCID identifier supplied by
    the caller is used when the extractor left orcidId empty.
    """

    def verify(self, work: UnitOfWork) -> UnitOfWork:
        if work.record is None:
            work.record = {}
        record = work.record

        defaulted: List[str] = []
        for field in required_fields(work.kind):
            if record.get(field) is None:
                record[field] = zero_value(work.kind, field)
                defaulted.append(field)

        if work.kind is SourceKind.Orcid and not record.get("orcidId") and work.identifier:
            record["orcidId"] = work.identifier

        warnings = [f"defaulted missing field: {f}" for f in defaulted]
        return self._record(work, [], warnings)
