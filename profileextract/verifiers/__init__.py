"""
Profile verification interfaces and implementations.

This module provides pluggable profile verifiers.
"""

from .base import ProfileVerifier
from .required_fields_verifier import RequiredFieldsVerifier
from .schema import empty_record, load_profile_schema, required_fields
from .schema_verifier import ProfileSchemaVerifier
from .verifier_registry import get_verifier, list_verifiers, register_verifier, unregister_verifier

# Register built-in verifiers
register_verifier("required-fields", RequiredFieldsVerifier)
register_verifier("profile-schema", ProfileSchemaVerifier)

__all__ = [
    "ProfileVerifier",
    "RequiredFieldsVerifier",
    "ProfileSchemaVerifier",
    "empty_record",
    "load_profile_schema",
    "required_fields",
    "register_verifier",
    "get_verifier",
    "list_verifiers",
    "unregister_verifier",
]
