"""
Source acquisition interfaces and implementations.

This module provides pluggable source acquirers with a registry system.
"""

from .acquirer_registry import get_acquirer, list_acquirers, register_acquirer, unregister_acquirer
from .base import SourceAcquirer
from .orcid_acquirer import OrcidAcquirer, validate_orcid_id
from .pdf_acquirer import PDF_MEDIA_TYPE, PdfAcquirer

# Register built-in acquirers
register_acquirer("pdf", PdfAcquirer)
register_acquirer("orcid", OrcidAcquirer)

__all__ = [
    "SourceAcquirer",
    "PdfAcquirer",
    "OrcidAcquirer",
    "PDF_MEDIA_TYPE",
    "validate_orcid_id",
    "register_acquirer",
    "get_acquirer",
    "list_acquirers",
    "unregister_acquirer",
]
