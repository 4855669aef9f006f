"""
Profile extraction interfaces and implementations.

This module provides pluggable and interchangeable profile extractors.
"""

from .base import ProfileExtractor
from .extractor_registry import get_extractor, list_extractors, register_extractor, unregister_extractor
from .mock_extractor import MockProfileExtractor, mock_record
from .openai_extractor import OpenAIProfileExtractor

# Register built-in extractors
register_extractor("openai", OpenAIProfileExtractor)
register_extractor("mock", MockProfileExtractor)

__all__ = [
    "ProfileExtractor",
    "OpenAIProfileExtractor",
    "MockProfileExtractor",
    "mock_record",
    "register_extractor",
    "get_extractor",
    "list_extractors",
    "unregister_extractor",
]
