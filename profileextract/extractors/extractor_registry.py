"""
Named profile extractors: the OpenAI-backed one and the placeholder mock.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from ..registry import ComponentRegistry
from .base import ProfileExtractor

_EXTRACTORS: ComponentRegistry[ProfileExtractor] = ComponentRegistry()


def register_extractor(name: str, extractor_class: Type[ProfileExtractor]) -> None:
    """Make `extractor_class` available under `name` (e.g. "openai")."""
    _EXTRACTORS.register(name, extractor_class)


def get_extractor(name: str, **kwargs) -> Optional[ProfileExtractor]:
    """Instantiate the extractor registered as `name` with `kwargs`, or None if unknown."""
    return _EXTRACTORS.create(name, **kwargs)


def list_extractors() -> List[Dict[str, str]]:
    """Registered extractors as name/description dicts, sorted by name."""
    return _EXTRACTORS.describe()


def unregister_extractor(name: str) -> None:
    _EXTRACTORS.unregister(name)


__all__ = [
    "register_extractor",
    "get_extractor",
    "list_extractors",
    "unregister_extractor",
]
