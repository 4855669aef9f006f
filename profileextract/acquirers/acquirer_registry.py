"""
Named source acquirers, so callers can pick "pdf" or "orcid" by name.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from ..registry import ComponentRegistry
from .base import SourceAcquirer

_ACQUIRERS: ComponentRegistry[SourceAcquirer] = ComponentRegistry()


def register_acquirer(name: str, acquirer_class: Type[SourceAcquirer]) -> None:
    """Make `acquirer_class` available under `name` (e.g. "pdf")."""
    _ACQUIRERS.register(name, acquirer_class)


def get_acquirer(name: str, **kwargs) -> Optional[SourceAcquirer]:
    """Instantiate the acquirer registered as `name` with `kwargs`, or None if unknown."""
    return _ACQUIRERS.create(name, **kwargs)


def list_acquirers() -> List[Dict[str, str]]:
    """Registered acquirers as name/description dicts, sorted by name."""
    return _ACQUIRERS.describe()


def unregister_acquirer(name: str) -> None:
    _ACQUIRERS.unregister(name)


__all__ = [
    "register_acquirer",
    "get_acquirer",
    "list_acquirers",
    "unregister_acquirer",
]
