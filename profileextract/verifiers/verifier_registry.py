"""
Named record verifiers applied after extraction.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from ..registry import ComponentRegistry
from .base import ProfileVerifier

_VERIFIERS: ComponentRegistry[ProfileVerifier] = ComponentRegistry()


def register_verifier(name: str, verifier_class: Type[ProfileVerifier]) -> None:
    """Make `verifier_class` available under `name` (e.g. "required-fields")."""
    _VERIFIERS.register(name, verifier_class)


def get_verifier(name: str, **kwargs) -> Optional[ProfileVerifier]:
    """Instantiate the verifier registered as `name` with `kwargs`, or None if unknown."""
    return _VERIFIERS.create(name, **kwargs)


def list_verifiers() -> List[Dict[str, str]]:
    """Registered verifiers as name/description dicts, sorted by name."""
    return _VERIFIERS.describe()


def unregister_verifier(name: str) -> None:
    _VERIFIERS.unregister(name)


__all__ = [
    "register_verifier",
    "get_verifier",
    "list_verifiers",
    "unregister_verifier",
]
