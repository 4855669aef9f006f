"""
Name -> class lookup shared by the acquirer, extractor and verifier registries.
"""

from __future__ import annotations

from typing import Dict, Generic, List, Optional, Type, TypeVar

T = TypeVar("T")


def first_doc_line(cls: type) -> str:
    doc = (cls.__doc__ or "").strip()
    return doc.splitlines()[0] if doc else "No description available"


class ComponentRegistry(Generic[T]):
    """Classes registered under a short name, instantiated on lookup."""

    def __init__(self):
        self._classes: Dict[str, Type[T]] = {}

    def register(self, name: str, cls: Type[T]) -> None:
        # Re-registering a name replaces the earlier class.
        self._classes[name] = cls

    def create(self, name: str, **kwargs) -> Optional[T]:
        cls = self._classes.get(name)
        return cls(**kwargs) if cls is not None else None

    def describe(self) -> List[Dict[str, str]]:
        return [
            {"name": name, "description": first_doc_line(self._classes[name])}
            for name in sorted(self._classes)
        ]

    def unregister(self, name: str) -> None:
        self._classes.pop(name, None)
