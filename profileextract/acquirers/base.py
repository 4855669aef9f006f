"""
Base interface for source acquirers.

Defines the contract for pluggable profile source implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..shared import RawSource


class SourceAcquirer(ABC):
    """
    Abstract base class for source acquirers.

    An acquirer obtains raw profile data from one origin (an uploaded
    document, a public registry) and returns it unmodified apart from
    the conversion needed to make it processable.
    """

    @abstractmethod
    def acquire(self, *args: Any, **kwargs: Any) -> RawSource:
        """
        Obtain raw profile data.

        Raises:
            ProfileExtractError: A subclass describing why the source was rejected
                or could not be fetched. These are surfaced to the caller as-is.
        """
        ...
