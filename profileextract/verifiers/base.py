"""
Base interface for profile verifiers.

Defines the contract for pluggable record verification implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ..shared import StepName, UnitOfWork


class ProfileVerifier(ABC):
    """
    Abstract base class for profile verifiers.

    Implementations check (and may complete) the structured record held
    by a UnitOfWork, recording what they find on the Validate step.
    """

    @abstractmethod
    def verify(self, work: UnitOfWork) -> UnitOfWork:
        """
        Verify work.record and update the UnitOfWork status.

        Returns:
            Updated UnitOfWork with verification errors/warnings recorded
        """
        ...

    def _record(
        self, work: UnitOfWork, errors: Iterable[str], warnings: Iterable[str]
    ) -> UnitOfWork:
        for err in errors:
            work.add_error(StepName.Validate, err)
        for warn in warnings:
            work.add_warning(StepName.Validate, warn)
        return work
