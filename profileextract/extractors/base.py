"""
Base interface for structured profile extractors.

Defines the contract for pluggable extraction implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..shared import UnitOfWork


class ProfileExtractor(ABC):
    """
    Abstract base class for profile extractors.

    Implementations turn the compacted payload of a UnitOfWork into a
    StructuredProfileRecord: a dict with camelCase keys such as

        {
            "firstName": str, "lastName": str, "email": str, "phone": str,
            "location": str, "headline": str, "summary": str,
            "experience": [{"title", "company", "location", "startDate",
                            "endDate", "description"}],
            "education": [{"institution", "degree", "fieldOfStudy",
                           "startDate", "endDate", "description"}],
            "skills": [str], "languages": [{"language", "proficiency"}],
            ...
        }

    ORCID records additionally carry orcidId, website, publications and
    keywords.
    """

    def ensure_configured(self) -> None:
        """
        Raise ConfigurationMissing when the extractor cannot run.

        Extractors without external dependencies are always configured.
        """
        return None

    @abstractmethod
    def extract(self, work: UnitOfWork) -> UnitOfWork:
        """
        Populate work.record from work.compacted.

        Args:
            work: UnitOfWork whose compacted payload is set.

        Returns:
            The same UnitOfWork with record populated.

        Raises:
            ConfigurationMissing: The generation service is not configured.
            ExtractionParseError: The generation response is not a JSON object.
        """
        ...
