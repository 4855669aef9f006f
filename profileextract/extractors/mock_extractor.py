"""
Placeholder extractor used when the generation service is not configured.

Returns a fixed example record per source kind, independent of the input,
so the dashboard can still be exercised end to end.
"""

from __future__ import annotations

import copy
from typing import Any, Dict

from ..logging_utils import LOG
from ..shared import SourceKind, UnitOfWork
from .base import ProfileExtractor

PLACEHOLDER_ORCID_ID = "0000-0000-0000-0000"

MOCK_LINKEDIN_RECORD: Dict[str, Any] = {
    "firstName": "John",
    "lastName": "Doe",
    "email": "john.doe@email.com",
    "phone": "+1 (555) 123-4567",
    "location": "San Francisco, CA",
    "headline": "Software Engineer at TechCorp",
    "summary": (
        "Experienced software engineer with 5+ years in full-stack development, "
        "passionate about creating innovative solutions and mentoring teams."
    ),
    "experience": [
        {
            "title": "Senior Software Engineer",
            "company": "TechCorp",
            "location": "San Francisco, California, United States",
            "startDate": "2020-01",
            "endDate": "Present",
            "description": (
                "Led development of key features for the main product. Mentored junior "
                "developers and improved team productivity by 30%."
            ),
        }
    ],
    "education": [
        {
            "institution": "Stanford University",
            "degree": "Master of Science",
            "fieldOfStudy": "Computer Science",
            "startDate": "2016",
            "endDate": "2018",
            "description": "Focus on Machine Learning and Distributed Systems",
        }
    ],
    "skills": ["JavaScript", "React", "Node.js", "Python", "SQL", "AWS", "Docker"],
    "certifications": [],
    "languages": [{"language": "English", "proficiency": "Native"}],
}

MOCK_ORCID_RECORD: Dict[str, Any] = {
    "firstName": "Dr. Jane",
    "lastName": "Smith",
    "email": "",
    "phone": "",
    "location": "Stanford, CA",
    "headline": "Research Scientist at Stanford University",
    "summary": (
        "Experienced researcher in computational biology with focus on machine "
        "learning applications in genomics."
    ),
    "orcidId": PLACEHOLDER_ORCID_ID,
    "website": "https://example.com",
    "experience": [
        {
            "title": "Research Scientist",
            "company": "Stanford University",
            "location": "Stanford, CA",
            "startDate": "2020-01",
            "endDate": "Present",
            "description": "Leading research in computational biology and machine learning applications.",
        }
    ],
    "education": [
        {
            "institution": "MIT",
            "degree": "PhD",
            "fieldOfStudy": "Computer Science",
            "startDate": "2016",
            "endDate": "2020",
            "description": "Dissertation on machine learning applications in biological systems",
        }
    ],
    "publications": [
        {
            "title": "Machine Learning Applications in Genomics",
            "journal": "Nature Biotechnology",
            "year": "2023",
            "doi": "10.1038/s41587-023-01234-5",
            "authors": "Smith, J., et al.",
        }
    ],
    "skills": ["Machine Learning", "Python", "Bioinformatics", "Statistical Analysis"],
    "keywords": ["Computational Biology", "Genomics", "Machine Learning", "Data Science"],
    "languages": [{"language": "English", "proficiency": "Native"}],
}


def mock_record(kind: SourceKind, identifier: str = "") -> Dict[str, Any]:
    """Fresh copy of the placeholder record for `kind`."""
    if kind is SourceKind.Orcid:
        record = copy.deepcopy(MOCK_ORCID_RECORD)
        record["orcidId"] = identifier or PLACEHOLDER_ORCID_ID
        return record
    return copy.deepcopy(MOCK_LINKEDIN_RECORD)


class MockProfileExtractor(ProfileExtractor):
    """Placeholder records for running without a generation service."""

    def extract(self, work: UnitOfWork) -> UnitOfWork:
        LOG.warning("Generation service not configured, returning placeholder %s profile", work.kind.value)
        work.record = mock_record(work.kind, work.identifier)
        return work
