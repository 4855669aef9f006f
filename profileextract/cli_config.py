"""
CLI configuration data structures.

Defines the execution mode and UserConfig used across the three-phase
CLI architecture.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class ExecutionMode(Enum):
    """What the CLI invocation should do."""

    EXTRACT_PDF = "extract-pdf"
    EXTRACT_TEXT = "extract-text"
    EXTRACT_ORCID = "extract-orcid"
    SERVE = "serve"
    LIST = "list"

    @property
    def needs_extraction(self) -> bool:
        """Whether this mode runs the extraction pipeline."""
        return self in (
            ExecutionMode.EXTRACT_PDF,
            ExecutionMode.EXTRACT_TEXT,
            ExecutionMode.EXTRACT_ORCID,
        )


@dataclass
class UserConfig:
    """Configuration gathered from user input."""

    mode: ExecutionMode

    # Extraction inputs (exactly one is set for extraction modes)
    pdf: Optional[Path] = None
    text: Optional[Path] = None
    orcid: Optional[str] = None
    output: Optional[Path] = None  # JSON output; stdout when None

    # Service
    host: str = "127.0.0.1"
    port: int = 8000

    # Registry listing (acquirers, extractors or verifiers)
    list_what: Optional[str] = None

    # Execution settings
    strict: bool = False
    debug: bool = False
    log_file: Optional[str] = None
    verbosity: int = 0
