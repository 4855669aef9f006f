"""
Shared models and text utilities.

Defines the data carried through the pipeline (raw sources, compacted
payloads, the per-request unit of work, verification results) and the
prompt loading helpers used by the extractors.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .logging_utils import LOG, fmt_issues

# Pipeline data


class SourceKind(str, Enum):
    """Flavor of profile being extracted; selects prompts, schema and mock record."""
    LinkedIn = "linkedin"
    Orcid = "orcid"


class StepName(str, Enum):
    Compact = "Compact"
    Extract = "Extract"
    Reconcile = "Reconcile"
    Validate = "Validate"


@dataclass(frozen=True)
class VerificationResult:
    ok: bool
    errors: List[str]
    warnings: List[str]


@dataclass
class StepStatus:
    step: StepName
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings and not self.errors


@dataclass(frozen=True)
class DocumentText:
    """Plain text pulled out of an uploaded document."""
    text: str
    pages: int = 0


@dataclass
class OrcidDocument:
    """
    Composite registry record: the top-level profile plus the three
    independently fetched sub-resources. A sub-resource is None when
    its fetch failed.
    """
    orcid_id: str
    profile: Dict[str, Any]
    works: Optional[Dict[str, Any]] = None
    educations: Optional[Dict[str, Any]] = None
    employments: Optional[Dict[str, Any]] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile,
            "works": self.works,
            "educations": self.educations,
            "employments": self.employments,
        }


RawSource = Union[DocumentText, OrcidDocument, Dict[str, Any]]

COMPLETE_DATA_KEY = "_completeData"


def serialize_payload(payload: Any) -> str:
    """Text embedded in the user prompt; the size budget is measured on this exact string."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, indent=2, ensure_ascii=False)


@dataclass
class CompactedPayload:
    """
    Size-bounded projection of a raw source.

    payload is what goes into the generation request; complete_data keeps
    the fully normalized, unsampled lists for reconciliation.
    """
    payload: Union[Dict[str, Any], str]
    complete_data: Dict[str, List[Dict[str, Any]]] = field(default_factory=dict)
    branch: str = "full"
    estimated_tokens: int = 0

    def as_dict(self) -> Dict[str, Any]:
        if isinstance(self.payload, str):
            return {"text": self.payload, COMPLETE_DATA_KEY: self.complete_data}
        out = dict(self.payload)
        out[COMPLETE_DATA_KEY] = self.complete_data
        return out

    def prompt_text(self) -> str:
        return serialize_payload(self.payload)


@dataclass
class UnitOfWork:
    """
    Container for one pipeline invocation.

    Holds the caller's input, each stage's product and the per-step
    warnings/errors recorded along the way.
    """
    kind: SourceKind
    identifier: str = ""
    raw: Optional[RawSource] = None
    compacted: Optional[CompactedPayload] = None
    record: Optional[Dict[str, Any]] = None
    step_statuses: Dict[StepName, StepStatus] = field(default_factory=dict)

    def status_for(self, step: StepName) -> StepStatus:
        return self.step_statuses.setdefault(step, StepStatus(step=step))

    def add_warning(self, step: StepName, message: str) -> None:
        self.status_for(step).warnings.append(message)

    def add_error(self, step: StepName, message: str) -> None:
        self.status_for(step).errors.append(message)

    def _scoped(self, step: Optional[StepName]) -> List[StepStatus]:
        if step is None:
            return list(self.step_statuses.values())
        return [self.step_statuses[step]] if step in self.step_statuses else []

    def has_no_errors(self, step: Optional[StepName] = None) -> bool:
        """True when `step` (or every step, if None) recorded no errors."""
        return not any(s.errors for s in self._scoped(step))

    def has_no_warnings_or_errors(self, step: Optional[StepName] = None) -> bool:
        return all(s.ok for s in self._scoped(step))

    def all_errors(self, prefixed: bool = False) -> List[str]:
        return [f"{s.step.value}: {e}" if prefixed else e for s in self.step_statuses.values() for e in s.errors]

    def all_warnings(self, prefixed: bool = False) -> List[str]:
        return [f"{s.step.value}: {w}" if prefixed else w for s in self.step_statuses.values() for w in s.warnings]

    def summary(self) -> str:
        label = self.identifier or self.kind.value
        return f"{label} | {fmt_issues(self.all_errors(prefixed=True), self.all_warnings(prefixed=True))}"


# Text helpers

_CHAR_FIXES = (
    ("\u00A0", " "),   # NBSP
    ("\u00AD", "-"),   # soft hyphen
    ("\r\n", "\n"),
    ("\r", "\n"),
    ("\x00", ""),      # some PDF producers emit NULs
)


def normalize_text_for_processing(s: str) -> str:
    """Fold the odd characters PDF text extraction produces into plain text."""
    for old, new in _CHAR_FIXES:
        s = s.replace(old, new)
    return s


# Prompt templates

PROMPTS_DIR = Path(__file__).parent / "extractors" / "prompts"


def load_prompt(prompt_name: str) -> Optional[str]:
    """
    Read `extractors/prompts/<prompt_name>.md`.

    A missing or unreadable template is logged and reported as None so the
    caller can fail the extraction step with its own message.
    """
    path = PROMPTS_DIR / f"{prompt_name}.md"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        LOG.error("Failed to read prompt %s: %s", path, e)
        return None


def format_prompt(prompt_name: str, **kwargs) -> Optional[str]:
    """
    Fill a template's str.format placeholders, e.g.
    format_prompt("linkedin_extraction_user", payload="Jane Doe").

    Returns None if the template is missing or a placeholder is not supplied.
    """
    template = load_prompt(prompt_name)
    if template is None:
        return None
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError) as e:
        LOG.error("Failed to format prompt %s: %s", prompt_name, e)
        return None
