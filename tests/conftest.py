import json
from typing import Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import httpx
import pytest

from profileextract.extractors import OpenAIProfileExtractor
from profileextract.settings import Settings


ORCID_ID = "0000-0001-2345-678X"
ORCID_BASE_URL = "https://orcid.test/v3.0"


# ------------------------- PDF -------------------------


def _pdf_escape(line: str) -> str:
    return line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: List[str]) -> bytes:
    """Smallest well-formed single-page PDF showing `lines` in Helvetica."""
    ops = ["BT", "/F1 12 Tf", "14 TL", "72 720 Td"]
    for line in lines:
        ops.append(f"({_pdf_escape(line)}) Tj T*")
    ops.append("ET")
    content = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


@pytest.fixture
def linkedin_pdf_bytes() -> bytes:
    return build_pdf([
        "Ada Lovelace",
        "Analytical Engine Programmer",
        "London, United Kingdom",
        "Experience",
        "Babbage Labs",
    ])


# ------------------------- ORCID -------------------------


def orcid_profile(orcid_id: str = ORCID_ID) -> Dict:
    return {
        "orcid-identifier": {"path": orcid_id, "uri": f"https://orcid.org/{orcid_id}"},
        "person": {
            "name": {
                "given-names": {"value": "Ada"},
                "family-name": {"value": "Lovelace"},
            },
            "biography": {"content": "Mathematician working on computing engines."},
            "emails": {"email": [{"email": "ada@example.org"}]},
            "keywords": {"keyword": [{"content": "Computing"}, {"content": "Mathematics"}]},
        },
    }


def orcid_work(title: str, year: Optional[str] = None, month: Optional[str] = None, doi: str = "") -> Dict:
    work: Dict = {
        "title": {"title": {"value": title}},
        "journal-title": {"value": "Journal of Engines"},
        "type": "journal-article",
    }
    if year:
        date: Dict = {"year": {"value": year}}
        if month:
            date["month"] = {"value": month}
        work["publication-date"] = date
    if doi:
        work["external-ids"] = {
            "external-id": [{"external-id-type": "doi", "external-id-value": doi}]
        }
    return work


def orcid_works(titles: List[Tuple[str, Optional[str]]]) -> Dict:
    """Grouped works payload: one group per title, each holding a duplicate from a second source."""
    return {
        "group": [
            {"work-summary": [orcid_work(title, year), orcid_work(title + " (preprint)", year)]}
            for title, year in titles
        ]
    }


def orcid_educations() -> Dict:
    return {
        "affiliation-group": [
            {
                "summaries": [
                    {
                        "education-summary": {
                            "organization": {"name": "University of London"},
                            "role-title": "PhD",
                            "department-name": "Mathematics",
                            "start-date": {"year": {"value": "1830"}},
                            "end-date": {"year": {"value": "1835"}, "month": {"value": "6"}},
                        }
                    }
                ]
            }
        ]
    }


def orcid_employments() -> Dict:
    return {
        "affiliation-group": [
            {
                "summaries": [
                    {
                        "employment-summary": {
                            "organization": {
                                "name": "Babbage Labs",
                                "address": {"city": "London", "region": None, "country": "GB"},
                            },
                            "role-title": "Programmer",
                            "start-date": {"year": {"value": "1842"}, "month": {"value": "9"}},
                            "end-date": None,
                        }
                    }
                ]
            }
        ]
    }


def orcid_document_dict(orcid_id: str = ORCID_ID) -> Dict:
    """The {profile, works, educations, employments} shape the fetch endpoint returns."""
    return {
        "profile": orcid_profile(orcid_id),
        "works": orcid_works([("Notes on the Engine", "1843"), ("On Bernoulli Numbers", "1842")]),
        "educations": orcid_educations(),
        "employments": orcid_employments(),
    }


def make_orcid_client(
    responses: Dict[str, Tuple[int, object]],
    calls: Optional[List[str]] = None,
    base_url: str = ORCID_BASE_URL,
) -> httpx.Client:
    """
    httpx client backed by a MockTransport.

    `responses` maps a path relative to the base URL ("<id>", "<id>/works")
    to (status, json body). Unknown paths answer 404. Every requested path
    is appended to `calls`.
    """
    prefix = httpx.URL(base_url).path.rstrip("/") + "/"

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path[len(prefix):]
        if calls is not None:
            calls.append(path)
        status, body = responses.get(path, (404, {"error": "not found"}))
        return httpx.Response(status, content=json.dumps(body).encode("utf-8"),
                              headers={"Content-Type": "application/json"})

    return httpx.Client(transport=httpx.MockTransport(handler))


def full_orcid_responses(orcid_id: str = ORCID_ID) -> Dict[str, Tuple[int, object]]:
    doc = orcid_document_dict(orcid_id)
    return {
        orcid_id: (200, doc["profile"]),
        f"{orcid_id}/works": (200, doc["works"]),
        f"{orcid_id}/educations": (200, doc["educations"]),
        f"{orcid_id}/employments": (200, doc["employments"]),
    }


@pytest.fixture
def orcid_calls() -> List[str]:
    return []


@pytest.fixture
def orcid_client(orcid_calls):
    client = make_orcid_client(full_orcid_responses(), orcid_calls)
    yield client
    client.close()


# ------------------------- OpenAI -------------------------


def make_openai_client(content: Optional[str] = None, side_effect: Optional[BaseException] = None) -> MagicMock:
    """MagicMock standing in for openai.OpenAI with a canned chat completion."""
    client = MagicMock()
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    if side_effect is not None:
        client.chat.completions.create.side_effect = side_effect
    else:
        client.chat.completions.create.return_value = response
    return client


def make_extractor(record: Optional[dict] = None, *, content: Optional[str] = None,
                   side_effect: Optional[BaseException] = None) -> OpenAIProfileExtractor:
    if content is None and record is not None:
        content = "```json\n" + json.dumps(record) + "\n```"
    return OpenAIProfileExtractor(client=make_openai_client(content, side_effect))


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="test-key", orcid_base_url=ORCID_BASE_URL)


@pytest.fixture
def unconfigured_settings(monkeypatch) -> Settings:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return Settings(openai_api_key=None, orcid_base_url=ORCID_BASE_URL)
