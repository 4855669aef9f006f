"""
OpenAI-based profile extractor implementation.

Sends the compacted payload to the Chat Completions API with a fixed
instruction describing the output schema and parses the reply as JSON.
The call is near-deterministic (low temperature), bounded in output length,
and not retried.
"""

from __future__ import annotations

import os
from typing import Any, Optional

from openai import OpenAI

from ..errors import ConfigurationMissing, ExtractionParseError
from ..logging_utils import LOG
from ..shared import SourceKind, UnitOfWork, format_prompt, load_prompt
from .base import ProfileExtractor
from .openai_utils import first_message_content, parse_json_object

DEFAULT_TEMPERATURE = 0.1
DEFAULT_MAX_TOKENS = 4000


class OpenAIProfileExtractor(ProfileExtractor):
    """
    Profile extractor using the OpenAI Chat Completions API.
    """

    def __init__(
        self,
        model: str = "gpt-4o",
        *,
        orcid_model: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout_s: float = 60.0,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        client: Optional[OpenAI] = None,
        **kwargs,
    ):
        """
        Initialize the OpenAI extractor.

        Args:
            model: Model used for LinkedIn text.
            orcid_model: Model used for ORCID payloads (defaults to `model`).
            api_key: API key; falls back to OPENAI_API_KEY.
            timeout_s: Request timeout for the generation call.
            temperature: Sampling temperature.
            max_tokens: Upper bound on the generated output.
            client: Pre-built client (tests, custom transports).
        """
        self.model = model
        self.orcid_model = orcid_model or model
        self._api_key = api_key
        self._timeout_s = float(timeout_s)
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            api_key = self._api_key or os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise ConfigurationMissing(
                    "OPENAI_API_KEY must be set to use OpenAIProfileExtractor"
                )
            self._client = OpenAI(api_key=api_key, timeout=self._timeout_s, max_retries=0)
        return self._client

    def ensure_configured(self) -> None:
        self.client

    def model_for(self, kind: SourceKind) -> str:
        return self.orcid_model if kind is SourceKind.Orcid else self.model

    def extract(self, work: UnitOfWork) -> UnitOfWork:
        """
        Extract a structured profile from the compacted payload.

        Raises:
            ValueError: The work has no compacted payload.
            ConfigurationMissing: No API key is available.
            ExtractionParseError: The reply is empty or not a JSON object.
        """
        if work.compacted is None:
            raise ValueError("Extraction input payload is not set")

        system_prompt, user_prompt = self._build_prompts(work)
        response_text = self._complete(system_prompt, user_prompt, model=self.model_for(work.kind))
        work.record = parse_json_object(response_text)
        return work

    def _build_prompts(self, work: UnitOfWork) -> tuple[str, str]:
        prefix = work.kind.value
        system_prompt = load_prompt(f"{prefix}_extraction_system")
        if not system_prompt:
            raise RuntimeError(f"Failed to load system prompt for {prefix}")

        user_prompt = format_prompt(f"{prefix}_extraction_user", payload=work.compacted.prompt_text())
        if not user_prompt:
            raise RuntimeError(f"Failed to format user prompt for {prefix}")
        return system_prompt.strip(), user_prompt

    def _complete(self, system_prompt: str, user_prompt: str, *, model: str) -> str:
        LOG.debug("Requesting structured profile from %s (%d prompt characters)", model, len(user_prompt))
        response: Any = self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        content = first_message_content(response)
        if not content:
            raise ExtractionParseError(detail="No response from OpenAI")
        return content
