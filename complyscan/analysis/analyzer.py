"""AI-powered compliance analyzer."""

import json
import re
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from complyscan.analysis.base import BaseAnalyzer
from complyscan.analysis.client_base import BaseCompletionClient
from complyscan.analysis.exceptions import AnalysisError, AnalysisResponseError
from complyscan.analysis.models import AnalysisResult
from complyscan.analysis.prompt_loader import load_prompt_template, load_system_prompt
from complyscan.analysis.validator import validate_and_build
from complyscan.logging.logger import Log

MAX_DOCUMENT_CHARS = 15_000
MAX_TEMPERATURE = 0.3

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ComplianceAnalyzer(BaseAnalyzer):
    """Analyzes document text for regulatory compliance risks using an AI provider."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        temperature: float = 0.2,
        max_tokens: int = 4096,
        system_prompt_path: Path | None = None,
        prompt_template_path: Path | None = None,
        clock: Callable[[], str] = _utc_now,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(MAX_TEMPERATURE, temperature))
        self._max_tokens = max_tokens
        self._system_prompt = load_system_prompt(system_prompt_path)
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._clock = clock

    def analyze_compliance(self, document_text: str) -> AnalysisResult:
        """Analyze document text and return a normalized result."""
        word_count = len(document_text.split())
        try:
            prompt = self._build_prompt(document_text, word_count)
            raw_response = self._call_ai(prompt)
            Log.debug(f"AI raw response:\n{raw_response}")
            parsed = self._parse_json(raw_response)
            result = validate_and_build(
                parsed,
                document_word_count=word_count,
                analyzed_at=self._clock(),
            )
        except Exception as exc:
            Log.error(f"Compliance analysis failed: {exc}")
            raise AnalysisError(f"Failed to analyze document: {exc}") from exc

        Log.info(
            f"Analysis complete: {len(result.risks)} risks, "
            f"overall score {result.overall_risk_score}"
        )
        return result

    def _build_prompt(self, document_text: str, word_count: int) -> str:
        if len(document_text) > MAX_DOCUMENT_CHARS:
            Log.info(
                f"Document text truncated from {len(document_text)} "
                f"to {MAX_DOCUMENT_CHARS} characters"
            )
        return self._prompt_template.format(
            word_count=word_count,
            document_text=document_text[:MAX_DOCUMENT_CHARS],
        )

    def _call_ai(self, prompt: str) -> str:
        return self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, Any]:
        """Strict parse first, then the outermost ``{...}`` span of the text."""
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            match = _JSON_OBJECT.search(raw)
            if match is None:
                raise AnalysisResponseError("Invalid JSON response from AI") from None
            try:
                parsed = json.loads(match.group(0))
            except json.JSONDecodeError as exc:
                raise AnalysisResponseError("Invalid JSON response from AI") from exc

        if not isinstance(parsed, dict):
            raise AnalysisResponseError("JSON response must be an object")
        return parsed
