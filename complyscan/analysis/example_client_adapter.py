"""Offline completion client.

Returns a fixed, valid analysis so the whole upload pipeline can run without
network access. Also the smallest reference for adding a provider: implement
BaseCompletionClient and register the provider in AnalyzerFactory.
"""

import json
from typing import ClassVar

from complyscan.analysis.client_base import BaseCompletionClient


class ExampleClientAdapter(BaseCompletionClient):
    """Adapter that returns a fixed analysis JSON. No network calls."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "summary": "Example analysis. No model was called for this document.",
        "overallRiskScore": 3,
        "potentialFines": "None identified",
        "risks": [
            {
                "issue": "Example finding",
                "description": "Placeholder risk returned by the offline client.",
                "severity": 3,
                "regulation": "Various",
                "potentialFine": "Varies",
            }
        ],
        "fixes": [],
        "policyUpdates": [],
        "actionPlan": [],
        "positiveFindings": [],
        "missingPolicies": [],
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, max_tokens, system_prompt, user_prompt
        return json.dumps(self.DEFAULT_RESPONSE)
