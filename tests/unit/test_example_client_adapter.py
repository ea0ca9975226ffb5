"""Tests for ExampleClientAdapter (offline reference adapter)."""

import json

from complyscan.analysis.example_client_adapter import ExampleClientAdapter


def _complete(adapter: ExampleClientAdapter, **overrides: object) -> str:
    kwargs: dict[str, object] = {
        "model": "any",
        "temperature": 0.0,
        "max_tokens": 100,
        "system_prompt": "sys",
        "user_prompt": "user",
    }
    kwargs.update(overrides)
    return adapter.create_chat_completion(**kwargs)  # type: ignore[arg-type]


class TestExampleClientAdapter:
    def test_returns_analysis_json(self) -> None:
        data = json.loads(_complete(ExampleClientAdapter()))
        assert "summary" in data
        assert "overallRiskScore" in data
        assert isinstance(data["risks"], list)

    def test_ignores_input_parameters(self) -> None:
        adapter = ExampleClientAdapter()
        r1 = _complete(adapter, model="a", user_prompt="u1")
        r2 = _complete(adapter, model="b", temperature=0.3, user_prompt="u2")
        assert r1 == r2
