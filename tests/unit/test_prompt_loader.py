"""Tests for system prompt and user template loading."""

from pathlib import Path

import pytest

from complyscan.analysis.exceptions import AnalysisError
from complyscan.analysis.prompt_loader import load_prompt_template, load_system_prompt


class TestLoadPromptTemplate:
    def test_loads_default_template(self) -> None:
        template = load_prompt_template()
        assert "{document_text}" in template
        assert "{word_count}" in template

    def test_default_template_formats(self) -> None:
        rendered = load_prompt_template().format(word_count=3, document_text="one two three")
        assert "one two three" in rendered

    def test_loads_custom_template(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("Analyze {document_text}")
        assert load_prompt_template(custom) == "Analyze {document_text}"

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AnalysisError, match="Failed to load prompt template"):
            load_prompt_template(Path("/nonexistent/file.txt"))


class TestLoadSystemPrompt:
    def test_loads_default_prompt(self) -> None:
        assert load_system_prompt().strip()

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AnalysisError, match="Failed to load system prompt"):
            load_system_prompt(Path("/nonexistent/system.txt"))
