from pathlib import Path

from complyscan.analysis.exceptions import AnalysisError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_system_prompt(path: Path | None = None) -> str:
    """Load the analyst system instruction.

    Args:
        path: Path to the prompt file.
              Defaults to the bundled compliance_system_prompt.txt.

    Raises:
        AnalysisError: if the file cannot be read.
    """
    return _read(path or _DEFAULT_PROMPT_DIR / "compliance_system_prompt.txt", "system prompt")


def load_prompt_template(path: Path | None = None) -> str:
    """Load the user message template.

    The template takes ``{word_count}`` and ``{document_text}`` placeholders.

    Raises:
        AnalysisError: if the file cannot be read.
    """
    return _read(path or _DEFAULT_PROMPT_DIR / "compliance_user_prompt.txt", "prompt template")


def _read(path: Path, label: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AnalysisError(f"Failed to load {label}: {exc}") from exc
