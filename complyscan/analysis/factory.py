from typing import ClassVar

from complyscan.analysis.analyzer import ComplianceAnalyzer
from complyscan.analysis.base import BaseAnalyzer
from complyscan.analysis.example_client_adapter import ExampleClientAdapter
from complyscan.analysis.openai_client_adapter import OpenAIClientAdapter
from complyscan.config.settings import Settings


class AnalyzerFactory:
    """Creates the configured compliance analyzer."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseAnalyzer:
        """Create a configured analyzer from application settings."""
        provider = settings.analysis_provider.lower()
        if provider == "example":
            return ComplianceAnalyzer(client=ExampleClientAdapter(), model="example")
        client = OpenAIClientAdapter(
            api_key=cls._provider_setting(provider, "api_key", settings) or "",
            timeout_seconds=cls._provider_setting(provider, "timeout_seconds", settings) or 120,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return ComplianceAnalyzer(
            client=client,
            model=cls._provider_setting(provider, "model_name", settings) or "",
            temperature=settings.analysis_temperature,
            max_tokens=settings.analysis_max_tokens,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.analysis_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "analysis_openai_compatible_base_url is required for "
                    "analysis_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown analysis provider '{provider}'. Choose from: {supported}")

    @staticmethod
    def _provider_setting(provider: str, name: str, settings: Settings):  # type: ignore[no-untyped-def]
        return getattr(settings, f"analysis_{provider}_{name}", None)
