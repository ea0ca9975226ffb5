from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000
    cors_allowed_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Store A (primary): PostgreSQL
    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "complyscan"
    db_username: str = "complyscan"
    db_password: str = "secret"
    db_connect_timeout_seconds: float = 5.0
    db_apply_schema: bool = True

    # Store B (backup): MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_database: str = "complyscan"
    mongo_timeout_ms: int = 5000

    report_store: str = "dual"

    # Upload limits
    max_upload_bytes: int = 10 * 1024 * 1024

    # PDF handling
    pdf_engine: str = "pdfplumber"
    pdf_text_layer_first: bool = False
    pdf_max_pages: int = 500
    raster_pause_seconds: float = 0.05

    # OCR backend
    ocr_provider: str = "google_vision"
    ocr_openai_api_key: str = ""
    ocr_openai_model_name: str = "gpt-4o"
    ocr_openai_timeout_seconds: int = 60
    remote_file_timeout_seconds: int = 30

    # Completion backend
    analysis_provider: str = "openai"
    analysis_temperature: float = 0.2
    analysis_max_tokens: int = 4096

    analysis_openai_api_key: str = ""
    analysis_openai_model_name: str = "gpt-4o"
    analysis_openai_timeout_seconds: int = 120

    analysis_openai_compatible_base_url: str = ""
    analysis_openai_compatible_api_key: str = ""
    analysis_openai_compatible_model_name: str = ""
    analysis_openai_compatible_timeout_seconds: int = 120

    analysis_openrouter_api_key: str = ""
    analysis_openrouter_model_name: str = "openai/gpt-4o"
    analysis_openrouter_timeout_seconds: int = 120

    analysis_groq_api_key: str = ""
    analysis_groq_model_name: str = ""
    analysis_groq_timeout_seconds: int = 120

    analysis_together_api_key: str = ""
    analysis_together_model_name: str = ""
    analysis_together_timeout_seconds: int = 120

    analysis_deepseek_api_key: str = ""
    analysis_deepseek_model_name: str = "deepseek-chat"
    analysis_deepseek_timeout_seconds: int = 120

    analysis_ollama_api_key: str = "ollama"
    analysis_ollama_model_name: str = ""
    analysis_ollama_timeout_seconds: int = 300

    # Identity provider
    identity_provider: str = "clerk"
    clerk_secret_key: str = ""
    clerk_api_url: str = "https://api.clerk.com/v1"
    clerk_timeout_seconds: int = 10
    owner_email: str = ""
