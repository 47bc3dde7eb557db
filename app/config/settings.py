from typing import ClassVar

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Constructed once at startup and read-only afterwards.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    FEATURES: ClassVar[tuple[str, ...]] = (
        "ai_processing",
        "whatsapp_delivery",
        "pdf_generation",
        "file_cleanup",
    )

    app_env: str = "development"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "docsummary"
    db_username: str = "docsummary"
    db_password: str = "secret"
    db_pool_timeout_seconds: float = 5.0

    max_file_size_mb: int = 10
    max_files_per_session: int = 5
    file_retention_hours: int = 24

    session_dir: str = ".sessions"
    session_id: str = "default"

    processing_backend: str = "webhook"
    processing_webhook_url: str = ""
    processing_webhook_timeout_seconds: int = 120

    pdf_engine: str = "pdfplumber"

    ai_provider: str = "example"
    ai_openai_api_key: str = ""
    ai_openai_model_name: str = "gpt-4o-mini"
    ai_openai_compatible_base_url: str = ""
    ai_openai_compatible_api_key: str = ""
    ai_openai_compatible_model_name: str = ""
    ai_openrouter_api_key: str = ""
    ai_openrouter_model_name: str = ""
    ai_groq_api_key: str = ""
    ai_groq_model_name: str = ""
    ai_ollama_api_key: str = ""
    ai_ollama_model_name: str = ""
    ai_timeout_seconds: int = 30
    ai_temperature: float = 0.3

    whatsapp_provider: str = "example"
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_whatsapp_number: str = "whatsapp:+14155238886"
    delivery_timeout_seconds: int = 30
    delivery_message_interval_seconds: float = 2.0

    enable_ai_processing: bool = True
    enable_whatsapp_delivery: bool = True
    enable_pdf_generation: bool = True
    enable_file_cleanup: bool = True

    @model_validator(mode="after")
    def _reject_incomplete_production_config(self) -> "Settings":
        errors = self.configuration_errors()
        if errors and self.is_production:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")
        return self

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    def is_feature_enabled(self, feature: str) -> bool:
        """Return the flag for one of FEATURES."""
        if feature not in self.FEATURES:
            raise ValueError(f"Unknown feature '{feature}'. Choose from: {list(self.FEATURES)}")
        return bool(getattr(self, f"enable_{feature}"))

    def configuration_errors(self) -> list[str]:
        """List required keys missing for the selected providers."""
        errors: list[str] = []

        backend = self.processing_backend.lower()
        if backend == "webhook" and not self.processing_webhook_url:
            errors.append("PROCESSING_WEBHOOK_URL is required when using the webhook backend")

        ai_provider = self.ai_provider.lower()
        if self.enable_ai_processing and ai_provider != "example":
            required = {
                "openai": ("AI_OPENAI_API_KEY", self.ai_openai_api_key),
                "openai_compatible": (
                    "AI_OPENAI_COMPATIBLE_BASE_URL",
                    self.ai_openai_compatible_base_url,
                ),
                "openrouter": ("AI_OPENROUTER_API_KEY", self.ai_openrouter_api_key),
                "groq": ("AI_GROQ_API_KEY", self.ai_groq_api_key),
            }.get(ai_provider)
            if required is not None and not required[1]:
                errors.append(f"{required[0]} is required when using {ai_provider}")

        whatsapp_provider = self.whatsapp_provider.lower()
        if self.enable_whatsapp_delivery and whatsapp_provider == "twilio":
            if not self.twilio_account_sid or not self.twilio_auth_token:
                errors.append(
                    "TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN are required when using Twilio"
                )

        return errors
