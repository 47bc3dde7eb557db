from typing import ClassVar

from app.config.settings import Settings
from app.summarization.client_base import BaseCompletionClient
from app.summarization.example_client_adapter import ExampleClientAdapter
from app.summarization.openai_client_adapter import OpenAIClientAdapter
from app.summarization.summarizer import Summarizer


class SummarizerFactory:
    """Creates the configured completion client and summarizer."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> Summarizer:
        """Create a configured summarizer from application settings."""
        provider = settings.ai_provider.lower()
        return Summarizer(
            client=cls.create_client(settings),
            model=cls._resolve_model_name(provider, settings),
            temperature=settings.ai_temperature,
        )

    @classmethod
    def create_client(cls, settings: Settings) -> BaseCompletionClient:
        provider = settings.ai_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            timeout_seconds=settings.ai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.ai_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "ai_openai_compatible_base_url is required for ai_provider=openai_compatible"
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
        raise ValueError(f"Unknown AI provider '{provider}'. Choose from: {supported}")

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.ai_openai_api_key,
            "openai_compatible": settings.ai_openai_compatible_api_key,
            "openrouter": settings.ai_openrouter_api_key,
            "groq": settings.ai_groq_api_key,
            # ollama ignores the key, the SDK still requires one
            "ollama": settings.ai_ollama_api_key or "ollama",
        }
        return key_map.get(provider, "")

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "example": "example",
            "openai": settings.ai_openai_model_name,
            "openai_compatible": settings.ai_openai_compatible_model_name,
            "openrouter": settings.ai_openrouter_model_name,
            "groq": settings.ai_groq_model_name,
            "ollama": settings.ai_ollama_model_name,
        }
        return key_map.get(provider, "")
