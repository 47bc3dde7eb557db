from abc import ABC, abstractmethod


class BaseCompletionClient(ABC):
    """Contract for provider-specific AI text completion clients."""

    @abstractmethod
    def create_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
    ) -> str:
        """Return the provider's answer as plain text."""
