"""Offline completion client.

Selected with AI_PROVIDER=example. Returns a deterministic extract of the prompt's
document text so the whole pipeline runs without provider credentials.
"""

from app.summarization.client_base import BaseCompletionClient

_DOCUMENT_MARKER = "Document text:"


class ExampleClientAdapter(BaseCompletionClient):
    """Summarizes by keeping the first words of the document text."""

    def __init__(self, word_limit: int = 60) -> None:
        self._word_limit = word_limit

    def create_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
    ) -> str:
        _ = model, temperature, system_prompt, max_tokens
        body = user_prompt.split(_DOCUMENT_MARKER, 1)[-1]
        words = body.split()
        if words and words[-1] == "Summary:":
            words = words[:-1]
        excerpt = " ".join(words[: self._word_limit])
        if len(words) > self._word_limit:
            excerpt += " ..."
        return excerpt
