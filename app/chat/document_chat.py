"""Follow-up questions answered from processed document summaries."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from app.chat.exceptions import ChatError
from app.logging.logger import Log
from app.processor.models import ProcessedDocument
from app.summarization.client_base import BaseCompletionClient
from app.summarization.exceptions import SummarizationError
from app.summarization.prompt_loader import load_prompt_template

NO_CONTEXT_ANSWER = (
    "I couldn't find any relevant information in the uploaded documents "
    "to answer your question."
)


@dataclass(frozen=True)
class ChatAnswer:
    answer: str
    sources: int


class DocumentChat:
    """Answers questions using only the supplied summaries as context."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._prompt_template = load_prompt_template("chat_prompt.txt", prompt_template_path)

    def ask(self, question: str, documents: Sequence[ProcessedDocument]) -> ChatAnswer:
        if not question.strip():
            raise ChatError("Question must not be empty")
        sources = [doc for doc in documents if doc.summary.strip()]
        if not sources:
            return ChatAnswer(answer=NO_CONTEXT_ANSWER, sources=0)

        context = "\n\n".join(f"{doc.filename}:\n{doc.summary}" for doc in sources)
        prompt = self._prompt_template.format(context=context, question=question.strip())
        try:
            answer = self._client.create_completion(
                model=self._model,
                temperature=self._temperature,
                system_prompt="You are a helpful assistant for questions about uploaded documents.",
                user_prompt=prompt,
                max_tokens=self._max_tokens,
            )
        except SummarizationError as exc:
            raise ChatError(f"Failed to answer question: {exc}") from exc
        Log.info(f"Answered question from {len(sources)} document(s)")
        return ChatAnswer(answer=answer, sources=len(sources))
