"""AI-powered document summarizer."""

from pathlib import Path
from typing import ClassVar

from app.logging.logger import Log
from app.processor.models import SUMMARY_STYLES, SummaryOptions
from app.summarization.client_base import BaseCompletionClient
from app.summarization.exceptions import SummarizationError
from app.summarization.prompt_loader import load_prompt_template


class Summarizer:
    """Builds the summary prompt and asks the AI client for a summary."""

    STYLE_INSTRUCTIONS: ClassVar[dict[str, str]] = {
        "concise": "Create a concise, paragraph-style summary",
        "detailed": "Create a detailed summary with key points and context",
        "bullet-points": "Create a summary using bullet points for easy reading",
    }

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        temperature: float = 0.3,
        prompt_template_path: Path | None = None,
        system_prompt: str = "",
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template("summary_prompt.txt", prompt_template_path)

    @property
    def client(self) -> BaseCompletionClient:
        return self._client

    @property
    def model(self) -> str:
        return self._model

    def summarize(self, text: str, options: SummaryOptions) -> str:
        if not text.strip():
            raise SummarizationError("Cannot summarize empty text")
        prompt = self._build_prompt(text, options)
        Log.debug(f"Summary prompt:\n{prompt}")

        summary = self._client.create_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
        )
        Log.info(f"Summary generated: {len(summary.split())} words", style=options.style)
        return summary

    def _build_prompt(self, text: str, options: SummaryOptions) -> str:
        if options.style not in SUMMARY_STYLES:
            raise SummarizationError(
                f"Unknown summary style {options.style!r}. Choose from: {sorted(SUMMARY_STYLES)}"
            )
        return self._prompt_template.format(
            style=options.style,
            language=options.language,
            max_length=options.max_length,
            style_instruction=self.STYLE_INSTRUCTIONS[options.style],
            text=text,
        )
