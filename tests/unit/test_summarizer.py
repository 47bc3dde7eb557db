from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from app.config.settings import Settings
from app.processor.models import SummaryOptions
from app.summarization.client_base import BaseCompletionClient
from app.summarization.example_client_adapter import ExampleClientAdapter
from app.summarization.exceptions import SummarizationError
from app.summarization.factory import SummarizerFactory
from app.summarization.openai_client_adapter import OpenAIClientAdapter
from app.summarization.prompt_loader import load_prompt_template
from app.summarization.summarizer import Summarizer


def _make_summarizer(reply: str = "A short summary.") -> tuple[Summarizer, MagicMock]:
    client = MagicMock(spec=BaseCompletionClient)
    client.create_completion.return_value = reply
    return Summarizer(client=client, model="m", temperature=0.2), client


class TestSummarizer:
    def test_returns_client_answer(self) -> None:
        summarizer, _client = _make_summarizer()
        assert summarizer.summarize("Some document text", SummaryOptions()) == "A short summary."

    def test_prompt_carries_options_and_text(self) -> None:
        summarizer, client = _make_summarizer()
        options = SummaryOptions(style="bullet-points", language="German", max_length=120)

        summarizer.summarize("Quarterly revenue grew", options)

        kwargs = client.create_completion.call_args.kwargs
        prompt = kwargs["user_prompt"]
        assert "bullet-points summary in German" in prompt
        assert "Maximum length: 120 words" in prompt
        assert "Create a summary using bullet points" in prompt
        assert "Quarterly revenue grew" in prompt
        assert kwargs["model"] == "m"
        assert kwargs["temperature"] == 0.2

    def test_empty_text_raises(self) -> None:
        summarizer, client = _make_summarizer()
        with pytest.raises(SummarizationError, match="empty text"):
            summarizer.summarize("   ", SummaryOptions())
        client.create_completion.assert_not_called()

    def test_unknown_style_raises(self) -> None:
        summarizer, _client = _make_summarizer()
        with pytest.raises(SummarizationError, match="Unknown summary style"):
            summarizer.summarize("text", SummaryOptions(style="haiku"))

    def test_temperature_is_clamped(self) -> None:
        client = MagicMock(spec=BaseCompletionClient)
        client.create_completion.return_value = "ok"
        Summarizer(client=client, model="m", temperature=3.0).summarize("t", SummaryOptions())
        assert client.create_completion.call_args.kwargs["temperature"] == 1.0


class TestExampleClientAdapter:
    def test_keeps_first_words_of_document_text(self) -> None:
        summarizer = Summarizer(client=ExampleClientAdapter(word_limit=3), model="example")
        summary = summarizer.summarize("one two three four five", SummaryOptions())
        assert summary == "one two three ..."

    def test_short_text_is_returned_whole(self) -> None:
        summarizer = Summarizer(client=ExampleClientAdapter(), model="example")
        assert summarizer.summarize("just this", SummaryOptions()) == "just this"


class TestLoadPromptTemplate:
    def test_loads_summary_template(self) -> None:
        template = load_prompt_template("summary_prompt.txt")
        assert "{text}" in template
        assert "{style_instruction}" in template

    def test_loads_chat_template(self) -> None:
        template = load_prompt_template("chat_prompt.txt")
        assert "{context}" in template
        assert "{question}" in template

    def test_loads_custom_template(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("Hello {text}")
        assert load_prompt_template("ignored.txt", custom) == "Hello {text}"

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(SummarizationError, match="Failed to load prompt"):
            load_prompt_template("x.txt", Path("/nonexistent/file.txt"))


class TestSummarizerFactory:
    def test_example_provider(self) -> None:
        summarizer = SummarizerFactory.create(Settings(ai_provider="example"))
        assert isinstance(summarizer.client, ExampleClientAdapter)
        assert summarizer.model == "example"

    def test_openai_provider(self) -> None:
        settings = Settings(
            ai_provider="openai", ai_openai_api_key="sk", ai_openai_model_name="gpt-x"
        )
        with patch("app.summarization.openai_client_adapter.openai.OpenAI") as mock_openai:
            summarizer = SummarizerFactory.create(settings)
        assert isinstance(summarizer.client, OpenAIClientAdapter)
        assert summarizer.model == "gpt-x"
        assert mock_openai.call_args.kwargs["base_url"] is None
        assert mock_openai.call_args.kwargs["api_key"] == "sk"

    @pytest.mark.parametrize(
        ("provider", "base_url"),
        [
            ("openrouter", "https://openrouter.ai/api/v1"),
            ("groq", "https://api.groq.com/openai/v1"),
            ("ollama", "http://localhost:11434/v1"),
        ],
    )
    def test_openai_compatible_hosts(self, provider: str, base_url: str) -> None:
        with patch("app.summarization.openai_client_adapter.openai.OpenAI") as mock_openai:
            SummarizerFactory.create_client(Settings(ai_provider=provider))
        assert mock_openai.call_args.kwargs["base_url"] == base_url

    def test_ollama_gets_placeholder_key(self) -> None:
        with patch("app.summarization.openai_client_adapter.openai.OpenAI") as mock_openai:
            SummarizerFactory.create_client(Settings(ai_provider="ollama"))
        assert mock_openai.call_args.kwargs["api_key"] == "ollama"

    def test_openai_compatible_requires_base_url(self) -> None:
        with pytest.raises(ValueError, match="ai_openai_compatible_base_url is required"):
            SummarizerFactory.create_client(Settings(ai_provider="openai_compatible"))

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown AI provider"):
            SummarizerFactory.create_client(Settings(ai_provider="mystery"))
