from app.summarization.client_base import BaseCompletionClient
from app.summarization.factory import SummarizerFactory
from app.summarization.summarizer import Summarizer

__all__ = ["BaseCompletionClient", "Summarizer", "SummarizerFactory"]
