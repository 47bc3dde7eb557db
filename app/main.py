import argparse
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from app.chat.document_chat import DocumentChat
from app.chat.exceptions import ChatError
from app.config.settings import Settings
from app.database.connection import close_pool, init_pool
from app.database.repositories.document_records_repository import DocumentRecordsRepository
from app.logging.logger import Log
from app.notifications.notifier import LogNotifier
from app.processor.models import SUMMARY_STYLES, SummaryOptions, UploadedFile
from app.processor.processor import DocumentSummaryService, build_service
from app.session.factory import SessionBackendFactory
from app.session.store import SessionStore
from app.state.processing_state import ProcessingState
from app.summarization.factory import SummarizerFactory


@dataclass
class App:
    settings: Settings
    service: DocumentSummaryService
    state: ProcessingState
    records_repo: DocumentRecordsRepository


def build_app(settings: Settings) -> App:
    """Wire every collaborator from settings. The record-store pool must be initialized."""
    for problem in settings.configuration_errors():
        Log.warning(f"Configuration: {problem}")

    records_repo = DocumentRecordsRepository(settings.file_retention_hours)
    summarizer = SummarizerFactory.create(settings)
    service = build_service(settings, summarizer, records_repo=records_repo)

    chat = None
    if settings.is_feature_enabled("ai_processing"):
        chat = DocumentChat(client=summarizer.client, model=summarizer.model)

    state = ProcessingState(
        service,
        SessionStore(SessionBackendFactory.create(settings)),
        LogNotifier(),
        chat=chat,
        summary_documents_enabled=settings.is_feature_enabled("pdf_generation"),
    )
    return App(settings=settings, service=service, state=state, records_repo=records_repo)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docsummary", description="Summarize documents.")
    commands = parser.add_subparsers(dest="command", required=True)

    process = commands.add_parser("process", help="summarize PDF, DOCX or TXT files")
    process.add_argument("files", nargs="+", type=Path)
    process.add_argument("--style", choices=sorted(SUMMARY_STYLES), default="concise")
    process.add_argument("--language", default="English")
    process.add_argument("--max-length", type=int, default=500)
    process.add_argument("--phone", help="send the summaries to this WhatsApp number")
    process.add_argument("--output-dir", type=Path, help="write <name>_summary.txt reports here")

    commands.add_parser("stats", help="show record-store statistics")
    commands.add_parser("check", help="check the processing and delivery collaborators")
    commands.add_parser("cleanup", help="delete records older than the retention window")

    ask = commands.add_parser("ask", help="ask a question about processed documents")
    ask.add_argument("question")
    return parser


def _run_process(app: App, args: argparse.Namespace) -> int:
    uploads = [UploadedFile.from_path(path) for path in args.files]
    options = SummaryOptions(
        style=args.style,
        language=args.language,
        max_length=args.max_length,
    )
    if args.phone:
        result = app.state.process_and_send(uploads, args.phone, options)
    else:
        result = app.state.add_files(uploads, options)
    if result is None or not result.success:
        return 1

    for document in result.documents:
        print(f"== {document.filename} ({document.word_count} words)")
        print(document.summary)
        print()
    if args.output_dir is not None:
        batch_ids = {upload.id for upload in uploads}
        for processing_file in app.state.files:
            if processing_file.id in batch_ids and processing_file.status == "completed":
                app.state.generate_summary_document(processing_file.id, args.output_dir)
    return 0


def _run_stats(app: App) -> int:
    stats = app.state.get_processing_stats()
    print(f"Documents:       {stats.total_documents}")
    print(f"Summaries:       {stats.total_summaries}")
    print(f"Avg time (ms):   {stats.avg_processing_time:.0f}")
    print(f"Success rate:    {stats.success_rate:.0f}%")
    return 0


def _run_check(app: App) -> int:
    processing = app.service.test_processing_connection()
    print(f"Processing: {'ok' if processing.success else processing.error}")
    delivery = app.state.test_delivery_connection()
    print(f"Delivery:   {'ok' if delivery.success else delivery.error}")
    return 0 if processing.success else 1


def _run_cleanup(app: App) -> int:
    if not app.settings.is_feature_enabled("file_cleanup"):
        Log.warning("File cleanup is disabled")
        return 1
    deleted = app.records_repo.delete_expired()
    print(f"Deleted {deleted} expired record(s)")
    return 0


def _run_ask(app: App, args: argparse.Namespace) -> int:
    try:
        answer = app.state.ask(args.question)
    except ChatError as exc:
        Log.error(f"Chat failed: {exc}")
        return 1
    print(answer.answer)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: initialize pool -> build dependencies -> run one command."""
    args = _build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        app = build_app(settings)
        try:
            if args.command == "process":
                return _run_process(app, args)
            if args.command == "stats":
                return _run_stats(app)
            if args.command == "check":
                return _run_check(app)
            if args.command == "cleanup":
                return _run_cleanup(app)
            return _run_ask(app, args)
        finally:
            app.state.close()
            app.service.close()
    finally:
        close_pool()


if __name__ == "__main__":
    raise SystemExit(main())
