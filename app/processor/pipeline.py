from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from app.processing.models import RemoteDelivery
from app.processor.models import (
    DeliveryResult,
    ProcessedDocument,
    ProcessingProgress,
    SummaryOptions,
    UploadedFile,
)
from app.processor.progress import ProgressPublisher


@dataclass(slots=True)
class PipelineContext:
    batch_id: str
    files: tuple[UploadedFile, ...]
    options: SummaryOptions
    documents: list[ProcessedDocument] = field(default_factory=list)
    remote_deliveries: list[RemoteDelivery] = field(default_factory=list)
    delivery: list[DeliveryResult] | None = None
    error_message: str = ""


class PipelineStep(ABC):
    def __init__(self, progress: ProgressPublisher) -> None:
        self._progress = progress

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError

    def report(
        self,
        context: PipelineContext,
        stage: str,
        progress: float,
        message: str,
        upload: UploadedFile | None = None,
    ) -> None:
        self._progress.publish(
            ProcessingProgress(
                stage=stage,
                progress=progress,
                message=message,
                current_file=upload.name if upload else None,
                batch_id=context.batch_id,
                file_id=upload.id if upload else None,
            )
        )
