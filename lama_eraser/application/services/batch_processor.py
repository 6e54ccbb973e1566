"""Batch processor for processing multiple images."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Iterator

from ...config import (
    INFER_AVERAGE_DECAY,
    INFER_AVERAGE_SEED_MS,
    MIN_INFER_ESTIMATE_MS,
    OUTPUT_SUFFIX,
    SUPPORTED_IMAGE_EXTENSIONS,
    MaskPolicy,
)
from ...domain.entities.raster import RasterImage
from ...exceptions import (
    GeometryError,
    ImageProcessingError,
    InferenceError,
    OCRError,
    ValidationError,
)
from ..ports.event_publisher import EventPublisher, ProcessingEvent, SimpleEventPublisher, Severity
from .inpaint_pipeline import InpaintPipeline, InpaintResult

logger = logging.getLogger(__name__)

# Per-item failures; anything else (e.g. ModelNotReadyError) stops the batch
ITEM_ERRORS = (InferenceError, ImageProcessingError, GeometryError, ValidationError, OCRError, OSError)


def output_path_for(source: Path, output_dir: Path) -> Path:
    """``photo.jpg`` -> ``<output_dir>/photo.clean.png``."""
    return output_dir / f"{source.stem}{OUTPUT_SUFFIX}"


def collect_images(
    inputs: Iterable[Path | str],
    extensions: tuple[str, ...] = SUPPORTED_IMAGE_EXTENSIONS
) -> list[Path]:
    """Expand files and folders into a sorted list of image files.

    Folders are scanned one level deep. Explicit files are kept whatever
    their extension.
    """
    files: list[Path] = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            files.extend(sorted(
                f for f in path.iterdir()
                if f.is_file() and f.suffix.lower() in extensions
            ))
        else:
            files.append(path)
    return files


@dataclass(frozen=True, slots=True)
class BatchItemResult:
    """Outcome of one batch item; ``error`` is None on success."""
    name: str
    result: InpaintResult | None = None
    error: Exception | None = None
    output_path: Path | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """Result of batch processing."""
    total: int
    successful: int
    failed: int
    processing_time_ms: float
    results: list[BatchItemResult] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        if self.total == 0:
            return 0.0
        return self.successful / self.total


class BatchProcessor:
    """Run an ``InpaintPipeline`` over many images, one at a time.

    Keeps a rolling average of inference time so callers can show an
    estimate of how long the next image will take.
    """

    def __init__(
        self,
        pipeline: InpaintPipeline,
        event_publisher: EventPublisher | None = None
    ):
        self._pipeline = pipeline
        self._events = event_publisher or SimpleEventPublisher()
        self._avg_infer_ms = INFER_AVERAGE_SEED_MS

    @property
    def estimated_inference_ms(self) -> float:
        """Expected inference time for the next image."""
        return max(MIN_INFER_ESTIMATE_MS, self._avg_infer_ms)

    def record_inference(self, infer_ms: float) -> None:
        self._avg_infer_ms = (
            INFER_AVERAGE_DECAY * self._avg_infer_ms
            + (1.0 - INFER_AVERAGE_DECAY) * infer_ms
        )

    def process(
        self,
        items: Iterable[RasterImage],
        policy: MaskPolicy | None = None
    ) -> Iterator[BatchItemResult]:
        """Inpaint ``items`` lazily, yielding one result per image.

        An item that fails with a per-image error is yielded as a failure
        and the batch carries on.
        """
        for index, raster in enumerate(items):
            name = raster.name or f"image_{index}"
            try:
                result = self._pipeline.run(raster, policy=policy)
            except ITEM_ERRORS as e:
                logger.error(f"Failed {name}: {e}")
                self._events.publish(ProcessingEvent(
                    stage="item_failed",
                    message=f"Failed {name}: {e}",
                    severity=Severity.ERROR,
                    image_name=name
                ))
                yield BatchItemResult(name=name, error=e)
                continue
            self.record_inference(result.timings.infer)
            yield BatchItemResult(name=name, result=result)

    def _process_file(self, file_path: Path, policy: MaskPolicy | None) -> BatchItemResult:
        try:
            raster = RasterImage.from_file(file_path)
        except ImageProcessingError as e:
            logger.error(f"Cannot load {file_path.name}: {e}")
            return BatchItemResult(name=file_path.name, error=e)
        return next(self.process([raster], policy=policy))

    def process_files(
        self,
        files: list[Path],
        output_dir: Path,
        policy: MaskPolicy | None = None,
        progress_callback: Callable[[int, int, str], None] | None = None,
        stop_on_error: bool = False
    ) -> BatchResult:
        """Process multiple files, writing ``<stem>.clean.png`` for each.

        Args:
            files: List of image files to process
            output_dir: Directory to save results
            policy: Mask policy; defaults to the pipeline's configured one
            progress_callback: Optional callback(current, total, message)
            stop_on_error: Stop at the first failed item

        Returns:
            Batch processing result
        """
        start_time = time.perf_counter()
        results: list[BatchItemResult] = []
        successful = 0
        failed = 0
        total = len(files)

        output_dir.mkdir(parents=True, exist_ok=True)

        self._events.publish(ProcessingEvent(
            stage="batch_start",
            message=f"Starting batch of {total} files",
            progress=0.0
        ))

        for i, file_path in enumerate(files, 1):
            if progress_callback:
                progress_callback(
                    i, total,
                    f"Processing {file_path.name} (~{self.estimated_inference_ms:.0f}ms)"
                )
            self._events.publish(ProcessingEvent(
                stage="processing",
                message=f"Processing {file_path.name}",
                progress=(i - 1) / total,
                image_name=file_path.name,
                fields={"estimate_ms": round(self.estimated_inference_ms)}
            ))

            item = self._process_file(file_path, policy)

            if item.success:
                target = output_path_for(file_path, output_dir)
                try:
                    item.result.image.save(target)
                except ImageProcessingError as e:
                    logger.error(f"Cannot save {target.name}: {e}")
                    item = BatchItemResult(name=item.name, result=item.result, error=e)
                else:
                    item = BatchItemResult(name=item.name, result=item.result, output_path=target)
                    logger.info(f"Saved {target}")

            results.append(item)
            if item.success:
                successful += 1
            else:
                failed += 1
                if stop_on_error:
                    break

        elapsed = (time.perf_counter() - start_time) * 1000

        self._events.publish(ProcessingEvent(
            stage="batch_complete",
            message=f"Batch complete: {successful}/{total} succeeded",
            progress=1.0
        ))

        return BatchResult(
            total=total,
            successful=successful,
            failed=failed,
            processing_time_ms=elapsed,
            results=results
        )

    def process_directory(
        self,
        input_dir: Path,
        output_dir: Path,
        extensions: tuple[str, ...] = SUPPORTED_IMAGE_EXTENSIONS,
        **kwargs
    ) -> BatchResult:
        """Process all images in directory.

        Args:
            input_dir: Input directory
            output_dir: Output directory
            extensions: File extensions to process
            **kwargs: Additional args for process_files

        Returns:
            Batch processing result
        """
        return self.process_files(collect_images([input_dir], extensions), output_dir, **kwargs)

    def subscribe_to_events(self, callback: Callable[[ProcessingEvent], None]) -> None:
        """Subscribe to processing events."""
        self._events.subscribe(callback)
