"""Command-line interface for LaMa Eraser."""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from .adapters.ocr.factory import create_ocr_engine
from .application.ports.event_publisher import LoggingEventSubscriber, SimpleEventPublisher
from .application.services.batch_processor import BatchProcessor, collect_images
from .application.services.inpaint_pipeline import InpaintPipeline, select_mask_policy
from .config import (
    DEFAULT_DILATE_PX,
    DEFAULT_TARGET_SIZE,
    UPPER_RIGHT_FRACTION,
    ExecutionProvider,
    MaskPolicy,
    OCREngineType,
)
from .domain.value_objects.config import ProcessingConfig
from .exceptions import LamaEraserError, ModelLoadError
from .infrastructure.model_loader import load_model
from .utils.env import quiet_third_party_loggers, setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="lama-eraser",
        description="Erase corner text and watermarks with an ONNX LaMa inpainting model"
    )

    parser.add_argument("model", type=Path, help="Path to the .onnx model")
    parser.add_argument("inputs", nargs="+", help="Input images or folders")
    parser.add_argument("-o", "--output", required=True, type=Path, help="Output folder")

    parser.add_argument(
        "--mask",
        choices=[p.value for p in MaskPolicy],
        default=MaskPolicy.AUTO.value,
        help="Mask policy; 'auto' decides from the prompt (default: auto)"
    )

    parser.add_argument(
        "-p", "--prompt",
        default="",
        help="Instruction text, e.g. 'remove the numbers in the upper right'"
    )

    parser.add_argument(
        "--rect",
        nargs=2,
        type=float,
        metavar=("W", "H"),
        default=(UPPER_RIGHT_FRACTION.w, UPPER_RIGHT_FRACTION.h),
        help="Rectangle mask size as fractions of width and height (default: %(default)s)"
    )

    # Model settings
    model_group = parser.add_argument_group("Model options")
    model_group.add_argument(
        "--target-size",
        type=int,
        default=DEFAULT_TARGET_SIZE,
        help="Working resolution for models with dynamic input size (default: 512)"
    )
    model_group.add_argument(
        "--bgr",
        action="store_true",
        help="Feed the image to the model in BGR channel order"
    )
    model_group.add_argument(
        "--provider",
        dest="providers",
        action="append",
        choices=[p.value for p in ExecutionProvider],
        help="Execution provider in order of preference; repeatable (default: cpu)"
    )

    # OCR settings
    ocr_group = parser.add_argument_group("OCR options")
    ocr_group.add_argument(
        "--ocr-engine",
        choices=[e.value for e in OCREngineType],
        default=OCREngineType.TESSERACT.value,
        help="OCR backend used by the 'ocr' mask policy (default: tesseract)"
    )
    ocr_group.add_argument(
        "--ocr-lang",
        default="eng",
        help="OCR language, Tesseract style, e.g. 'eng+deu' (default: eng)"
    )
    ocr_group.add_argument(
        "--ocr-zone",
        nargs=4,
        type=float,
        metavar=("X0", "Y0", "X1", "Y1"),
        help="Normalized zone whose words are erased (default: 0.6 0 1 0.4)"
    )
    ocr_group.add_argument(
        "--dilate",
        type=int,
        default=DEFAULT_DILATE_PX,
        metavar="PIXELS",
        help="Grow OCR word boxes by this many pixels (default: 10)"
    )
    ocr_group.add_argument(
        "--tesseract-cmd",
        help="Path to the tesseract binary if it is not on PATH"
    )

    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        help="Stop at the first failed image instead of continuing with the rest"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    return parser


def build_config(parsed: argparse.Namespace) -> ProcessingConfig:
    """Translate parsed arguments into a validated ProcessingConfig."""
    options = dict(
        target_size=parsed.target_size,
        assume_bgr=parsed.bgr,
        execution_providers=parsed.providers or [ExecutionProvider.CPU.value],
        mask_policy=parsed.mask,
        prompt=parsed.prompt,
        rect_width_fraction=parsed.rect[0],
        rect_height_fraction=parsed.rect[1],
        ocr_engine=parsed.ocr_engine,
        ocr_lang=parsed.ocr_lang,
        dilate_px=parsed.dilate,
    )
    if parsed.ocr_zone:
        options["ocr_zone"] = tuple(parsed.ocr_zone)
    return ProcessingConfig(**options)


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Setup logging
    setup_logging(logging.DEBUG if parsed.verbose else logging.INFO)
    quiet_third_party_loggers()
    logger = logging.getLogger(__name__)

    try:
        config = build_config(parsed)
    except PydanticValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 2

    files = collect_images(parsed.inputs)
    missing = [f for f in files if not f.exists()]
    if missing:
        for f in missing:
            logger.error(f"Input not found: {f}")
        return 1
    if not files:
        logger.error("No image files found")
        return 1

    events = SimpleEventPublisher()
    if parsed.verbose:
        events.subscribe(LoggingEventSubscriber())

    try:
        model = load_model(parsed.model, config, events)
    except ModelLoadError as e:
        logger.error(str(e))
        return 1

    policy = config.mask_policy
    if policy is MaskPolicy.AUTO:
        policy = select_mask_policy(config.prompt)
        logger.info(f"Mask policy from prompt: {policy.value}")

    ocr = None
    if policy is MaskPolicy.OCR:
        kwargs = {}
        if config.ocr_engine is OCREngineType.TESSERACT and parsed.tesseract_cmd:
            kwargs["tesseract_cmd"] = parsed.tesseract_cmd
        ocr = create_ocr_engine(config.ocr_engine, lang=config.ocr_lang, **kwargs)

    pipeline = InpaintPipeline(model, config=config, ocr=ocr, events=events)
    processor = BatchProcessor(pipeline, events)

    logger.info(f"Processing {len(files)} image(s)...")

    def progress(current: int, total: int, message: str) -> None:
        logger.info(f"[{current}/{total}] {message}")

    try:
        result = processor.process_files(
            files,
            parsed.output,
            progress_callback=progress,
            stop_on_error=parsed.stop_on_error
        )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except LamaEraserError as e:
        logger.error(str(e))
        return 1
    finally:
        if ocr is not None:
            ocr.unload()

    # Summary
    logger.info("=" * 50)
    failed = [item for item in result.results if not item.success]
    if failed:
        logger.warning(f"Completed: {result.successful}/{result.total} succeeded")
        for item in failed:
            logger.error(f"  - {item.name}: {item.error}")
        if len(result.results) < result.total:
            skipped = result.total - len(result.results)
            logger.error(f"Stopped early; {skipped} image(s) not processed")
        return 1

    logger.info(
        f"Completed: All {result.total} images processed successfully "
        f"in {result.processing_time_ms / 1000:.1f}s"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
