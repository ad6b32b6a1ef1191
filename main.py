#!/usr/bin/env python3
"""
Image Service Client

A command-line tool that sends a PNG or JPEG image to the image processing
service to compress, convert, resize, flip or rotate it, then saves the result
and reports the size change.

Usage:
    uv run main.py compress photo.jpg --quality 60
    uv run main.py convert photo.png --format jpeg
"""

from __future__ import annotations

import argparse
import sys
import webbrowser
from pathlib import Path

from rich.console import Console

from pixelpress.config import ConfigError, ServiceConfig, load_config
from pixelpress.models.parameters import (
    DEFAULT_QUALITY,
    DEFAULT_TARGET_FORMAT,
    MAX_QUALITY,
    MIN_QUALITY,
    SUPPORTED_FLIP_DIRECTIONS,
    SUPPORTED_ROTATION_ANGLES,
    SUPPORTED_TARGET_FORMATS,
    CompressParameters,
    ConvertParameters,
    FlipParameters,
    ResizeParameters,
    RotateParameters,
    WorkflowParameters,
)
from pixelpress.models.state import Phase
from pixelpress.processors.workflow import Workflow, create_workflow
from pixelpress.progress.tracker import ProgressTracker, configure_logging
from pixelpress.selectors.file_selector import FileSelectionError, FileSelector
from pixelpress.uploaders.image_service import TransferInFlightError, check_connection

# Initialize Rich console for output
console = Console()


def _quality(value: str) -> int:
    try:
        quality = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"quality must be an integer, got '{value}'") from e
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise argparse.ArgumentTypeError(
            f"quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
        )
    return quality


def _dimension(value: str) -> int:
    try:
        dimension = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"dimension must be an integer, got '{value}'") from e
    if dimension < 0:
        raise argparse.ArgumentTypeError(f"dimension must not be negative, got {dimension}")
    return dimension


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Compress, convert, resize, flip or rotate an image with the image processing service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  uv run main.py compress photo.jpg --quality 60   # Compress to JPEG quality 60
  uv run main.py convert photo.png --format jpeg   # Re-encode as JPEG
  uv run main.py resize photo.jpg --width 800      # Resize keeping the aspect ratio
  uv run main.py rotate photo.jpg --angle 180      # Rotate by a right angle
  uv run main.py --test                            # Test service connection only
        """,
    )

    _ = parser.add_argument(
        "--service-url",
        help="Base URL of the image service (default: PIXELPRESS_SERVICE_URL or http://localhost:8080)",
    )
    _ = parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for downloaded results (default: PIXELPRESS_OUTPUT_DIR or output)",
    )
    _ = parser.add_argument(
        "--open",
        action="store_true",
        help="Open the result in the system viewer after saving",
    )
    _ = parser.add_argument(
        "--test",
        action="store_true",
        help="Test the service connection and exit",
    )
    _ = parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output for debugging",
    )

    subparsers = parser.add_subparsers(dest="workflow")

    compress = subparsers.add_parser("compress", help="Compress an image to a JPEG quality level")
    _ = compress.add_argument("file", nargs="?", type=Path, help="PNG or JPEG image")
    _ = compress.add_argument(
        "--quality",
        "-q",
        type=_quality,
        default=DEFAULT_QUALITY,
        help=f"JPEG quality {MIN_QUALITY}-{MAX_QUALITY} (default: {DEFAULT_QUALITY})",
    )

    convert = subparsers.add_parser("convert", help="Convert an image to another format")
    _ = convert.add_argument("file", nargs="?", type=Path, help="PNG or JPEG image")
    _ = convert.add_argument(
        "--format",
        "-f",
        dest="target_format",
        choices=SUPPORTED_TARGET_FORMATS,
        default=DEFAULT_TARGET_FORMAT,
        help=f"Target format (default: {DEFAULT_TARGET_FORMAT})",
    )

    resize = subparsers.add_parser("resize", help="Resize an image")
    _ = resize.add_argument("file", nargs="?", type=Path, help="PNG or JPEG image")
    _ = resize.add_argument("--width", type=_dimension, default=0, help="Target width in pixels")
    _ = resize.add_argument("--height", type=_dimension, default=0, help="Target height in pixels")

    flip = subparsers.add_parser("flip", help="Mirror an image")
    _ = flip.add_argument("file", nargs="?", type=Path, help="PNG or JPEG image")
    _ = flip.add_argument(
        "--direction",
        "-d",
        choices=SUPPORTED_FLIP_DIRECTIONS,
        default="horizontal",
        help="Mirror axis (default: horizontal)",
    )

    rotate = subparsers.add_parser("rotate", help="Rotate an image by a right angle")
    _ = rotate.add_argument("file", nargs="?", type=Path, help="PNG or JPEG image")
    _ = rotate.add_argument(
        "--angle",
        "-a",
        type=int,
        choices=SUPPORTED_ROTATION_ANGLES,
        default=90,
        help="Rotation in degrees (default: 90)",
    )

    args = parser.parse_args(argv)
    if not args.test and args.workflow is None:
        parser.error("a workflow is required: compress, convert, resize, flip or rotate")
    return args


def build_parameters(args: argparse.Namespace) -> WorkflowParameters:
    """Build workflow parameters from parsed arguments."""
    if args.workflow == "compress":
        return CompressParameters(quality=args.quality)
    if args.workflow == "convert":
        return ConvertParameters(target_format=args.target_format)
    if args.workflow == "flip":
        return FlipParameters(direction=args.direction)
    if args.workflow == "rotate":
        return RotateParameters(angle=args.angle)
    return ResizeParameters(width=args.width, height=args.height)


def run_workflow(
    workflow: Workflow,
    file: Path | None,
    parameters: WorkflowParameters,
    config: ServiceConfig,
    tracker: ProgressTracker,
    open_result: bool = False,
) -> bool:
    """Select, submit and save one image.

    Args:
        workflow: The workflow instance to drive
        file: Image path, or None to prompt for one
        parameters: Parameters for the submission
        config: Service configuration
        tracker: Console feedback
        open_result: Open the saved result in the system viewer

    Returns:
        True if the workflow succeeded
    """
    try:
        if file is None:
            selected = workflow.selector.prompt_for_file()
            if selected is None:
                tracker.display_warning("No file selected.")
                return False
            workflow.apply_selection(selected)
        else:
            workflow.select_file(file)
    except FileSelectionError as e:
        tracker.display_error(str(e))
        return False

    workflow.update_parameters(parameters)
    selected_file = workflow.state.selected_file
    if selected_file is not None:
        tracker.display_info(f"{workflow.definition.submit_label}: {selected_file.name}")

    total = selected_file.byte_size if selected_file is not None else 0
    with tracker.track_transfer(workflow.definition.busy_caption, total) as progress:
        state = workflow.submit(progress_callback=progress.update)

    if state.phase is not Phase.SUCCEEDED or state.result is None:
        tracker.display_error(state.error or workflow.definition.failure_fallback)
        return False

    tracker.display_result(state.result)

    try:
        saved = state.result.save(config.output_dir)
    except OSError as e:
        tracker.display_error(f"Could not save result to {config.output_dir}", e)
        return False
    tracker.display_success(f"Saved {saved}")

    if open_result and not webbrowser.open(saved.resolve().as_uri()):
        tracker.display_warning("Could not open a viewer for the result.")
    return True


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the image service client."""
    args = parse_arguments(argv)

    verbose_mode: bool = getattr(args, "verbose", False)
    configure_logging(console, verbose_mode)
    tracker = ProgressTracker(console)

    try:
        config = load_config(
            base_url=getattr(args, "service_url", None),
            output_dir=getattr(args, "output_dir", None),
        )
    except ConfigError as e:
        tracker.display_error(str(e))
        sys.exit(1)

    if verbose_mode:
        console.print(f"[dim]Service: {config.base_url}[/dim]")

    test_mode: bool = getattr(args, "test", False)
    if test_mode:
        console.print("[blue]Testing service connection...[/blue]")
        if check_connection(config.base_url):
            console.print(f"[green]✓ Service reachable at {config.base_url}[/green]")
            sys.exit(0)
        console.print(f"[red]✗ Could not reach service at {config.base_url}[/red]")
        sys.exit(1)

    workflow = create_workflow(args.workflow, config, selector=FileSelector(console))
    try:
        with workflow:
            succeeded = run_workflow(
                workflow,
                getattr(args, "file", None),
                build_parameters(args),
                config,
                tracker,
                open_result=getattr(args, "open", False),
            )
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/yellow]")
        sys.exit(1)
    except TransferInFlightError as e:
        tracker.display_error(str(e))
        sys.exit(1)

    sys.exit(0 if succeeded else 1)


if __name__ == "__main__":
    main()
