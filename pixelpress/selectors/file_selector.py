"""File selection for the image workflows."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from pixelpress.models.file import SelectedFile

# Picker filter: PNG and JPEG only
ACCEPTED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg"}


class FileSelectionError(ValueError):
    """Raised when a path does not pass the picker filter."""


class FileSelector:
    """Turns a user-chosen path into a SelectedFile."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def select(self, path: Path | None) -> SelectedFile | None:
        """
        Capture a file and its metadata.

        Args:
            path: Chosen path, or None when the user cancelled

        Returns:
            SelectedFile, or None when nothing was chosen

        Raises:
            FileSelectionError: If the path is missing, not a file, or not a PNG/JPEG
        """
        if path is None:
            return None

        if path.suffix.lower() not in ACCEPTED_IMAGE_EXTENSIONS:
            raise FileSelectionError(
                f"Unsupported file type '{path.suffix or path.name}'. Select a PNG or JPEG image."
            )

        if not path.exists() or not path.is_file():
            raise FileSelectionError(f"File does not exist or is not a file: {path}")

        try:
            byte_size = path.stat().st_size
        except OSError as e:
            raise FileSelectionError(f"Failed to get size of {path}: {e}") from e

        return SelectedFile(name=path.name, byte_size=byte_size, path=path)

    def prompt_for_file(self) -> SelectedFile | None:
        """Ask for a path on the console. An empty answer cancels."""
        answer = self.console.input(
            "[bold]Enter path to a PNG or JPEG image (or press Enter to cancel): [/bold]"
        ).strip()
        if not answer:
            return None
        return self.select(Path(answer).expanduser())
