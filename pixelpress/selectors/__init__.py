"""File selection utilities."""

from .file_selector import ACCEPTED_IMAGE_EXTENSIONS, FileSelectionError, FileSelector

__all__ = ["ACCEPTED_IMAGE_EXTENSIONS", "FileSelectionError", "FileSelector"]
