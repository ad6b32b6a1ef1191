"""Request construction."""

from .request_builder import MISSING_FILE_MESSAGE, MissingFileError, build_request

__all__ = ["MISSING_FILE_MESSAGE", "MissingFileError", "build_request"]
