"""Result rendering."""

from .result_renderer import (
    DisplayableResult,
    EphemeralResource,
    ResultRenderer,
    SizeMetrics,
    format_bytes,
)

__all__ = [
    "DisplayableResult",
    "EphemeralResource",
    "ResultRenderer",
    "SizeMetrics",
    "format_bytes",
]
