"""Per-type size summaries for newline-delimited JSON log files."""

from . import extract, reader, render, summarize, tally

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "extract",
    "reader",
    "render",
    "summarize",
    "tally",
]
