"""Streaming line reader for newline-delimited JSON log files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Union

PathLike = Union[str, Path]


class LogFileError(RuntimeError):
    """Raised when the log file as a whole cannot be processed."""

    def __init__(self, path: PathLike, message: str) -> None:
        super().__init__(message)
        self.path = Path(path)


class LogFileNotFound(LogFileError):
    """Raised when the log file does not exist."""


class LogFileUnreadable(LogFileError):
    """Raised when the log file exists but cannot be opened or read."""


@dataclass(frozen=True)
class LogLine:
    """One physical line of the log file, terminator stripped."""

    number: int
    raw: bytes

    @property
    def size(self) -> int:
        return len(self.raw)

    @property
    def is_blank(self) -> bool:
        return not self.raw.strip()


def _strip_terminator(chunk: bytes) -> bytes:
    if chunk.endswith(b"\r\n"):
        return chunk[:-2]
    if chunk.endswith(b"\n"):
        return chunk[:-1]
    return chunk


def resolve_log_path(path: PathLike) -> Path:
    """Return the absolute path of an existing log file."""

    candidate = Path(path)
    if not candidate.exists():
        raise LogFileNotFound(candidate, f"Log file not found: {candidate}")
    return candidate.resolve()


def open_log_file(path: PathLike) -> BinaryIO:
    """Open the log file for binary reading, mapping OS errors to ``LogFileError``."""

    candidate = Path(path)
    if not candidate.exists():
        raise LogFileNotFound(candidate, f"Log file not found: {candidate}")
    if candidate.is_dir():
        raise LogFileUnreadable(candidate, f"Log file is a directory: {candidate}")
    try:
        return candidate.open("rb")
    except FileNotFoundError as exc:
        raise LogFileNotFound(candidate, f"Log file not found: {candidate}") from exc
    except OSError as exc:
        raise LogFileUnreadable(candidate, f"Could not open log file {candidate}: {exc.strerror or exc}") from exc


def read_lines(fh: BinaryIO, path: PathLike = "<stream>") -> Iterator[LogLine]:
    """Yield ``LogLine`` records from an already opened binary handle."""

    number = 0
    while True:
        try:
            chunk = fh.readline()
        except OSError as exc:
            raise LogFileUnreadable(path, f"Could not read log file {path}: {exc.strerror or exc}") from exc
        if not chunk:
            return
        number += 1
        yield LogLine(number=number, raw=_strip_terminator(chunk))


def iter_log_lines(path: PathLike) -> Iterator[LogLine]:
    """Stream the lines of ``path`` lazily.

    The file is opened before the first record is requested, so a missing or
    unreadable file surfaces as soon as the generator is advanced. The handle
    is closed when the generator is exhausted, closed, or abandoned through an
    exception.
    """

    with open_log_file(path) as fh:
        yield from read_lines(fh, path)


__all__ = [
    "LogFileError",
    "LogFileNotFound",
    "LogFileUnreadable",
    "LogLine",
    "iter_log_lines",
    "open_log_file",
    "read_lines",
    "resolve_log_path",
]
