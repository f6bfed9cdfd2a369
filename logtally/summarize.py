"""Single-pass summarisation of a log file into a per-type size tally."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from .extract import DEFAULT_GROUP_KEY, MalformedLine, extract_type
from .reader import LogLine, PathLike, iter_log_lines
from .tally import TypeTally

EXCERPT_LIMIT = 80


class StrictModeError(RuntimeError):
    """Raised in strict mode when the first malformed line is met."""

    def __init__(self, issue: "LineIssue") -> None:
        super().__init__(f"line {issue.line_number}: {issue.reason}")
        self.issue = issue


@dataclass
class LineIssue:
    """A malformed line that was left out of the tally."""

    line_number: int
    reason: str
    excerpt: str = ""

    def as_dict(self) -> Dict[str, Any]:
        return {
            "line_number": self.line_number,
            "reason": self.reason,
            "excerpt": self.excerpt,
        }


@dataclass
class SummaryReport:
    """Outcome of one summarisation run."""

    path: Path
    group_key: str = DEFAULT_GROUP_KEY
    tally: TypeTally = field(default_factory=TypeTally)
    issues: List[LineIssue] = field(default_factory=list)
    lines_read: int = 0
    blank_lines: int = 0

    @property
    def lines_tallied(self) -> int:
        return self.tally.total_lines

    @property
    def skipped(self) -> int:
        return len(self.issues)

    def to_dict(self, order: str = "first-seen") -> Dict[str, Any]:
        return {
            "path": str(self.path),
            "group_key": self.group_key,
            "types": [row.as_dict() for row in self.tally.ordered(order)],
            "total_size": self.tally.total,
            "lines_read": self.lines_read,
            "lines_tallied": self.lines_tallied,
            "blank_lines": self.blank_lines,
            "skipped": self.skipped,
            "issues": [issue.as_dict() for issue in self.issues],
        }

    def to_json(self, order: str = "first-seen", indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(order), indent=indent, ensure_ascii=False)


def _excerpt(line: LogLine) -> str:
    text = line.raw.decode("utf-8", errors="replace")
    if len(text) > EXCERPT_LIMIT:
        return text[: EXCERPT_LIMIT - 3] + "..."
    return text


def summarize_lines(
    lines: Iterable[LogLine],
    report: SummaryReport,
    *,
    strict: bool = False,
    on_issue: Optional[Callable[[LineIssue], None]] = None,
) -> SummaryReport:
    """Feed ``LogLine`` records into ``report`` one at a time."""

    for line in lines:
        report.lines_read += 1
        if line.is_blank:
            report.blank_lines += 1
            continue
        try:
            type_name = extract_type(line.raw, report.group_key)
        except MalformedLine as exc:
            issue = LineIssue(line_number=line.number, reason=exc.reason, excerpt=_excerpt(line))
            if strict:
                raise StrictModeError(issue) from exc
            report.issues.append(issue)
            if on_issue is not None:
                on_issue(issue)
            continue
        report.tally.add(type_name, line.size)
    return report


def summarize_file(
    path: PathLike,
    *,
    group_key: str = DEFAULT_GROUP_KEY,
    strict: bool = False,
    on_issue: Optional[Callable[[LineIssue], None]] = None,
) -> SummaryReport:
    """Read ``path`` once and tally the byte size of each line by its group key.

    Malformed lines are skipped and reported through ``on_issue``; with
    ``strict`` the first one raises ``StrictModeError`` instead. File-level
    failures propagate as ``LogFileError``.
    """

    report = SummaryReport(path=Path(path), group_key=group_key)
    lines = iter_log_lines(path)
    try:
        return summarize_lines(lines, report, strict=strict, on_issue=on_issue)
    finally:
        lines.close()


__all__ = [
    "LineIssue",
    "StrictModeError",
    "SummaryReport",
    "summarize_file",
    "summarize_lines",
]
