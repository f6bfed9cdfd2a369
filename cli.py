"""Command-line entrypoint for logtally."""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import Any, List, Optional

from logtally import __version__
from logtally.extract import DEFAULT_GROUP_KEY
from logtally.reader import LogFileError, resolve_log_path
from logtally.render import FORMATS, render_report
from logtally.summarize import LineIssue, StrictModeError, summarize_file
from logtally.tally import ORDERINGS

AUDIT_ENV_VAR = "LOGTALLY_AUDIT_LOG"


class AuditLogError(RuntimeError):
    """Raised when the audit log cannot be written."""


class AuditLogger:
    """Minimal JSONL audit logger; a logger without a path discards records.

    The path is opened once on construction so an unwritable destination is
    reported before any log file is read.
    """

    def __init__(self, path: Optional[Path]) -> None:
        self.path = path
        if self.path is not None:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8"):
                    pass
            except OSError as exc:
                raise AuditLogError(f"cannot write audit log {self.path}: {exc.strerror or exc}") from exc

    def log(self, level: str = "INFO", **fields: Any) -> None:
        if self.path is None:
            return
        record = {"ts": time.time(), "level": level, **fields}
        try:
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(record, sort_keys=True, ensure_ascii=False) + "\n")
        except OSError as exc:
            raise AuditLogError(f"cannot write audit log {self.path}: {exc.strerror or exc}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logtally",
        description=(
            "Summarise a newline-delimited JSON log file: the byte size of all "
            "lines, grouped by their 'type' field."
        ),
    )
    parser.add_argument("file", type=Path, help="Path to the log file to analyse")
    parser.add_argument("--format", choices=FORMATS, default="table", help="Output format (default: table)")
    parser.add_argument(
        "--sort",
        choices=ORDERINGS,
        default="first-seen",
        help="Row order (default: first-seen)",
    )
    parser.add_argument(
        "--group-key",
        default=DEFAULT_GROUP_KEY,
        help="JSON key used for grouping (default: %(default)s)",
    )
    parser.add_argument("--strict", action="store_true", help="Abort on the first malformed line")
    parser.add_argument("--quiet", action="store_true", help="Do not print per-line warnings")
    parser.add_argument("--verbose", action="store_true", help="Print the resolved path and totals to stderr")
    parser.add_argument(
        "--audit-log",
        type=Path,
        default=None,
        help=f"Append JSONL audit records to this file (env: {AUDIT_ENV_VAR})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _audit_path(namespace: argparse.Namespace) -> Optional[Path]:
    if namespace.audit_log is not None:
        return namespace.audit_log
    env_path = os.getenv(AUDIT_ENV_VAR)
    return Path(env_path) if env_path else None


def _run(namespace: argparse.Namespace) -> int:
    audit = AuditLogger(_audit_path(namespace))
    audit.log(event="run_start", file=str(namespace.file), group_key=namespace.group_key)

    def on_issue(issue: LineIssue) -> None:
        audit.log(level="WARN", event="line_skipped", **issue.as_dict())
        if not namespace.quiet:
            print(f"warning: line {issue.line_number}: {issue.reason}", file=sys.stderr)

    try:
        absolute_path = resolve_log_path(namespace.file)
        if namespace.verbose:
            print(f"Using logfile {absolute_path}", file=sys.stderr)
        audit.log(event="file_opened", path=str(absolute_path))
        report = summarize_file(
            absolute_path,
            group_key=namespace.group_key,
            strict=namespace.strict,
            on_issue=on_issue,
        )
    except LogFileError as exc:
        audit.log(level="ERROR", event="run_failed", message=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except StrictModeError as exc:
        audit.log(level="ERROR", event="run_failed", **exc.issue.as_dict())
        print(f"error: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(render_report(report, namespace.format, namespace.sort))

    if namespace.verbose:
        print(
            f"{len(report.tally)} type(s), {report.tally.total} byte(s) from "
            f"{report.lines_tallied} line(s); {report.skipped} skipped",
            file=sys.stderr,
        )
    audit.log(
        event="run_complete",
        types=len(report.tally),
        total_size=report.tally.total,
        lines_read=report.lines_read,
        skipped=report.skipped,
    )
    return 0


def main(args: Optional[List[str]] = None) -> int:
    namespace = build_parser().parse_args(args=args)
    try:
        return _run(namespace)
    except AuditLogError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
