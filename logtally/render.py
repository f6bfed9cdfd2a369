"""Output rendering for per-type size summaries."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Iterable, List

from jinja2 import Environment, FileSystemLoader

from .summarize import SummaryReport
from .tally import TallyRow

TYPE_HEADER = "Type"
SIZE_HEADER = "Size"
DELIMITER = " | "
FORMATS = ("table", "json", "csv", "markdown")

_TEMPLATE_DIR = Path(__file__).parent / "report_templates"


def render_table(rows: Iterable[TallyRow]) -> str:
    """Render rows as the pipe-separated ``Type | Size`` table.

    The type column is padded to its widest entry. The separator spans the
    full table width, i.e. both columns plus the delimiter.
    """

    rows = list(rows)
    sizes = [str(row.size) for row in rows]
    type_width = max([len(TYPE_HEADER)] + [len(row.type) for row in rows])
    size_width = max([len(SIZE_HEADER)] + [len(size) for size in sizes])

    lines: List[str] = [
        TYPE_HEADER.ljust(type_width) + DELIMITER + SIZE_HEADER,
        "-" * (type_width + len(DELIMITER) + size_width),
    ]
    for row, size in zip(rows, sizes):
        lines.append(row.type.ljust(type_width) + DELIMITER + size)
    return "\n".join(lines) + "\n"


def render_json(report: SummaryReport, order: str = "first-seen") -> str:
    return report.to_json(order) + "\n"


def render_csv(report: SummaryReport, order: str = "first-seen") -> str:
    buffer = io.StringIO()
    report.tally.to_frame(order).to_csv(buffer, index=False, lineterminator="\n")
    return buffer.getvalue()


def render_markdown(report: SummaryReport, order: str = "first-seen") -> str:
    env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), keep_trailing_newline=True)
    template = env.get_template("summary.md.j2")
    return template.render(report=report, rows=report.tally.ordered(order))


def render_report(report: SummaryReport, fmt: str = "table", order: str = "first-seen") -> str:
    """Render ``report`` in one of ``FORMATS``."""

    if fmt == "table":
        return render_table(report.tally.ordered(order))
    if fmt == "json":
        return render_json(report, order)
    if fmt == "csv":
        return render_csv(report, order)
    if fmt == "markdown":
        return render_markdown(report, order)
    raise ValueError(f"Unsupported output format: {fmt}")


__all__ = [
    "FORMATS",
    "render_csv",
    "render_json",
    "render_markdown",
    "render_report",
    "render_table",
]
