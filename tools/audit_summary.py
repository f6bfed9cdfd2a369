"""Summarise logtally audit logs: runs, failures and the lines they skipped.

Each logtally run appends ``run_start`` followed by ``run_complete`` or
``run_failed``; every skipped line adds a ``line_skipped`` record carrying its
line number and reason.
"""

from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict


def summarise(path: Path, top: int = 5) -> Dict[str, Any]:
    levels = Counter()
    events = Counter()
    reasons = Counter()
    skipped_lines = []
    files = Counter()
    if not path.exists():
        return {"missing": True, "levels": levels, "events": events}
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            if not line.strip():
                continue
            record = json.loads(line)
            event = record.get("event", "unknown")
            levels[record.get("level", "INFO")] += 1
            events[event] += 1
            if event == "run_start":
                files[record.get("file", "?")] += 1
            elif event == "line_skipped":
                skipped_lines.append(record.get("line_number"))
                # reasons such as "invalid JSON: Expecting value (column 1)" group by their prefix
                reasons[str(record.get("reason", "")).split(" (column")[0]] += 1
    return {
        "missing": False,
        "levels": levels,
        "events": events,
        "runs": events["run_start"],
        "failed_runs": events["run_failed"],
        "files": files,
        "skipped_lines": skipped_lines,
        "top_reasons": reasons.most_common(top),
    }


if __name__ == "__main__":  # pragma: no cover
    import argparse

    parser = argparse.ArgumentParser(description="Summarise a logtally --audit-log JSONL file")
    parser.add_argument("path", type=Path, help="Audit log written via --audit-log or LOGTALLY_AUDIT_LOG")
    parser.add_argument("--top", type=int, default=5, help="Number of skip reasons to list")
    args = parser.parse_args()
    summary = summarise(args.path, top=args.top)
    print(json.dumps({k: dict(v) if hasattr(v, "items") else v for k, v in summary.items()}, indent=2))
