import json
from pathlib import Path

from tools.audit_summary import summarise


def _write_records(path: Path, records) -> None:
    path.write_text("\n".join(json.dumps(r) for r in records) + "\n", encoding="utf-8")


def test_summarise_counts_runs_and_skipped_lines(tmp_path: Path) -> None:
    path = tmp_path / "audit.jsonl"
    _write_records(
        path,
        [
            {"level": "INFO", "event": "run_start", "file": "app.log"},
            {"level": "WARN", "event": "line_skipped", "line_number": 4, "reason": "invalid JSON: Expecting value (column 1)"},
            {"level": "WARN", "event": "line_skipped", "line_number": 9, "reason": "invalid JSON: Expecting value (column 7)"},
            {"level": "INFO", "event": "run_complete"},
            {"level": "INFO", "event": "run_start", "file": "missing.log"},
            {"level": "ERROR", "event": "run_failed", "message": "Log file not found: missing.log"},
        ],
    )

    summary = summarise(path)
    assert summary["levels"] == {"INFO": 3, "WARN": 2, "ERROR": 1}
    assert summary["runs"] == 2
    assert summary["failed_runs"] == 1
    assert summary["files"] == {"app.log": 1, "missing.log": 1}
    assert summary["skipped_lines"] == [4, 9]
    assert summary["top_reasons"] == [("invalid JSON: Expecting value", 2)]
    assert not summary["missing"]


def test_summarise_reads_cli_audit_log(tmp_path: Path, monkeypatch, capsys) -> None:
    import cli

    monkeypatch.delenv(cli.AUDIT_ENV_VAR, raising=False)
    log = tmp_path / "app.log"
    log.write_text('{"type": "A"}\n{"type": 1}\n', encoding="utf-8")
    audit_path = tmp_path / "audit.jsonl"

    cli.main([str(log), "--audit-log", str(audit_path), "--quiet"])

    summary = summarise(audit_path)
    assert summary["runs"] == 1
    assert summary["skipped_lines"] == [2]


def test_summarise_missing_file(tmp_path: Path) -> None:
    assert summarise(tmp_path / "absent.jsonl")["missing"]
