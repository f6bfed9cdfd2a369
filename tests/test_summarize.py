from pathlib import Path

import pytest

from logtally.reader import LogFileNotFound
from logtally.summarize import StrictModeError, summarize_file

EXAMPLE_LINES = [
    '{"type": "Foo", "id": 3, "cluster": -3}',
    '{"type": "Bar", "error": 1}',
    '{"type": "Foo", "name": "titan", "calibration": 3.141}',
]


def _write(path: Path, lines, trailing_newline: bool = True) -> Path:
    text = "\n".join(lines) + ("\n" if trailing_newline else "")
    path.write_bytes(text.encode("utf-8"))
    return path


def _size(line: str) -> int:
    return len(line.encode("utf-8"))


def test_example_file(tmp_path: Path) -> None:
    log = _write(tmp_path / "example.log", EXAMPLE_LINES)

    report = summarize_file(log)

    assert list(report.tally.items()) == [
        ("Foo", _size(EXAMPLE_LINES[0]) + _size(EXAMPLE_LINES[2])),
        ("Bar", _size(EXAMPLE_LINES[1])),
    ]
    assert list(report.tally.items()) == [("Foo", 93), ("Bar", 27)]
    assert report.lines_read == 3
    assert report.skipped == 0


def test_malformed_line_is_skipped_and_reported(tmp_path: Path) -> None:
    lines = ['{"type": "A", "n": 1}', '{"type": "A", oops', '{"type": "A", "n": 22}']
    log = _write(tmp_path / "bad.log", lines)
    seen = []

    report = summarize_file(log, on_issue=seen.append)

    assert report.tally["A"] == _size(lines[0]) + _size(lines[2])
    assert report.lines_tallied == 2
    assert [issue.line_number for issue in report.issues] == [2]
    assert seen == report.issues
    assert "invalid JSON" in seen[0].reason


def test_sizes_sum_to_well_formed_lines(tmp_path: Path) -> None:
    lines = [
        '{"type": "x", "v": "\\"quoted\\" {brace}"}',
        '{"no_type": true}',
        '{"type": "été", "v": "☃"}',
        "",
        '{"type": 5}',
        '{"type": "x"}',
    ]
    log = _write(tmp_path / "mixed.log", lines, trailing_newline=False)

    report = summarize_file(log)

    expected = _size(lines[0]) + _size(lines[2]) + _size(lines[5])
    assert report.tally.total == expected
    assert list(report.tally) == ["x", "été"]
    assert report.blank_lines == 1
    assert [issue.line_number for issue in report.issues] == [2, 5]


def test_empty_file_gives_empty_tally(tmp_path: Path) -> None:
    log = tmp_path / "empty.log"
    log.write_bytes(b"")

    report = summarize_file(log)
    assert len(report.tally) == 0
    assert report.lines_read == 0


def test_strict_mode_raises_on_first_malformed_line(tmp_path: Path) -> None:
    log = _write(tmp_path / "bad.log", ['{"type": "A"}', "garbage", "more garbage"])

    with pytest.raises(StrictModeError) as excinfo:
        summarize_file(log, strict=True)
    assert excinfo.value.issue.line_number == 2


def test_group_key_override(tmp_path: Path) -> None:
    lines = ['{"type": "a", "level": "info"}', '{"type": "b", "level": "info"}']
    log = _write(tmp_path / "levels.log", lines)

    report = summarize_file(log, group_key="level")
    assert list(report.tally.items()) == [("info", _size(lines[0]) + _size(lines[1]))]


def test_missing_file_propagates(tmp_path: Path) -> None:
    with pytest.raises(LogFileNotFound):
        summarize_file(tmp_path / "missing.log")


def test_to_dict_reports_totals(tmp_path: Path) -> None:
    log = _write(tmp_path / "example.log", EXAMPLE_LINES + ["nope"])

    payload = summarize_file(log).to_dict()
    assert payload["total_size"] == 120
    assert payload["skipped"] == 1
    assert [entry["type"] for entry in payload["types"]] == ["Foo", "Bar"]
    assert payload["issues"][0]["excerpt"] == "nope"


def test_unparseable_lines_do_not_stop_the_run(tmp_path: Path) -> None:
    depth = 200000
    lines = [
        '{"type": "A", "x": ' + "[" * depth + "]" * depth + "}",
        '{"type": "\\ud800"}',
        '{"type": "A", "v": NaN}',
        '{"type": "B"}',
    ]
    log = _write(tmp_path / "hostile.log", lines)

    report = summarize_file(log)

    assert list(report.tally.items()) == [("B", _size(lines[3]))]
    assert [issue.line_number for issue in report.issues] == [1, 2, 3]
