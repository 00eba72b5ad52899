# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the sigdiff CLI harness."""

import io
import json
from pathlib import Path

from cli.sigdiff_harness import run

OLD_GO = "package calc\n\nfunc Add(a, b int) int {\n\treturn a + b\n}\n"
NEW_GO = "package calc\n\nfunc Add(a, b, c int) int {\n\treturn a + b + c\n}\n"


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_cli_001_compare_json_reports_findings(tmp_path: Path) -> None:
    old_path = _write(tmp_path / "old" / "calc.go", OLD_GO)
    new_path = _write(tmp_path / "new" / "calc.go", NEW_GO)
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["compare", "--old", str(old_path), "--new", str(new_path), "--path", "pkg/calc.go", "--format", "json"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 1
    payload = json.loads(stdout.getvalue())
    assert payload["errors"] == []
    assert len(payload["findings"]) == 1
    finding = payload["findings"][0]
    assert finding["type"] == "BREAKING_API"
    assert finding["severity"] == "HIGH"
    assert finding["filePath"] == "pkg/calc.go"
    assert "Parameter count changed from 2 to 3" in finding["description"]


def test_cli_002_compare_without_changes_exits_zero(tmp_path: Path) -> None:
    old_path = _write(tmp_path / "old.go", OLD_GO)
    new_path = _write(tmp_path / "new.go", OLD_GO)
    stdout = io.StringIO()

    exit_code = run(["compare", "--old", str(old_path), "--new", str(new_path)], stdout=stdout, stderr=io.StringIO())

    assert exit_code == 0
    assert "files_analyzed=1 findings=0 errors=0 extractors=go" in stdout.getvalue()


def test_cli_003_table_output_lists_symbol_and_title(tmp_path: Path) -> None:
    old_path = _write(tmp_path / "old.go", OLD_GO)
    new_path = _write(tmp_path / "new.go", NEW_GO)
    stdout = io.StringIO()

    exit_code = run(
        ["compare", "--old", str(old_path), "--new", str(new_path), "--path", "calc.go"],
        stdout=stdout,
        stderr=io.StringIO(),
    )

    assert exit_code == 1
    output = stdout.getvalue()
    assert "calc.go" in output
    assert "Add" in output
    assert "findings=1" in output


def test_cli_004_compare_missing_file_exits_two(tmp_path: Path) -> None:
    new_path = _write(tmp_path / "new.go", NEW_GO)
    stderr = io.StringIO()

    exit_code = run(
        ["compare", "--old", str(tmp_path / "missing.go"), "--new", str(new_path)],
        stdout=io.StringIO(),
        stderr=stderr,
    )

    assert exit_code == 2
    assert "Path does not exist" in stderr.getvalue()


def test_cli_005_invalid_arguments_exit_two() -> None:
    assert run(["compare"], stdout=io.StringIO(), stderr=io.StringIO()) == 2
    assert run(["unknown"], stdout=io.StringIO(), stderr=io.StringIO()) == 2


def test_cli_006_scan_pairs_files_by_relative_path(revision_roots: tuple[Path, Path]) -> None:
    old_root, new_root = revision_roots
    _write(old_root / "pkg" / "calc.go", OLD_GO)
    _write(new_root / "pkg" / "calc.go", NEW_GO)
    _write(old_root / "pkg" / "gone.go", "package calc\n\nfunc Gone() {}\n")
    _write(new_root / "pkg" / "fresh.go", "package calc\n\nfunc Fresh() {}\n")
    _write(new_root / "README.md", "docs\n")
    stdout = io.StringIO()

    exit_code = run(
        ["scan", "--old-root", str(old_root), "--new-root", str(new_root), "--format", "json"],
        stdout=stdout,
        stderr=io.StringIO(),
    )

    assert exit_code == 1
    payload = json.loads(stdout.getvalue())
    assert [finding["filePath"] for finding in payload["findings"]] == ["pkg/calc.go"]


def test_cli_007_scan_honours_config_and_ignore_flags(revision_roots: tuple[Path, Path]) -> None:
    old_root, new_root = revision_roots
    for relative in ("vendor/calc.go", "gen/calc.go", "src/calc.go"):
        _write(old_root / relative, OLD_GO)
        _write(new_root / relative, NEW_GO)
    _write(new_root / ".sigdiff.yaml", "ignoredPaths:\n  - vendor/\noutputFormat: json\n")
    stdout = io.StringIO()

    exit_code = run(
        ["scan", "--old-root", str(old_root), "--new-root", str(new_root), "--ignore", "gen/"],
        stdout=stdout,
        stderr=io.StringIO(),
    )

    assert exit_code == 1
    payload = json.loads(stdout.getvalue())
    assert [finding["filePath"] for finding in payload["findings"]] == ["src/calc.go"]


def test_cli_008_scan_requires_directories(tmp_path: Path) -> None:
    stderr = io.StringIO()

    exit_code = run(
        ["scan", "--old-root", str(tmp_path / "nope"), "--new-root", str(tmp_path)],
        stdout=io.StringIO(),
        stderr=stderr,
    )

    assert exit_code == 2
    assert "Path must be a directory" in stderr.getvalue()


def test_cli_009_invalid_config_exits_two(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "bad.yaml", "maxWorkers: -1\n")
    old_path = _write(tmp_path / "old.go", OLD_GO)
    new_path = _write(tmp_path / "new.go", NEW_GO)
    stderr = io.StringIO()

    exit_code = run(
        ["compare", "--old", str(old_path), "--new", str(new_path), "--config", str(config_path)],
        stdout=io.StringIO(),
        stderr=stderr,
    )

    assert exit_code == 2
    assert "Invalid configuration: max_workers must be an integer > 0" in stderr.getvalue()


def test_cli_010_json_output_file(tmp_path: Path) -> None:
    old_path = _write(tmp_path / "old.go", OLD_GO)
    new_path = _write(tmp_path / "new.go", NEW_GO)
    output_path = tmp_path / "reports" / "findings.json"
    stdout = io.StringIO()

    exit_code = run(
        [
            "compare",
            "--old",
            str(old_path),
            "--new",
            str(new_path),
            "--format",
            "json",
            "--output",
            str(output_path),
            "--workers",
            "2",
        ],
        stdout=stdout,
        stderr=io.StringIO(),
    )

    assert exit_code == 1
    assert stdout.getvalue() == ""
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert len(payload["findings"]) == 1


def test_cli_011_analyzer_errors_go_to_stderr(tmp_path: Path) -> None:
    old_path = _write(tmp_path / "old.py", "def ok():\n    pass\n")
    new_path = _write(tmp_path / "new.py", "def broken(:\n")
    stderr = io.StringIO()

    exit_code = run(
        ["compare", "--old", str(old_path), "--new", str(new_path), "--path", "mod.py"],
        stdout=io.StringIO(),
        stderr=stderr,
    )

    assert exit_code == 0
    assert "analyzer_error: mod.py: Invalid Python source" in stderr.getvalue()
