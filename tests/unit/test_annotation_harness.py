# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for the docnotes CLI harness."""

import io
import json
import re
from pathlib import Path

from cli.annotation_harness import run


def _write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def _sample_project(tmp_path: Path) -> Path:
    project_root = tmp_path / "project"
    _write_file(
        project_root / "service.py",
        "\n".join(
            [
                "class Mailer:",
                '    """Send mail.',
                "",
                "    @singleton",
                "    @transport smtp",
                '    """',
                "",
                "    def send(self):",
                '        """@retries 3"""',
                "",
            ]
        ),
    )
    return project_root


def test_ph5_cli_001_requires_command() -> None:
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run([], stdout=stdout, stderr=stderr)

    assert exit_code == 2


def test_ph5_cli_002_fails_when_path_is_missing(tmp_path: Path) -> None:
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["scan", "--path", str(tmp_path / "missing")], stdout=stdout, stderr=stderr
    )

    assert exit_code == 2
    assert "Path is not a directory" in stderr.getvalue()


def test_ph5_cli_003_scan_supports_json_output(tmp_path: Path) -> None:
    project_root = _sample_project(tmp_path)
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["scan", "--path", str(project_root), "--format", "json"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    payload = json.loads(_strip_ansi(stdout.getvalue()))
    by_identity = {item["identity"]: item for item in payload["declarations"]}
    assert by_identity["service.Mailer"]["annotations"] == {
        "singleton": "",
        "transport": "smtp",
    }
    assert by_identity["service.Mailer#send"]["annotations"] == {"retries": "3"}
    assert by_identity["service.Mailer#send"]["kind"] == "method"
    assert payload["errors"] == []


def test_ph5_cli_004_scan_supports_table_output(tmp_path: Path) -> None:
    project_root = _sample_project(tmp_path)
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["scan", "--path", str(project_root), "--format", "table"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    compact_text = re.sub(r"[^a-zA-Z0-9_@#.]+", "", _strip_ansi(stdout.getvalue()))
    assert "annotation" in compact_text
    assert "@transport" in compact_text
    assert "smtp" in compact_text


def test_ph5_cli_005_scan_json_writes_to_output_file(tmp_path: Path) -> None:
    project_root = _sample_project(tmp_path)
    output_path = tmp_path / "out" / "annotations.json"
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        [
            "scan",
            "--path",
            str(project_root),
            "--format",
            "json",
            "--output",
            str(output_path),
        ],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    assert stdout.getvalue() == ""
    payload = json.loads(output_path.read_text(encoding="utf-8"))
    assert len(payload["declarations"]) == 2


def test_ph5_cli_006_scan_reports_source_errors(tmp_path: Path) -> None:
    project_root = _sample_project(tmp_path)
    _write_file(project_root / "broken.py", "class Broken(:\n")
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["scan", "--path", str(project_root), "--format", "json"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    assert "source_error" in stderr.getvalue()
    payload = json.loads(_strip_ansi(stdout.getvalue()))
    assert payload["errors"][0]["file_path"] == "broken.py"


def test_ph5_cli_007_get_prints_annotations_and_values(tmp_path: Path) -> None:
    project_root = _sample_project(tmp_path)
    stdout = io.StringIO()
    stderr = io.StringIO()

    exit_code = run(
        ["get", "--path", str(project_root), "--declaration", "service.Mailer"],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    assert json.loads(_strip_ansi(stdout.getvalue())) == {
        "singleton": "",
        "transport": "smtp",
    }

    stdout = io.StringIO()
    exit_code = run(
        [
            "get",
            "--path",
            str(project_root),
            "--declaration",
            "service.Mailer::send",
            "--name",
            "retries",
        ],
        stdout=stdout,
        stderr=stderr,
    )

    assert exit_code == 0
    assert stdout.getvalue() == "3\n"


def test_ph5_cli_008_get_reports_missing_declaration_and_annotation(
    tmp_path: Path,
) -> None:
    project_root = _sample_project(tmp_path)
    stdout = io.StringIO()
    stderr = io.StringIO()

    missing_declaration = run(
        ["get", "--path", str(project_root), "--declaration", "service.Nope"],
        stdout=stdout,
        stderr=stderr,
    )
    missing_annotation = run(
        [
            "get",
            "--path",
            str(project_root),
            "--declaration",
            "service.Mailer#send",
            "--name",
            "timeout",
        ],
        stdout=stdout,
        stderr=stderr,
    )

    assert missing_declaration == 1
    assert missing_annotation == 1
    assert "Declaration not found: service.Nope" in stderr.getvalue()
    assert "Annotation not set: timeout" in stderr.getvalue()
    assert stdout.getvalue() == ""
