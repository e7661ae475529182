"""Summary: Tests for the command-line interface.

Importance: Ensures the local workflow reaches the same services as the API.
Alternatives: Exercise commands manually.
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import pytest

from insighthub.cli import build_parser, run_cli


def _prepare(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    defaults = json.loads(
        (Path(__file__).resolve().parents[1] / "config" / "defaults.json").read_text(encoding="utf-8")
    )
    defaults["db_path"] = str(tmp_path / "cli.db")
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "defaults.json").write_text(json.dumps(defaults), encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("INSIGHTHUB_"):
            monkeypatch.delenv(key, raising=False)


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr(sys, "argv", ["insighthub", *args])
    run_cli()


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_import_and_stats(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Summary: Verify content import feeds the stats command.

    Importance: Confirms fixtures drive the counts end to end.
    Alternatives: Seed the database with SQL.
    """

    _prepare(tmp_path, monkeypatch)
    fixture = tmp_path / "site.json"
    fixture.write_text(
        json.dumps({"posts": [{"created_at": 1}], "users": [{"email": "a@example.com"}]}),
        encoding="utf-8",
    )
    _run(monkeypatch, "import-content", "--fixture", str(fixture))
    _run(monkeypatch, "stats")
    output = capsys.readouterr().out
    assert "posts: 1" in output
    assert "users: 1" in output


def test_connect_and_summary(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Summary: Verify connect, sync, and summary commands work together.

    Importance: Admins can manage integrations without the web UI.
    Alternatives: Only support integrations over HTTP.
    """

    _prepare(tmp_path, monkeypatch)
    _run(monkeypatch, "connect", "clarity", "--project-id", "proj123", "--project-key", "abcdef123456")
    _run(monkeypatch, "summary", "clarity")
    _run(monkeypatch, "connect", "activecampaign", "--api-url", "http://insecure.example.com", "--api-key", "k" * 16)
    _run(monkeypatch, "tools")
    output = capsys.readouterr().out
    assert "Connected clarity." in output
    assert "No data yet." in output
    assert "Error (insecure_url)" in output
    assert "clarity: Microsoft Clarity [connected]" in output
    assert "activecampaign: ActiveCampaign [failed]" in output
