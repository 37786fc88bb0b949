"""Summary: Tests for the command-line interface.

Importance: Ensures local workflows print the expected results.
Alternatives: Run the CLI manually before each release.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from creatorinbox.cli import run_cli


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "defaults.json").write_text(
        """
        {
          "db_path": "cli.db",
          "store_backend": "sqlite",
          "api_host": "127.0.0.1",
          "api_port": "8000",
          "api_key": "",
          "default_user_id": "creator-1",
          "daily_limit": "10",
          "faq_rate": "0.15",
          "log_level": "WARNING"
        }
        """.strip(),
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    for name in ("CREATORINBOX_DB_PATH", "CREATORINBOX_STORE_BACKEND", "CREATORINBOX_DAILY_LIMIT"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def test_cli_capacity_commands(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Summary: Verify capacity commands print suggestions and previews.

    Importance: Creators can size their capacity from the terminal.
    Alternatives: Use only the API.
    """

    run_cli(["suggest-capacity", "80"])
    run_cli(["time-commitment", "10"])
    run_cli(["preview", "50"])
    output = capsys.readouterr().out
    assert "Suggested capacity: 14 (28 min/day)" in output
    assert "20 minutes" in output
    assert "deep: 10 faq: 8 archived: 32" in output


def test_cli_draft_workflow(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Summary: Verify drafts can be saved, restored, listed, and cleared.

    Importance: Exercises the draft lifecycle against SQLite from the CLI.
    Alternatives: Only test drafts in-process.
    """

    run_cli(["draft-save", "conv-1", "msg-1", "first draft"])
    run_cli(["draft-save", "conv-1", "msg-1", "second draft"])
    run_cli(["draft-restore", "conv-1", "msg-1"])
    run_cli(["draft-history", "conv-1", "msg-1"])
    run_cli(["draft-clear", "conv-1", "msg-1"])
    run_cli(["draft-restore", "conv-1", "msg-1"])
    output = capsys.readouterr().out
    assert "(v1)" in output
    assert "(v2)" in output
    assert "v2: second draft" in output
    assert "Drafts cleared." in output
    assert output.strip().endswith("No active draft.")


def test_cli_weekly_report(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    run_cli(["record-digest", "3", "1", "0"])
    run_cli(["weekly-report"])
    output = capsys.readouterr().out
    assert "Recorded digest" in output
    assert "[medium]" in output


def test_cli_rejects_invalid_capacity_arguments(
    workspace: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Summary: Verify invalid capacity input exits with a usage error.

    Importance: Creators get a readable message instead of a traceback.
    Alternatives: Validate ranges in argparse types.
    """

    with pytest.raises(SystemExit) as time_exit:
        run_cli(["time-commitment", "-1"])
    with pytest.raises(SystemExit) as preview_exit:
        run_cli(["preview", "50", "--faq-rate", "2"])
    assert time_exit.value.code == 2
    assert preview_exit.value.code == 2
    assert "capacity" in capsys.readouterr().err


def test_cli_edit_analytics_and_purge(workspace: Path, capsys: pytest.CaptureFixture[str]) -> None:
    run_cli(["track-edit", "conv-1", "msg-1", "--edit-count", "2", "--time-to-edit-ms", "4000"])
    run_cli(["track-edit", "conv-1", "msg-2"])
    run_cli(["edit-metrics", "--period", "daily"])
    run_cli(["draft-purge", "conv-1"])
    output = capsys.readouterr().out
    assert output.count("Edit tracked.") == 2
    assert "daily: 2 drafts, edit rate 50%, avg edits 2.0, override rate 0%" in output
    assert "Purged 0 drafts." in output
