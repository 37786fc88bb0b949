"""Summary: Tests for configuration loading.

Importance: Ensures defaults, .env, and environment overrides behave correctly.
Alternatives: Validate configuration manually during runtime.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from creatorinbox.config import AppConfig, load_defaults, load_dotenv

DEFAULTS = """
{
  "db_path": "test.db",
  "store_backend": "sqlite",
  "api_host": "127.0.0.1",
  "api_port": "8000",
  "api_key": "",
  "default_user_id": "local-creator",
  "daily_limit": "10",
  "faq_rate": "0.15",
  "log_level": "info"
}
""".strip()


def _write_defaults(root: Path) -> None:
    (root / "config").mkdir()
    (root / "config" / "defaults.json").write_text(DEFAULTS, encoding="utf-8")


def test_load_defaults_reads_json(tmp_path: Path) -> None:
    """Summary: Verify defaults are parsed from JSON.

    Importance: Confirms config file is the source of truth for variables.
    Alternatives: Hardcode defaults in the test.
    """

    defaults_path = tmp_path / "defaults.json"
    defaults_path.write_text("{\"db_path\": \"test.db\"}", encoding="utf-8")
    defaults = load_defaults(defaults_path)
    assert defaults["db_path"] == "test.db"


def test_load_defaults_requires_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_defaults(tmp_path / "missing.json")


def test_load_dotenv_sets_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Ensure .env values populate environment variables.

    Importance: Validates local secret loading without external tools.
    Alternatives: Assume OS environment is always set.
    """

    env_path = tmp_path / ".env"
    env_path.write_text("# comment\nCREATORINBOX_STORE_BACKEND=memory\n", encoding="utf-8")
    monkeypatch.delenv("CREATORINBOX_STORE_BACKEND", raising=False)
    load_dotenv(env_path)
    assert os.getenv("CREATORINBOX_STORE_BACKEND") == "memory"
    monkeypatch.delenv("CREATORINBOX_STORE_BACKEND", raising=False)


def test_app_config_uses_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Summary: Verify AppConfig honors defaults when env is absent.

    Importance: Confirms config file remains the baseline for variables.
    Alternatives: Inline defaults directly in the AppConfig class.
    """

    _write_defaults(tmp_path)
    monkeypatch.chdir(tmp_path)
    for name in ("CREATORINBOX_DB_PATH", "CREATORINBOX_DAILY_LIMIT", "CREATORINBOX_FAQ_RATE", "CREATORINBOX_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config = AppConfig.from_env()
    assert config.db_path == "test.db"
    assert config.api_port == 8000
    assert config.daily_limit == 10
    assert config.faq_rate == 0.15
    assert config.log_level == "INFO"


def test_app_config_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write_defaults(tmp_path)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CREATORINBOX_DAILY_LIMIT", "15")
    monkeypatch.setenv("CREATORINBOX_STORE_BACKEND", "memory")
    config = AppConfig.from_env()
    assert config.daily_limit == 15
    assert config.store_backend == "memory"
