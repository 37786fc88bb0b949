"""Summary: Application configuration for CreatorInbox.

Importance: Centralizes environment, .env, and config defaults for consistent behavior.
Alternatives: Use a dedicated settings library like Pydantic Settings.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """Summary: Holds configuration values for storage, capacity, and the API.

    Importance: Ensures all services derive settings from a single source of truth.
    Alternatives: Store settings in a shared config file and parse at startup.
    """

    db_path: str
    store_backend: str
    api_host: str
    api_port: int
    api_key: str
    default_user_id: str
    daily_limit: int
    faq_rate: float
    log_level: str

    @staticmethod
    def from_env() -> "AppConfig":
        """Summary: Build configuration from defaults, .env, and environment.

        Importance: Keeps all variables defined in config defaults while allowing overrides.
        Alternatives: Parse only environment variables without a defaults file.
        """

        defaults = load_defaults(Path("config") / "defaults.json")
        load_dotenv(Path(".env"))
        return AppConfig(
            db_path=os.getenv("CREATORINBOX_DB_PATH", defaults["db_path"]),
            store_backend=os.getenv("CREATORINBOX_STORE_BACKEND", defaults["store_backend"]),
            api_host=os.getenv("CREATORINBOX_API_HOST", defaults["api_host"]),
            api_port=int(os.getenv("CREATORINBOX_API_PORT", defaults["api_port"])),
            api_key=os.getenv("CREATORINBOX_API_KEY", defaults["api_key"]),
            default_user_id=os.getenv(
                "CREATORINBOX_DEFAULT_USER_ID", defaults["default_user_id"]
            ),
            daily_limit=int(os.getenv("CREATORINBOX_DAILY_LIMIT", defaults["daily_limit"])),
            faq_rate=float(os.getenv("CREATORINBOX_FAQ_RATE", defaults["faq_rate"])),
            log_level=os.getenv("CREATORINBOX_LOG_LEVEL", defaults["log_level"]).upper(),
        )


def load_defaults(path: Path) -> dict[str, str]:
    """Summary: Load configuration defaults from JSON.

    Importance: Ensures all variables exist in a single config file.
    Alternatives: Inline defaults in the AppConfig initializer.
    """

    if not path.exists():
        raise FileNotFoundError(f"Defaults file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def load_dotenv(path: Path) -> None:
    """Summary: Load key-value pairs from a .env file into the environment.

    Importance: Keeps secrets out of code while supporting local workflows.
    Alternatives: Use python-dotenv or OS-specific secret stores.
    """

    if not path.exists():
        return
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())
