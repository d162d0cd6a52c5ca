#!/usr/bin/env python3
"""
Configuration for Quotie.

Values come from the environment, optionally seeded from a .env file via
python-dotenv. Both the app and the widget process load the same config so
they agree on the shared app group directory.

Environment Variables:
    QUOTIE_APP_GROUP_DIR: Shared storage directory (quotes + shared defaults)
    QUOTIE_STATE_DIR: App-private state directory (counters, pending nudges)
    QUOTIE_LOG_PATH: Log file path
    QUOTIE_MEMMI_BASE_URL: Enrichment service base URL (empty disables it)
    QUOTIE_MEMMI_TIMEOUT: Enrichment request timeout in seconds
    QUOTIE_NOTIFICATIONS: Notification permission: granted | denied | ask

Usage:
    from Quotie.config import QuotieConfig

    config = QuotieConfig.from_env()
    print(config.quotes_path)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


APP_GROUP_ID = "group.com.QuotichApp.Quotich"
QUOTES_FILENAME = "quotes.json"
SHARED_DEFAULTS_FILENAME = "shared_defaults.json"
PRIVATE_DEFAULTS_FILENAME = "defaults.json"
PENDING_NOTIFICATIONS_FILENAME = "pending_notifications.json"

NOTIFICATION_MODES = ("granted", "denied", "ask")

QUOTIE_HOME = Path.home() / ".quotie"


@dataclass
class QuotieConfig:
    """Resolved paths and service settings."""
    app_group_dir: Path
    state_dir: Path
    log_path: Path
    memmi_base_url: str = ""
    memmi_timeout: float = 10.0
    notifications: str = "ask"

    @property
    def quotes_path(self) -> Path:
        return self.app_group_dir / QUOTES_FILENAME

    @property
    def shared_defaults_path(self) -> Path:
        return self.app_group_dir / SHARED_DEFAULTS_FILENAME

    @property
    def private_defaults_path(self) -> Path:
        return self.state_dir / PRIVATE_DEFAULTS_FILENAME

    @property
    def pending_notifications_path(self) -> Path:
        return self.state_dir / PENDING_NOTIFICATIONS_FILENAME

    @property
    def enrichment_enabled(self) -> bool:
        return bool(self.memmi_base_url)

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "QuotieConfig":
        """
        Load configuration from the environment.

        Args:
            env_file: Optional .env file to load first (existing environment
                variables take precedence)

        Raises:
            ValueError: If a variable holds an invalid value
        """
        if env_file is not None:
            load_dotenv(dotenv_path=env_file)
        else:
            load_dotenv()

        app_group_dir = Path(
            os.getenv("QUOTIE_APP_GROUP_DIR", str(QUOTIE_HOME / APP_GROUP_ID))
        ).expanduser()
        state_dir = Path(
            os.getenv("QUOTIE_STATE_DIR", str(QUOTIE_HOME / "state"))
        ).expanduser()
        log_path = Path(
            os.getenv("QUOTIE_LOG_PATH", str(state_dir / "logs" / "quotie.log"))
        ).expanduser()

        timeout_raw = os.getenv("QUOTIE_MEMMI_TIMEOUT", "10")
        try:
            timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(f"QUOTIE_MEMMI_TIMEOUT must be a number, got {timeout_raw!r}")

        notifications = os.getenv("QUOTIE_NOTIFICATIONS", "ask").strip().lower()
        if notifications not in NOTIFICATION_MODES:
            raise ValueError(
                f"QUOTIE_NOTIFICATIONS must be one of {', '.join(NOTIFICATION_MODES)}, "
                f"got {notifications!r}"
            )

        return cls(
            app_group_dir=app_group_dir,
            state_dir=state_dir,
            log_path=log_path,
            memmi_base_url=os.getenv("QUOTIE_MEMMI_BASE_URL", "").strip().rstrip("/"),
            memmi_timeout=timeout,
            notifications=notifications,
        )
