"""Configuration for YNAB Sync.

Settings come from an optional TOML file and are overridden by environment
variables (a ``.env`` file in the working directory is honoured).
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

DEFAULT_API_URL = "https://api.youneedabudget.com/v1"
DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "ynab-sync"


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass
class YNABConfig:
    """YNAB API settings."""

    api_token: str = ""
    budget_id: str = "last-used"
    api_url: str = DEFAULT_API_URL
    timeout: float = 30.0

    def require_token(self) -> str:
        if not self.api_token:
            raise ConfigError(
                "YNAB API token not configured. Set YNAB_API_TOKEN or [ynab] api_token."
            )
        return self.api_token


@dataclass
class SyncConfig:
    """Sync run settings."""

    # Fetch pool size; YNAB allows 200 requests per hour per token.
    workers: int = 4
    show_progress: bool = True


@dataclass
class Config:
    """Top-level configuration."""

    ynab: YNABConfig = field(default_factory=YNABConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    data_dir: Path = DEFAULT_DATA_DIR
    db_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.db_path is None:
            self.db_path = self.data_dir / "ynab.db"


def _apply_env(data: dict[str, dict[str, Any]]) -> None:
    """Overlay environment variables onto parsed TOML sections."""
    env_map = {
        "YNAB_API_TOKEN": ("ynab", "api_token", str),
        "YNAB_BUDGET_ID": ("ynab", "budget_id", str),
        "YNAB_API_URL": ("ynab", "api_url", str),
        "YNAB_SYNC_WORKERS": ("sync", "workers", int),
        "YNAB_SYNC_DB": ("database", "path", str),
    }
    for var, (section, key, cast) in env_map.items():
        value = os.environ.get(var)
        if value:
            try:
                data.setdefault(section, {})[key] = cast(value)
            except ValueError as e:
                raise ConfigError(f"Invalid value for {var}: {value!r}") from e


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from TOML (if given and present) plus environment.

    Args:
        config_path: Optional path to a TOML config file.

    Returns:
        Populated Config instance.
    """
    load_dotenv()

    data: dict[str, dict[str, Any]] = {}
    if config_path is not None and config_path.exists():
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    _apply_env(data)

    ynab_data = data.get("ynab", {})
    sync_data = data.get("sync", {})
    db_data = data.get("database", {})

    ynab = YNABConfig(
        api_token=ynab_data.get("api_token", ""),
        budget_id=ynab_data.get("budget_id", "last-used"),
        api_url=ynab_data.get("api_url", DEFAULT_API_URL).rstrip("/"),
        timeout=float(ynab_data.get("timeout", 30.0)),
    )
    sync = SyncConfig(
        workers=max(1, int(sync_data.get("workers", 4))),
        show_progress=bool(sync_data.get("show_progress", True)),
    )
    data_dir = Path(db_data.get("data_dir", DEFAULT_DATA_DIR)).expanduser()
    db_path = Path(db_data["path"]).expanduser() if db_data.get("path") else None
    return Config(ynab=ynab, sync=sync, data_dir=data_dir, db_path=db_path)
