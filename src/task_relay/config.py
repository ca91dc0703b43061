# src/task_relay/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One immutable Settings snapshot, passed explicitly to the components that need it.
- No secrets required at import time.
- Changing configuration means taking a new snapshot (reload_settings), never mutating the old one.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

ENV_PREFIX = "TASKRELAY"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Vault ----
    vault_dir: Path
    publish_page_path: str
    intake_folder: str

    # ---- Sync ----
    sync_interval_minutes: int

    # ---- Published page ----
    page_password: str

    # ---- Publish transport (passthrough to the publisher) ----
    git_repo_url: str
    git_branch: str
    local_repo_path: Path
    publish_dir: Path | None
    git_timeout_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    change_log_path: Path
    watermark_path: Path

    @staticmethod
    def from_env() -> Settings:
        app_name = _env(_k("APP_NAME"), "task-relay") or "task-relay"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        vault_dir = _env_path(_k("VAULT_DIR"), Path("."))
        publish_page_path = _env(_k("PUBLISH_PAGE_PATH"), "Daily Tasks.md").strip()
        intake_folder = _env(_k("INTAKE_FOLDER"), "Daily Notes").strip().strip("/")

        # 0 disables periodic sync; negative values are treated as 0.
        sync_interval_minutes = max(0, _env_int(_k("SYNC_INTERVAL"), 60))

        page_password = _env(_k("PAGE_PASSWORD"), "")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task-relay"))

        git_repo_url = _env(_k("GIT_REPO_URL"), "").strip()
        git_branch = _env(_k("GIT_BRANCH"), "main").strip() or "main"
        local_repo_path = _env_path(_k("LOCAL_REPO_PATH"), data_dir / "publish-repo")
        raw_publish_dir = _env(_k("PUBLISH_DIR"), "").strip()
        publish_dir = Path(raw_publish_dir).expanduser() if raw_publish_dir else None
        git_timeout_seconds = max(1.0, _env_float(_k("GIT_TIMEOUT_SECONDS"), 60.0))

        change_log_path = _env_path(_k("CHANGE_LOG_PATH"), data_dir / "pending_changes.json")
        watermark_path = _env_path(_k("WATERMARK_PATH"), data_dir / "sync_state.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            vault_dir=vault_dir,
            publish_page_path=publish_page_path,
            intake_folder=intake_folder,
            sync_interval_minutes=sync_interval_minutes,
            page_password=page_password,
            git_repo_url=git_repo_url,
            git_branch=git_branch,
            local_repo_path=local_repo_path,
            publish_dir=publish_dir,
            git_timeout_seconds=git_timeout_seconds,
            data_dir=data_dir,
            change_log_path=change_log_path,
            watermark_path=watermark_path,
        )

    def with_overrides(self, **changes: Any) -> Settings:
        """New snapshot with some fields replaced (e.g. from CLI flags)."""
        return replace(self, **changes)


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = reload_settings()
    return _SETTINGS


def reload_settings() -> Settings:
    """Take a fresh snapshot from the environment (and .env) and make it current."""
    global _SETTINGS
    load_dotenv(override=False)
    _SETTINGS = Settings.from_env()
    return _SETTINGS
