# src/stayboard/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a demo-friendly default.
- Simulated latencies are settings so tests can run with zero delay.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "STAYBOARD"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return max(0.0, float(raw))
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

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path

    # ---- Simulated network latency (seconds) ----
    load_delay: float
    mutation_delay: float
    booking_load_delay: float
    login_delay: float

    # ---- Demo data ----
    seed_demo_data: bool
    demo_password: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "stayboard") or "stayboard"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/stayboard"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "local_storage.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_path=storage_path,
            load_delay=_env_float(_k("LOAD_DELAY"), 0.5),
            mutation_delay=_env_float(_k("MUTATION_DELAY"), 0.3),
            booking_load_delay=_env_float(_k("BOOKING_LOAD_DELAY"), 0.3),
            login_delay=_env_float(_k("LOGIN_DELAY"), 1.0),
            seed_demo_data=_env_bool(_k("SEED_DEMO_DATA"), True),
            demo_password=_env(_k("DEMO_PASSWORD"), "123456"),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
