# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEV_SECRET = "change-me"


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


APP_ENV = os.getenv("APP_ENV", "development")

DATA_DIR = Path(os.getenv("ROLEGATE_DATA_DIR", "data")).resolve()
USERS_PATH = Path(os.getenv("ROLEGATE_USERS_PATH", str(DATA_DIR / "users.yml"))).resolve()
SESSIONS_PATH = Path(os.getenv("ROLEGATE_SESSIONS_PATH", str(DATA_DIR / "sessions.yml"))).resolve()

COOKIE_NAME = os.getenv("ROLEGATE_COOKIE_NAME", "rolegate_session")
COOKIE_SECURE = _get_bool(os.getenv("ROLEGATE_COOKIE_SECURE"), default=False)
SESSION_SALT = os.getenv("ROLEGATE_SESSION_SALT", "rolegate.session.v1")
SESSION_TTL_SECONDS = int(os.getenv("ROLEGATE_SESSION_TTL", "3600"))  # 1 hour

# Re-read the user's role from the store on every guarded request instead of
# trusting the snapshot taken at login.
RECHECK_ROLE = _get_bool(os.getenv("ROLEGATE_RECHECK_ROLE"), default=False)

HOST = os.getenv("ROLEGATE_HOST", "0.0.0.0")
PORT = int(os.getenv("ROLEGATE_PORT", "3000"))
RELOAD = _get_bool(os.getenv("ROLEGATE_RELOAD"), default=False)
LOG_LEVEL = os.getenv("ROLEGATE_LOG_LEVEL", "INFO").upper()


def secret_key() -> str:
    secret = os.getenv("SECRET_KEY") or os.getenv("ROLEGATE_SECRET_KEY")
    if not secret:
        raise RuntimeError("Missing SECRET_KEY (or ROLEGATE_SECRET_KEY) in environment")
    return secret


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and secret_key() == DEV_SECRET:
        raise RuntimeError("SECRET_KEY must be set in production.")
