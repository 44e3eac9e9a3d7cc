# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Runtime settings.

Values come from ``AUTHDEMO_*`` environment variables. An optional YAML file
(``AUTHDEMO_CONFIG``) supplies defaults under the same lowercase keys, e.g.::

    store: csv
    users_path: data/users.csv
    session_max_age: 86400

Environment variables always win over the file.
"""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_USERS_PATH = BASE_DIR / "data" / "users.csv"
DEFAULT_SESSION_MAX_AGE = 24 * 60 * 60  # 24 hours

STORE_BACKENDS = {"csv", "memory"}
PASSWORD_SCHEMES = {"argon2", "sha256"}

_TRUE = {"1", "true", "yes", "y"}


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUE


def load_config_file(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        raise RuntimeError(f"Config file not found: {p}")
    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise RuntimeError(f"Config file must contain a mapping: {p}")
    return {str(k).strip().lower(): v for k, v in raw.items()}


@dataclass(frozen=True)
class Settings:
    store_backend: str = "csv"
    users_path: Path = DEFAULT_USERS_PATH
    secret_key: str = ""
    session_salt: str = "authdemo.session.v1"
    cookie_name: str = "authdemo_session"
    session_max_age: int = DEFAULT_SESSION_MAX_AGE
    cookie_secure: bool = False
    password_scheme: str = "argon2"
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(f"Unknown store backend '{self.store_backend}' (expected one of {sorted(STORE_BACKENDS)})")
        if self.password_scheme not in PASSWORD_SCHEMES:
            raise ValueError(f"Unknown password scheme '{self.password_scheme}' (expected one of {sorted(PASSWORD_SCHEMES)})")
        if self.session_max_age <= 0:
            raise ValueError("session_max_age must be positive")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        file_cfg = load_config_file(env.get("AUTHDEMO_CONFIG"))

        def pick(key: str, default: Any) -> Any:
            v = env.get(f"AUTHDEMO_{key.upper()}")
            if v is not None and v != "":
                return v
            return file_cfg.get(key, default)

        secret = pick("secret_key", "") or env.get("SECRET_KEY", "")
        if not secret:
            logger.warning("No AUTHDEMO_SECRET_KEY configured; using a random per-process secret")
            secret = secrets.token_urlsafe(32)

        return cls(
            store_backend=str(pick("store", "csv")).strip().lower(),
            users_path=Path(str(pick("users_path", DEFAULT_USERS_PATH))).resolve(),
            secret_key=str(secret),
            session_salt=str(pick("session_salt", "authdemo.session.v1")),
            cookie_name=str(pick("cookie_name", "authdemo_session")),
            session_max_age=int(pick("session_max_age", DEFAULT_SESSION_MAX_AGE)),
            cookie_secure=_as_bool(pick("cookie_secure", False)),
            password_scheme=str(pick("password_scheme", "argon2")).strip().lower(),
            host=str(pick("host", "0.0.0.0")),
            port=int(pick("port", 8000)),
            reload=_as_bool(pick("reload", False)),
            log_level=str(env.get("LOG_LEVEL") or file_cfg.get("log_level") or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
