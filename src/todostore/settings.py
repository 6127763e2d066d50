from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

BACKENDS = ("memory", "sqlite")

_DEFAULT_SQLITE_PATH = "./data/todos.db"
_DEFAULT_PORT = 3000


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration for the store and its HTTP layer.

    Storage picks the Backend TodoStore is built on; the rest only affects
    the FastAPI app and `python -m todostore`.
    """

    # storage
    persistence_backend: str = "memory"
    sqlite_db_path: str = _DEFAULT_SQLITE_PATH
    # http
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    enable_basic_auth: bool = False
    basic_auth_username: Optional[str] = None
    basic_auth_password: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = _DEFAULT_PORT
    # logging
    log_level: str = "INFO"


def _env(name: str, default: str) -> str:
    """Read an env var, treating unset and empty alike."""
    value = os.getenv(name)
    return default if value is None or value.strip() == "" else value.strip()


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        return _DEFAULT_PORT
    return port if 0 < port < 65536 else _DEFAULT_PORT


def _parse_origins(value: str) -> List[str]:
    # '*' is kept as a single entry; main.py treats it as allow-all
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """
    Build Settings from the environment.

    PERSISTENCE_BACKEND (memory|sqlite, unknown values mean memory),
    SQLITE_DB_PATH, CORS_ALLOW_ORIGINS, ENABLE_BASIC_AUTH,
    BASIC_AUTH_USERNAME, BASIC_AUTH_PASSWORD, HOST, PORT, LOG_LEVEL.
    Credentials are only read when basic auth is enabled.
    """
    backend = _env("PERSISTENCE_BACKEND", "memory").lower()
    auth_on = _parse_bool(_env("ENABLE_BASIC_AUTH", "false"))

    return Settings(
        persistence_backend=backend if backend in BACKENDS else "memory",
        sqlite_db_path=_env("SQLITE_DB_PATH", _DEFAULT_SQLITE_PATH),
        cors_allow_origins=_parse_origins(_env("CORS_ALLOW_ORIGINS", "*")),
        enable_basic_auth=auth_on,
        basic_auth_username=os.getenv("BASIC_AUTH_USERNAME") if auth_on else None,
        basic_auth_password=os.getenv("BASIC_AUTH_PASSWORD") if auth_on else None,
        host=_env("HOST", "0.0.0.0"),
        port=_parse_port(_env("PORT", str(_DEFAULT_PORT))),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
    )
