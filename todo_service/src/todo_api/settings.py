from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv
from sqlalchemy.engine import URL

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


# PUBLIC_INTERFACE
def load_env_file(path: Optional[str] = None) -> bool:
    """
    Load KEY=value pairs from a .env file into the process environment.
    Without a path, the nearest .env above the working directory is used.
    Variables already set in the environment keep their values.
    """
    return load_dotenv(path or find_dotenv(usecwd=True))


load_env_file()


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables. A .env file is
    read once at import; real environment variables take precedence over it.

    Env vars:
    - DATABASE_URL: full SQLAlchemy URL; overrides the DB_* variables when set
    - DB_HOST, DB_USER, DB_PASSWORD, DB_NAME, DB_PORT: MySQL connection parts
    - DB_POOL_SIZE / DB_MAX_OVERFLOW: connection pool sizing (default 5 / 10)
    - DB_CONNECT_RETRY_SECONDS: delay between startup connection attempts (default 5)
    - HOST / PORT: listen address (default 0.0.0.0:3000)
    - IMDS_BASE_URL: instance metadata endpoint (default http://169.254.169.254)
    - IMDS_TIMEOUT_SECONDS: per-call timeout for metadata requests (default 2)
    - IMDS_TOKEN_TTL_SECONDS: IMDSv2 session token TTL (default 21600)
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - STATIC_DIR: directory served as static files when it exists (default 'public')
    - LOG_LEVEL / LOG_FORMAT: logging level (unknown values become INFO) and 'text' or 'json' output
    """

    database_url: str
    db_pool_size: int
    db_max_overflow: int
    db_connect_retry_seconds: float
    host: str
    port: int
    imds_base_url: str
    imds_timeout_seconds: float
    imds_token_ttl_seconds: int
    cors_allow_origins: List[str]
    static_dir: str
    log_level: str
    log_format: str


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def _parse_float(value: str, default: float) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _build_database_url() -> str:
    """Assemble a MySQL URL from the DB_* variables unless DATABASE_URL is given."""
    explicit = os.getenv("DATABASE_URL", "").strip()
    if explicit:
        return explicit
    url = URL.create(
        "mysql+pymysql",
        username=_get_env("DB_USER", "root"),
        password=os.getenv("DB_PASSWORD") or None,
        host=_get_env("DB_HOST", "localhost"),
        port=_parse_int(_get_env("DB_PORT", "3306"), 3306),
        database=_get_env("DB_NAME", "todos"),
    )
    return url.render_as_string(hide_password=False)


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    log_format = _get_env("LOG_FORMAT", "text").strip().lower()
    if log_format not in {"text", "json"}:
        log_format = "text"
    log_level = _get_env("LOG_LEVEL", "INFO").strip().upper()
    if log_level == "WARN":
        log_level = "WARNING"
    if log_level not in LOG_LEVELS:
        log_level = "INFO"

    return Settings(
        database_url=_build_database_url(),
        db_pool_size=max(_parse_int(_get_env("DB_POOL_SIZE", "5"), 5), 1),
        db_max_overflow=max(_parse_int(_get_env("DB_MAX_OVERFLOW", "10"), 10), 0),
        db_connect_retry_seconds=_parse_float(_get_env("DB_CONNECT_RETRY_SECONDS", "5"), 5.0),
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_int(_get_env("PORT", "3000"), 3000),
        imds_base_url=_get_env("IMDS_BASE_URL", "http://169.254.169.254").strip().rstrip("/"),
        imds_timeout_seconds=_parse_float(_get_env("IMDS_TIMEOUT_SECONDS", "2"), 2.0),
        imds_token_ttl_seconds=_parse_int(_get_env("IMDS_TOKEN_TTL_SECONDS", "21600"), 21600),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        static_dir=_get_env("STATIC_DIR", "public").strip(),
        log_level=log_level,
        log_format=log_format,
    )
