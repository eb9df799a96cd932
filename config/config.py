"""Environment helpers shared by the settings modules."""

import os
import re
from pathlib import Path
from typing import Mapping, Optional

VERSION_FILE = Path(__file__).resolve().parents[1] / "version"

_DSN_RE = re.compile(r"^\s*mysql:(?P<body>.*)$", re.IGNORECASE)


class ConfigError(RuntimeError):
    """Raised when required environment variables are missing or malformed."""


def env_flag(name: str, default: bool = False, env: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if env is None else env
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int = 0, env: Optional[Mapping[str, str]] = None) -> int:
    env = os.environ if env is None else env
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e


def parse_dsn(dsn: str) -> dict:
    """Parse ``mysql:host=db;port=3306;dbname=dropin`` into a partial DB_CONFIG."""
    m = _DSN_RE.match(dsn or "")
    if not m:
        raise ConfigError(f"Unsupported DATABASE_DSN: {dsn!r}")

    parts: dict[str, str] = {}
    for item in m.group("body").split(";"):
        if "=" not in item:
            continue
        key, value = item.split("=", 1)
        parts[key.strip().lower()] = value.strip()

    out: dict = {}
    if parts.get("host"):
        out["host"] = parts["host"]
    if parts.get("port"):
        try:
            out["port"] = int(parts["port"])
        except ValueError as e:
            raise ConfigError(f"Invalid port in DATABASE_DSN: {parts['port']!r}") from e
    if parts.get("dbname"):
        out["database"] = parts["dbname"]
    return out


def build_db_config(env: Optional[Mapping[str, str]] = None, *, defaults: Optional[dict] = None) -> dict:
    """DB_CONFIG from DATABASE_DSN, else from the linked-container variables."""
    env = os.environ if env is None else env
    config = {"host": "localhost", "port": 3306, "user": "root", "password": "", "database": "dropin"}
    config.update(defaults or {})

    dsn = (env.get("DATABASE_DSN") or "").strip()
    if dsn:
        config.update(parse_dsn(dsn))
    else:
        if env.get("DB_PORT_3306_TCP_ADDR"):
            config["host"] = env["DB_PORT_3306_TCP_ADDR"]
        if env.get("DB_ENV_MYSQL_DATABASE"):
            config["database"] = env["DB_ENV_MYSQL_DATABASE"]

    if env.get("DATABASE_USER"):
        config["user"] = env["DATABASE_USER"]
    if env.get("DATABASE_PASSWORD") is not None:
        config["password"] = env["DATABASE_PASSWORD"]
    return config


def missing_production_vars(env: Optional[Mapping[str, str]] = None) -> list[str]:
    env = os.environ if env is None else env
    missing = [name for name in ("SECRET_KEY", "DATABASE_USER", "DATABASE_PASSWORD") if not env.get(name)]
    if not env.get("DATABASE_DSN") and not env.get("DB_PORT_3306_TCP_ADDR"):
        missing.append("DATABASE_DSN")
    return missing


def require_production_env(env: Optional[Mapping[str, str]] = None) -> None:
    missing = missing_production_vars(env)
    if missing:
        raise ConfigError("Missing required environment variables: " + ", ".join(missing))


def read_version(env: Optional[Mapping[str, str]] = None, *, path: Path = VERSION_FILE) -> str:
    env = os.environ if env is None else env
    if env.get("APP_VERSION"):
        return env["APP_VERSION"]
    try:
        return path.read_text(encoding="utf-8").strip() or "dev"
    except FileNotFoundError:
        return "dev"
