import os

from .config import ConfigError

__all__ = ["ConfigError", "get_settings_module"]


def get_settings_module() -> str:
    # YII_ENV comes from the deployment's docker env; APP_ENV is the local fallback
    env = (os.getenv("YII_ENV") or os.getenv("APP_ENV") or "dev").strip().lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"
