import os

from .config import build_db_config, env_flag, env_int, read_version

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = build_db_config(defaults={"password": "dropin"})

DEBUG = env_flag("YII_DEBUG", True)
TRACE_LEVEL = env_int("YII_TRACE_LEVEL", 3)

APP_NAME = os.getenv("APP_NAME", "Drop-in")
APP_SUPPORT_EMAIL = os.getenv("APP_SUPPORT_EMAIL", "support@example.com")
APP_ADMIN_EMAIL = os.getenv("APP_ADMIN_EMAIL", "admin@example.com")
APP_VERSION = read_version()

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
# Optional: also seed demo data on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
