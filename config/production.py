import os

from .config import build_db_config, env_flag, env_int, read_version, require_production_env

require_production_env()

SECRET_KEY = os.environ["SECRET_KEY"]

DB_CONFIG = build_db_config()

DEBUG = env_flag("YII_DEBUG", False)
TRACE_LEVEL = env_int("YII_TRACE_LEVEL", 0)

APP_NAME = os.getenv("APP_NAME", "Drop-in")
APP_SUPPORT_EMAIL = os.getenv("APP_SUPPORT_EMAIL", "")
APP_ADMIN_EMAIL = os.getenv("APP_ADMIN_EMAIL", "")
APP_VERSION = read_version()

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
