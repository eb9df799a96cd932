from .config import build_db_config, read_version

SECRET_KEY = "test-secret"

DB_CONFIG = build_db_config(defaults={"database": "dropin_test"})

DEBUG = False
TESTING = True
TRACE_LEVEL = 0

APP_NAME = "Drop-in (test)"
APP_SUPPORT_EMAIL = "support@example.com"
APP_ADMIN_EMAIL = "admin@example.com"
APP_VERSION = read_version()

AUTO_INIT_DB = False
AUTO_SEED_DB = False
