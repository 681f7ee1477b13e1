import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "siwes_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

TWO_TIER_APPROVAL = bool(int(os.getenv("TWO_TIER_APPROVAL", "1")))
CURRENT_SESSION_ID = int(os.getenv("CURRENT_SESSION_ID")) if os.getenv("CURRENT_SESSION_ID") else None
GRADING_ABORT_ON_DEGRADED_READ = bool(int(os.getenv("GRADING_ABORT_ON_DEGRADED_READ", "1")))
