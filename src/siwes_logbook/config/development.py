import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "siwes_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Industry supervisor must forward a week before the school supervisor can approve it
TWO_TIER_APPROVAL = bool(int(os.getenv("TWO_TIER_APPROVAL", "1")))

# Empty means "use the session flagged is_current, if any"
CURRENT_SESSION_ID = int(os.getenv("CURRENT_SESSION_ID")) if os.getenv("CURRENT_SESSION_ID") else None

GRADING_ABORT_ON_DEGRADED_READ = bool(int(os.getenv("GRADING_ABORT_ON_DEGRADED_READ", "1")))
