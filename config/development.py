import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_backoffice"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also upsert one demo identity per role on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Attendance / payroll rules
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))
LATE_COUNTS_AS_PRESENT = bool(int(os.getenv("LATE_COUNTS_AS_PRESENT", "0")))

# Admin login second factor
ADMIN_OTP_REQUIRED = bool(int(os.getenv("ADMIN_OTP_REQUIRED", "0")))
OTP_TTL_SECONDS = int(os.getenv("OTP_TTL_SECONDS", "300"))
