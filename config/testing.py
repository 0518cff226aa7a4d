import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "robochamps_erp_test"),
}

SUPABASE_URL = ""
SUPABASE_SERVICE_KEY = ""
SHEETS_BUCKET = "combined-sheets"
ATTENDANCE_BUCKET = "robochamps-attendance"

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_RESET_SECRET = "test-reset-secret"
