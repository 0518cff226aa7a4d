import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "robochamps_erp"),
}

# Blob storage for sheet files and attendance photos
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")
SHEETS_BUCKET = os.getenv("SHEETS_BUCKET", "combined-sheets")
ATTENDANCE_BUCKET = os.getenv("ATTENDANCE_BUCKET", "robochamps-attendance")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the first admin account from ADMIN_EMAIL / ADMIN_PASSWORD
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
# Shared secret for POST /api/admin/reset-password; the route is disabled while empty
ADMIN_RESET_SECRET = os.getenv("ADMIN_RESET_SECRET", "")
