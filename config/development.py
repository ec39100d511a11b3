import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

# Secret encoded (with the school id) in each school's teacher check-in QR code
QR_TOKEN = os.getenv("QR_TOKEN", "SCHOOL_CHECKIN_SYSTEM")
TEACHER_CHECKIN_CUTOFF = os.getenv("TEACHER_CHECKIN_CUTOFF", "09:30")

HISTORY_PAGE_SIZE = int(os.getenv("HISTORY_PAGE_SIZE", "50"))
STUDENT_PAGE_SIZE = int(os.getenv("STUDENT_PAGE_SIZE", "10"))

# Prefix for the student marking link put into QR codes; empty = the request host
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
