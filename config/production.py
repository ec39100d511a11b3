import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

QR_TOKEN = os.getenv("QR_TOKEN", "SCHOOL_CHECKIN_SYSTEM")
TEACHER_CHECKIN_CUTOFF = os.getenv("TEACHER_CHECKIN_CUTOFF", "09:30")

HISTORY_PAGE_SIZE = int(os.getenv("HISTORY_PAGE_SIZE", "50"))
STUDENT_PAGE_SIZE = int(os.getenv("STUDENT_PAGE_SIZE", "10"))
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
