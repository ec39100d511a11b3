import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance_test"),
}

QR_TOKEN = "TEST_CHECKIN"
TEACHER_CHECKIN_CUTOFF = "09:30"

HISTORY_PAGE_SIZE = 50
STUDENT_PAGE_SIZE = 10
PUBLIC_BASE_URL = ""

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = False
AUTO_SEED_DB = False
