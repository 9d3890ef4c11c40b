import os

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
JWT_ACCESS_TTL = 3600

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_payroll_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"

WORKDAY_START = "09:00"
WORKDAY_END = "17:00"
LATE_GRACE_MINUTES = 5
HALF_DAY_CUTOFF = "12:00"
