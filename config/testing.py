import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "event_checkin_test"),
    "timeout": int(os.getenv("DB_TIMEOUT_SECONDS", "5")),
}

PUBLIC_BASE_URL = "http://testserver"
QR_IMAGE_BASE_URL = "https://api.qrserver.com/v1/create-qr-code/"

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
LOG_FILE = None

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
