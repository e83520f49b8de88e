import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "event_checkin"),
    "timeout": int(os.getenv("DB_TIMEOUT_SECONDS", "10")),
}

PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "")
QR_IMAGE_BASE_URL = os.getenv("QR_IMAGE_BASE_URL", "https://api.qrserver.com/v1/create-qr-code/")

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "logs/event_checkin.log")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
