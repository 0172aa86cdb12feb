import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrm_portal_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
INITIAL_ADMIN_PASSWORD = "admin123"

JWT_SECRET = "test-jwt-secret"
JWT_EXPIRATION_HOURS = 1

API_PREFIX = "/api"
CORS_ORIGINS = ["http://localhost:3000"]

WORK_START_TIME = "08:30"
LATE_GRACE_MINUTES = 15

ENABLE_IP_RESTRICTION = False
ALLOWED_IPS = ["127.0.0.1"]
ALLOWED_SUBNETS = ["10.0.0.0/8"]
