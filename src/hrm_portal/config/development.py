import os

from . import env_flag, env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrm_portal"),
}

DEBUG = True
TESTING = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, the app applies schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Creates the first admin account when none exists
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
INITIAL_ADMIN_PASSWORD = os.getenv("INITIAL_ADMIN_PASSWORD", "admin123")

JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

API_PREFIX = os.getenv("API_PREFIX", "/api")
CORS_ORIGINS = env_list("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")

WORK_START_TIME = os.getenv("WORK_START_TIME", "08:30")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "15"))

ENABLE_IP_RESTRICTION = env_flag("ENABLE_IP_RESTRICTION", "0")
ALLOWED_IPS = env_list("ALLOWED_IPS", "127.0.0.1,::1")
ALLOWED_SUBNETS = env_list("ALLOWED_SUBNETS", "192.168.0.0/16")
