import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "ritual_sessions"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

OFF_DAY = os.getenv("OFF_DAY", "sunday")
STANDUP_TIME = os.getenv("STANDUP_TIME", "09:00")
STANDUP_DURATION_MINUTES = int(os.getenv("STANDUP_DURATION_MINUTES", "15"))
STREAK_CURRENT_MONTH_ONLY = bool(int(os.getenv("STREAK_CURRENT_MONTH_ONLY", "0")))
