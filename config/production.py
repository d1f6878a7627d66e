import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "https://api.example.invalid/api/v1"),
    "timeout_seconds": float(os.getenv("API_TIMEOUT_SECONDS", "15")),
}

API_TOKEN = os.getenv("API_TOKEN")
BRANCH_ID = os.getenv("BRANCH_ID")

BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "America/Mexico_City")
VISIT_START_HOUR = int(os.getenv("VISIT_START_HOUR", "5"))
VISIT_END_HOUR = int(os.getenv("VISIT_END_HOUR", "23"))
REFRESH_INTERVAL_SECONDS = int(os.getenv("REFRESH_INTERVAL_SECONDS", "60"))
LEADERBOARD_LIMIT = int(os.getenv("LEADERBOARD_LIMIT", "10"))

DEBUG = False
