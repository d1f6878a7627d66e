import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost:8080/api/v1"),
    "timeout_seconds": float(os.getenv("API_TIMEOUT_SECONDS", "15")),
}

# Token used when the caller does not forward its own bearer token (unattended kiosk)
API_TOKEN = os.getenv("API_TOKEN")

# Default branch served by this front desk
BRANCH_ID = os.getenv("BRANCH_ID")

BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "America/Mexico_City")
VISIT_START_HOUR = int(os.getenv("VISIT_START_HOUR", "5"))
VISIT_END_HOUR = int(os.getenv("VISIT_END_HOUR", "23"))
REFRESH_INTERVAL_SECONDS = int(os.getenv("REFRESH_INTERVAL_SECONDS", "60"))
LEADERBOARD_LIMIT = int(os.getenv("LEADERBOARD_LIMIT", "10"))

DEBUG = True
