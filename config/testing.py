SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": "http://backend.test/api/v1",
    "timeout_seconds": 5,
}

API_TOKEN = "test-token"
BRANCH_ID = "branch-1"

BUSINESS_TIMEZONE = "America/Mexico_City"
VISIT_START_HOUR = 5
VISIT_END_HOUR = 23
REFRESH_INTERVAL_SECONDS = 60
LEADERBOARD_LIMIT = 10

DEBUG = False
TESTING = True
