# common/constants.py
from typing import Any, Dict, List

API_NAME = "Apple Music Analytics API"
API_VERSION = "1.0.0"

# Subscription selector that disables the tier filter on /api/users/zombies
ALL_SUBSCRIPTIONS = "All"

# Age buckets are [lower, next_lower); anything outside falls into "Unknown"
AGE_BUCKET_BOUNDARIES: List[int] = [0, 15, 21, 31, 41, 51, 100]
UNKNOWN_AGE_RANGE = "Unknown"
AGE_RANGE_LABELS: Dict[int, str] = {
    0: "0-14",
    15: "15-20",
    21: "21-30",
    31: "31-40",
    41: "41-50",
    51: "51+",
}
MILLISECONDS_PER_YEAR = 365.25 * 24 * 60 * 60 * 1000

DEFAULT_WINDOW_DAYS = 30
DEFAULT_CHART_DAYS = 7
DEFAULT_CHART_LIMIT = 10
DEFAULT_TOP_FANS_LIMIT = 5
DEFAULT_RATE_PER_STREAM = 0.01
DEFAULT_RATE_PER_MINUTE = 0.0
DEFAULT_SUBSCRIPTION = "Premium"

ZOMBIE_USER_PROJECTION: Dict[str, Any] = {
    "_id": 0,
    "user_id": "$_id",
    "username": 1,
    "email": 1,
    "subscription": 1,
    "country": 1,
    "last_activity": {"$literal": None},
}

ENDPOINT_CATALOG: List[Dict[str, str]] = [
    {"method": "GET", "path": "/api/royalties", "description": "Royalty report per artist"},
    {"method": "GET", "path": "/api/charts/top-songs", "description": "Top songs by region"},
    {"method": "GET", "path": "/api/users/zombies", "description": "Inactive users (churn risk)"},
    {"method": "GET", "path": "/api/demographics/genre", "description": "Listener demographics by genre"},
    {"method": "GET", "path": "/api/users/top-fans", "description": "Top fans of an artist"},
]
