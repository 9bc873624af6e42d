"""
Configuration constants for the application.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).resolve().parent.parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

APP_NAME = os.getenv("APP_NAME", "CodeStreak")

# Length of the challenge. Used for the student "remaining" counter and
# the admin "total problems" statistic.
CHALLENGE_DAYS = int(os.getenv("CHALLENGE_DAYS", "45"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Debug routes (DB diagnostics) are only mounted when this is "1".
ENABLE_DEBUG_ROUTES = os.getenv("ENABLE_DEBUG_ROUTES", "0") == "1"

# Comma separated list of origins allowed to call the API from a browser.
ALLOWED_ORIGINS = [
    o.strip()
    for o in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]


def is_production() -> bool:
    """
    Detect if we're running in production (Railway, Heroku, etc).
    """
    return bool(
        os.getenv("RAILWAY_ENVIRONMENT") or
        os.getenv("ENVIRONMENT", "").lower() == "production" or
        os.getenv("HEROKU_APP_NAME")
    )
