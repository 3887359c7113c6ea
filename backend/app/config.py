# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Habit Tracker API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Calendar used for day/week boundaries (IANA name)
    TIMEZONE: str = os.getenv("TIMEZONE", "UTC")

    # Upper bound for a single database round trip, in seconds
    DB_TIMEOUT_SECONDS: float = float(os.getenv("DB_TIMEOUT_SECONDS", "10"))
    # Create tables at startup instead of relying on Aerich (local dev only)
    DB_GENERATE_SCHEMAS: bool = os.getenv("DB_GENERATE_SCHEMAS", "false").lower() in ("true", "1", "yes")

    # Auth cookie
    AUTH_COOKIE_NAME: str = "auth-token"
    AUTH_COOKIE_MAX_AGE: int = 60 * 60 * 24 * 7  # 7 days
    COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "true").lower() in ("true", "1", "yes")

    # Activity feed
    FEED_LIMIT: int = int(os.getenv("FEED_LIMIT", "50"))

settings = Settings()  # Instantiate configuration
