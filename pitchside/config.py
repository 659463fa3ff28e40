"""
Application configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


class AppSettings:
    """Application settings from environment variables"""

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"sqlite:///{os.getenv('DATABASE_PATH', 'pitchside.db')}",
    )
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "")

    # Extra CORS origins (comma-separated)
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    # Listing endpoints
    RECENT_STATS_LIMIT: int = 5
    LAST_BALLS_SHOWN: int = 6


settings = AppSettings()
