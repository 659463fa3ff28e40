"""
Authentication configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


class AuthSettings:
    """Authentication settings from environment variables"""

    # JWT settings
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

    # Google sign-in
    GOOGLE_CLIENT_ID: str = os.getenv("GOOGLE_CLIENT_ID", os.getenv("OAUTH2_CLIENT_ID", ""))

    # Role given to accounts on first sign-in
    DEFAULT_ROLE: str = os.getenv("DEFAULT_ROLE", "fan")

    # Comma-separated emails that become approved admins on first sign-in
    ADMIN_EMAILS: list[str] = [
        e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "").split(",") if e.strip()
    ]


settings = AuthSettings()
