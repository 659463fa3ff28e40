"""
Authentication API routes
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session
from google.oauth2 import id_token
from google.auth.transport import requests as google_requests

from pitchside.database import get_db
from pitchside.models.user import User, UserRole
from pitchside.auth.config import settings
from pitchside.auth.utils import (
    create_access_token,
    create_refresh_token,
    verify_token,
    get_current_user,
)
from pitchside.api.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class GoogleAuthRequest(BaseModel):
    token: str  # Google ID token from the frontend


class AuthResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: UserResponse


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


def verify_google_token(token: str) -> dict:
    """Verify a Google ID token and return its claims"""
    return id_token.verify_oauth2_token(
        token,
        google_requests.Request(),
        settings.GOOGLE_CLIENT_ID,
    )


def find_or_create_user(db: Session, idinfo: dict) -> User:
    """
    Match the Google identity to an account, creating one on first sign-in.
    New accounts get the default role and wait for admin approval, except
    emails listed in ADMIN_EMAILS.
    """
    google_id = idinfo["sub"]
    email = idinfo["email"]
    name = idinfo.get("name") or email.split("@")[0]
    picture = idinfo.get("picture")

    user = db.query(User).filter(User.google_id == google_id).first()
    if user is None:
        # Accounts created before Google sign-in are matched on email
        user = db.query(User).filter(User.email == email).first()

    if user is None:
        is_admin = email.lower() in settings.ADMIN_EMAILS
        user = User(
            email=email,
            google_id=google_id,
            full_name=name,
            avatar_url=picture,
            role=UserRole.ADMIN if is_admin else UserRole(settings.DEFAULT_ROLE),
            is_approved=is_admin,
        )
        db.add(user)
        logger.info("New account %s (%s)", email, user.role.value)
    else:
        user.google_id = google_id
        user.avatar_url = picture or user.avatar_url

    db.commit()
    db.refresh(user)
    return user


@router.post("/google", response_model=AuthResponse)
def google_auth(
    request: GoogleAuthRequest,
    db: Session = Depends(get_db),
):
    """
    Authenticate with Google.
    Verifies the Google ID token and creates/returns a user with JWT tokens.
    """
    try:
        idinfo = verify_google_token(request.token)
    except ValueError as e:
        logger.warning("Google token rejected: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid Google token: {str(e)}",
        )

    user = find_or_create_user(db, idinfo)

    return AuthResponse(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id),
        user=UserResponse.model_validate(user),
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(
    request: RefreshRequest,
    db: Session = Depends(get_db),
):
    """Refresh an access token using a valid refresh token."""
    user_id = verify_token(request.refresh_token, "refresh")

    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return TokenResponse(access_token=create_access_token(user.id))


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)


@router.post("/logout")
def logout(current_user: User = Depends(get_current_user)):
    """
    JWT tokens are stateless, so logging out is client-side cleanup only.
    """
    return {"message": "Logged out successfully"}
