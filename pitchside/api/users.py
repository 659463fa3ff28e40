"""
User profile endpoints
"""
import re

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pitchside.database import get_db
from pitchside.models.user import User
from pitchside.auth.utils import get_current_user
from pitchside.api.schemas import ProfileUpdate, UserResponse

router = APIRouter(prefix="/users", tags=["Users"])

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    request: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not request.full_name or not request.full_name.strip():
        raise HTTPException(status_code=400, detail="Full name is required")

    if request.email:
        if not EMAIL_PATTERN.match(request.email):
            raise HTTPException(status_code=400, detail="Invalid email format")
        if request.email != current_user.email:
            existing = db.query(User).filter(User.email == request.email).first()
            if existing is not None and existing.id != current_user.id:
                raise HTTPException(status_code=400, detail="Email already in use")
        current_user.email = request.email

    current_user.full_name = request.full_name.strip()
    current_user.phone = request.phone
    current_user.bio = request.bio
    db.commit()
    db.refresh(current_user)
    return current_user
