"""
Admin endpoints - user and player approvals, role changes
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from pitchside.database import get_db
from pitchside.models.user import User, UserRole
from pitchside.models.player import Player
from pitchside.auth.utils import require_role
from pitchside.api.schemas import UserResponse, PlayerResponse, RoleUpdate, MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

admin_only = require_role(UserRole.ADMIN)


class ApprovalRequest(BaseModel):
    is_approved: bool = True


@router.get("/users", response_model=List[UserResponse])
def list_users(
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db),
):
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()


@router.get("/pending-users", response_model=List[UserResponse])
def pending_users(
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db),
):
    return db.query(User).filter_by(is_approved=False).order_by(User.id).all()


@router.patch("/users/{user_id}/approve", response_model=MessageResponse)
def approve_user(
    user_id: int,
    request: ApprovalRequest,
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db),
):
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    user.is_approved = request.is_approved
    db.commit()
    logger.info("User %s approval set to %s by admin %s", user_id, request.is_approved, current_user.id)
    return MessageResponse(message="User approval updated")


@router.patch("/users/{user_id}/role", response_model=MessageResponse)
def change_role(
    user_id: int,
    request: RoleUpdate,
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db),
):
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    user.role = UserRole(request.role.value)
    db.commit()
    logger.info("User %s role set to %s by admin %s", user_id, user.role.value, current_user.id)
    return MessageResponse(message="User role updated")


@router.get("/pending-players", response_model=List[PlayerResponse])
def pending_players(
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db),
):
    return db.query(Player).filter_by(is_approved=False).order_by(Player.id).all()


@router.patch("/players/{player_id}/approve", response_model=MessageResponse)
def approve_player(
    player_id: int,
    request: ApprovalRequest,
    current_user: User = Depends(admin_only),
    db: Session = Depends(get_db),
):
    player = db.get(Player, player_id)
    if player is None:
        raise HTTPException(status_code=404, detail="Player not found")
    player.is_approved = request.is_approved
    db.commit()
    logger.info("Player %s approval set to %s by admin %s", player_id, request.is_approved, current_user.id)
    return MessageResponse(message="Player approval updated")
