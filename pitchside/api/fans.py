"""
Fan endpoints - following teams and players
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from pitchside.database import get_db
from pitchside.models.user import User, UserRole
from pitchside.models.team import Team
from pitchside.models.player import Player
from pitchside.models.follow import TeamFollow, PlayerFollow
from pitchside.auth.utils import get_current_user, require_role
from pitchside.api.schemas import (
    FollowTeamRequest, FollowPlayerRequest, FollowedTeamResponse, PlayerResponse, MessageResponse,
)

logger = logging.getLogger(__name__)

# Routes span /fan/... and /user/..., so no shared prefix
router = APIRouter(tags=["Fans"])

fan_only = require_role(UserRole.FAN)


def followed_teams(db: Session, user_id: int) -> List[FollowedTeamResponse]:
    """Teams a user follows, each with its total follower count"""
    teams = (
        db.query(Team)
        .join(TeamFollow, TeamFollow.team_id == Team.id)
        .filter(TeamFollow.user_id == user_id)
        .order_by(Team.name)
        .all()
    )
    if not teams:
        return []

    counts = dict(
        db.query(TeamFollow.team_id, func.count(TeamFollow.id))
        .filter(TeamFollow.team_id.in_([t.id for t in teams]))
        .group_by(TeamFollow.team_id)
        .all()
    )
    result = []
    for team in teams:
        entry = FollowedTeamResponse.model_validate(team)
        entry.follower_count = counts.get(team.id, 0)
        result.append(entry)
    return result


def followed_players(db: Session, user_id: int) -> List[Player]:
    return (
        db.query(Player)
        .join(PlayerFollow, PlayerFollow.player_id == Player.id)
        .filter(PlayerFollow.user_id == user_id)
        .order_by(Player.id)
        .all()
    )


@router.get("/fan/{user_id}/followed-teams", response_model=List[FollowedTeamResponse])
def get_fan_followed_teams(user_id: int, db: Session = Depends(get_db)):
    return followed_teams(db, user_id)


@router.get("/fan/{user_id}/followed-players", response_model=List[PlayerResponse])
def get_fan_followed_players(user_id: int, db: Session = Depends(get_db)):
    return followed_players(db, user_id)


@router.get("/user/followed-teams", response_model=List[FollowedTeamResponse])
def get_my_followed_teams(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return followed_teams(db, current_user.id)


@router.get("/user/followed-players", response_model=List[PlayerResponse])
def get_my_followed_players(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return followed_players(db, current_user.id)


@router.post("/fan/follow-team", response_model=MessageResponse)
def follow_team(
    request: FollowTeamRequest,
    current_user: User = Depends(fan_only),
    db: Session = Depends(get_db),
):
    if db.get(Team, request.team_id) is None:
        raise HTTPException(status_code=404, detail="Team not found")

    existing = db.query(TeamFollow).filter_by(user_id=current_user.id, team_id=request.team_id).first()
    if existing is None:
        db.add(TeamFollow(user_id=current_user.id, team_id=request.team_id))
        db.commit()
        logger.info("User %s followed team %s", current_user.id, request.team_id)
    return MessageResponse(message="Team followed successfully")


@router.post("/fan/unfollow-team", response_model=MessageResponse)
def unfollow_team(
    request: FollowTeamRequest,
    current_user: User = Depends(fan_only),
    db: Session = Depends(get_db),
):
    db.query(TeamFollow).filter_by(user_id=current_user.id, team_id=request.team_id).delete()
    db.commit()
    return MessageResponse(message="Team unfollowed successfully")


@router.post("/fan/follow-player", response_model=MessageResponse)
def follow_player(
    request: FollowPlayerRequest,
    current_user: User = Depends(fan_only),
    db: Session = Depends(get_db),
):
    if db.get(Player, request.player_id) is None:
        raise HTTPException(status_code=404, detail="Player not found")

    existing = db.query(PlayerFollow).filter_by(user_id=current_user.id, player_id=request.player_id).first()
    if existing is None:
        db.add(PlayerFollow(user_id=current_user.id, player_id=request.player_id))
        db.commit()
        logger.info("User %s followed player %s", current_user.id, request.player_id)
    return MessageResponse(message="Player followed successfully")


@router.post("/fan/unfollow-player", response_model=MessageResponse)
def unfollow_player(
    request: FollowPlayerRequest,
    current_user: User = Depends(fan_only),
    db: Session = Depends(get_db),
):
    db.query(PlayerFollow).filter_by(user_id=current_user.id, player_id=request.player_id).delete()
    db.commit()
    return MessageResponse(message="Player unfollowed successfully")
