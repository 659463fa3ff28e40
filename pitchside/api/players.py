"""
Player profile API endpoints
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pitchside.config import settings
from pitchside.database import get_db
from pitchside.models.user import User, UserRole
from pitchside.models.team import Team
from pitchside.models.player import Player, PlayerPosition
from pitchside.models.match import PlayerStat
from pitchside.engine.stats_engine import StatsEngine
from pitchside.auth.utils import get_current_user, require_role
from pitchside.api.schemas import (
    PlayerCreate, PlayerResponse, PlayerTeamUpdate, PlayerStatResponse,
    PlayerCareerResponse, MessageResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/players", tags=["Players"])


def get_player_or_404(db: Session, player_id: int) -> Player:
    player = db.get(Player, player_id)
    if player is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


@router.post("", response_model=PlayerResponse, status_code=201)
def create_player_profile(
    request: PlayerCreate,
    current_user: User = Depends(require_role(UserRole.PLAYER, UserRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """Create the current user's player profile (one per user)"""
    if db.query(Player).filter_by(user_id=current_user.id).first():
        raise HTTPException(status_code=409, detail="Player profile already exists")

    player = Player(
        user_id=current_user.id,
        position=PlayerPosition(request.position.value) if request.position else None,
        batting_style=request.batting_style,
        bowling_style=request.bowling_style,
    )
    db.add(player)
    db.commit()
    db.refresh(player)
    logger.info("Player profile %s created for user %s", player.id, current_user.id)
    return player


@router.get("", response_model=List[PlayerResponse])
def list_players(db: Session = Depends(get_db)):
    return db.query(Player).order_by(Player.id).all()


@router.get("/available", response_model=List[PlayerResponse])
def available_players(
    current_user: User = Depends(require_role(UserRole.ORGANIZER, UserRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """Players not signed to any team"""
    return db.query(Player).filter(Player.team_id.is_(None)).order_by(Player.id).all()


@router.get("/me", response_model=Optional[PlayerResponse])
def my_player_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return db.query(Player).filter_by(user_id=current_user.id).first()


@router.get("/{player_id}", response_model=PlayerResponse)
def get_player(player_id: int, db: Session = Depends(get_db)):
    return get_player_or_404(db, player_id)


@router.patch("/{player_id}/team", response_model=MessageResponse)
def update_player_team(
    player_id: int,
    request: PlayerTeamUpdate,
    current_user: User = Depends(require_role(UserRole.ORGANIZER, UserRole.ADMIN)),
    db: Session = Depends(get_db),
):
    """
    Sign a player to a team, or release them with team_id null.
    Organizers can only move players into or out of teams they created.
    """
    player = get_player_or_404(db, player_id)

    teams = []
    if request.team_id is not None:
        team = db.get(Team, request.team_id)
        if team is None:
            raise HTTPException(status_code=404, detail="Team not found")
        teams.append(team)
    if player.team is not None:
        teams.append(player.team)

    if current_user.role == UserRole.ORGANIZER:
        # Must own the team the player leaves as well as the one they join
        if not teams or any(t.created_by_id != current_user.id for t in teams):
            raise HTTPException(
                status_code=403,
                detail="You don't have permission to change players on this team",
            )

    player.team_id = request.team_id
    db.commit()
    logger.info("Player %s moved to team %s by user %s", player_id, request.team_id, current_user.id)
    return MessageResponse(message="Player team updated successfully")


@router.get("/{player_id}/stats", response_model=List[PlayerStatResponse])
def get_player_stats(player_id: int, db: Session = Depends(get_db)):
    """Per-match figures, most recent match first"""
    get_player_or_404(db, player_id)
    return (
        db.query(PlayerStat)
        .filter_by(player_id=player_id)
        .order_by(PlayerStat.match_id.desc())
        .all()
    )


@router.get("/{player_id}/career", response_model=PlayerCareerResponse)
def get_player_career(player_id: int, db: Session = Depends(get_db)):
    career = StatsEngine(db).player_career(player_id, recent_limit=settings.RECENT_STATS_LIMIT)
    return PlayerCareerResponse.model_validate(career)
