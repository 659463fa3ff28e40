"""
Team API endpoints
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
from pitchside.models.follow import TeamFollow
from pitchside.engine.stats_engine import StatsEngine
from pitchside.auth.utils import get_current_user, require_role
from pitchside.api.schemas import (
    TeamCreate, TeamResponse, TeamDetail, PlayerResponse, TeamRecordResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["Teams"])


def get_team_or_404(db: Session, team_id: int) -> Team:
    team = db.get(Team, team_id)
    if team is None:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


def follower_count(db: Session, team_id: int) -> int:
    return db.query(func.count(TeamFollow.id)).filter(TeamFollow.team_id == team_id).scalar() or 0


@router.get("", response_model=List[TeamResponse])
def list_teams(db: Session = Depends(get_db)):
    """All teams by name"""
    return db.query(Team).order_by(Team.name).all()


@router.post("", response_model=TeamResponse, status_code=201)
def create_team(
    request: TeamCreate,
    current_user: User = Depends(require_role(UserRole.ORGANIZER, UserRole.ADMIN)),
    db: Session = Depends(get_db),
):
    team = Team(
        name=request.name.strip(),
        location=request.location.strip(),
        logo_url=request.logo_url,
        created_by_id=current_user.id,
    )
    db.add(team)
    db.commit()
    db.refresh(team)
    logger.info("Team %s '%s' created by user %s", team.id, team.name, current_user.id)
    return team


@router.get("/my", response_model=List[TeamResponse])
def my_teams(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Teams the current user registered"""
    return db.query(Team).filter_by(created_by_id=current_user.id).order_by(Team.name).all()


@router.get("/{team_id}", response_model=TeamDetail)
def get_team(team_id: int, db: Session = Depends(get_db)):
    team = get_team_or_404(db, team_id)
    detail = TeamDetail.model_validate(team)
    detail.squad_size = team.squad_size
    detail.follower_count = follower_count(db, team_id)
    return detail


@router.get("/{team_id}/players", response_model=List[PlayerResponse])
def get_team_players(team_id: int, db: Session = Depends(get_db)):
    get_team_or_404(db, team_id)
    return db.query(Player).filter_by(team_id=team_id).order_by(Player.id).all()


@router.get("/{team_id}/record", response_model=TeamRecordResponse)
def get_team_record(team_id: int, db: Session = Depends(get_db)):
    """Standing plus live and upcoming fixtures"""
    return StatsEngine(db).team_record(team_id)
