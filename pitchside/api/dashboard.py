"""
Role-specific dashboard endpoint
"""
from collections import Counter

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pitchside.config import settings
from pitchside.database import get_db
from pitchside.models.user import User, UserRole
from pitchside.models.team import Team
from pitchside.models.player import Player
from pitchside.models.match import Match, MatchStatus
from pitchside.engine.stats_engine import StatsEngine
from pitchside.auth.utils import get_current_user
from pitchside.api.fans import followed_teams, followed_players
from pitchside.api.schemas import (
    MatchResponse, MatchWithScores, PlayerResponse, PlayerCareerResponse, TeamResponse,
)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def _matches(db: Session, status: MatchStatus, newest_first: bool = True) -> list:
    order = Match.match_date.desc() if newest_first else Match.match_date.asc()
    return db.query(Match).filter_by(status=status).order_by(order).all()


def fan_dashboard(db: Session, user: User) -> dict:
    return {
        "followed_teams": followed_teams(db, user.id),
        "followed_players": [PlayerResponse.model_validate(p) for p in followed_players(db, user.id)],
        "live_matches": [MatchWithScores.model_validate(m) for m in _matches(db, MatchStatus.LIVE)],
        "upcoming_matches": [
            MatchResponse.model_validate(m) for m in _matches(db, MatchStatus.SCHEDULED, newest_first=False)
        ],
    }


def organizer_dashboard(db: Session, user: User) -> dict:
    teams = db.query(Team).filter_by(created_by_id=user.id).order_by(Team.name).all()
    matches = (
        db.query(Match)
        .filter_by(organizer_id=user.id)
        .order_by(Match.match_date.desc())
        .all()
    )
    counts = Counter(m.status.value for m in matches)
    return {
        "teams": [TeamResponse.model_validate(t) for t in teams],
        "matches": [MatchResponse.model_validate(m) for m in matches],
        "match_counts": {status.value: counts.get(status.value, 0) for status in MatchStatus},
    }


def player_dashboard(db: Session, user: User) -> dict:
    player = db.query(Player).filter_by(user_id=user.id).first()
    if player is None:
        return {"profile": None, "is_approved": False, "team": None, "career": None, "recent_stats": []}

    career = PlayerCareerResponse.model_validate(
        StatsEngine(db).player_career(player.id, recent_limit=settings.RECENT_STATS_LIMIT)
    )
    return {
        "profile": PlayerResponse.model_validate(player),
        "is_approved": player.is_approved,
        "team": TeamResponse.model_validate(player.team) if player.team else None,
        "career": career.model_dump(exclude={"recent"}),
        "recent_stats": career.recent,
    }


def admin_dashboard(db: Session, user: User) -> dict:
    return {
        "total_users": db.query(User).count(),
        "total_players": db.query(Player).count(),
        "total_teams": db.query(Team).count(),
        "total_matches": db.query(Match).count(),
        "pending_users": db.query(User).filter_by(is_approved=False).count(),
        "pending_players": db.query(Player).filter_by(is_approved=False).count(),
    }


DASHBOARDS = {
    UserRole.FAN: fan_dashboard,
    UserRole.ORGANIZER: organizer_dashboard,
    UserRole.PLAYER: player_dashboard,
    UserRole.ADMIN: admin_dashboard,
}


@router.get("")
def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Dashboard data for the current user's role"""
    data = DASHBOARDS[current_user.role](db, current_user)
    return {"role": current_user.role.value, **data}
