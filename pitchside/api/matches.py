"""
Match API endpoints - fixtures, live scoring, scorecards
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pitchside.config import settings
from pitchside.database import get_db
from pitchside.models.user import User, UserRole
from pitchside.models.team import Team
from pitchside.models.player import Player
from pitchside.models.match import (
    Match, MatchScore, PlayerStat, BallEvent, MatchStatus, MatchType,
)
from pitchside.engine.scoring_engine import ScoringEngine
from pitchside.engine.scorecard import (
    build_batting_card, build_bowling_card, events_for_innings, summarize_innings,
)
from pitchside.engine.stats_engine import StatsEngine
from pitchside.errors import PermissionDeniedError
from pitchside.validators.match_validator import MatchValidator
from pitchside.auth.utils import require_role
from pitchside.api.schemas import (
    MatchCreate, MatchResponse, MatchWithScores, StatusUpdate,
    ScoreCreate, ScoreUpdate, ScoreResponse, BallCreate, BallResponse,
    PlayerStatUpsert, PlayerStatResponse, MatchStateResponse,
    ScorecardResponse, InningsCard, BattingEntry, BowlingEntry,
    TopPerformersResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/matches", tags=["Matches"])

scorer_role = require_role(UserRole.ORGANIZER, UserRole.ADMIN)


def get_match_or_404(db: Session, match_id: int) -> Match:
    match = db.get(Match, match_id)
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return match


def get_scoring_engine(db: Session, match_id: int, user: User) -> ScoringEngine:
    """Engine for a match the user may score: an admin, or the organizer who created it"""
    match = get_match_or_404(db, match_id)
    if user.role != UserRole.ADMIN and match.organizer_id != user.id:
        logger.warning("User %s tried to score match %s they do not organize", user.id, match_id)
        raise PermissionDeniedError("Only the match organizer can update this match")
    return ScoringEngine(db, match)


def _player_names(db: Session, player_ids) -> dict:
    ids = [pid for pid in set(player_ids) if pid is not None]
    if not ids:
        return {}
    return {p.id: p.full_name for p in db.query(Player).filter(Player.id.in_(ids)).all()}


# ----------------------------------------------------------------------
# Listings
# ----------------------------------------------------------------------

@router.get("", response_model=List[MatchResponse])
def list_matches(db: Session = Depends(get_db)):
    """All matches, newest first"""
    return db.query(Match).order_by(Match.match_date.desc(), Match.id.desc()).all()


@router.get("/live", response_model=List[MatchWithScores])
def live_matches(db: Session = Depends(get_db)):
    return (
        db.query(Match)
        .filter_by(status=MatchStatus.LIVE)
        .order_by(Match.match_date.desc())
        .all()
    )


@router.get("/upcoming", response_model=List[MatchResponse])
def upcoming_matches(db: Session = Depends(get_db)):
    """Scheduled matches, soonest first"""
    return (
        db.query(Match)
        .filter_by(status=MatchStatus.SCHEDULED)
        .order_by(Match.match_date.asc())
        .all()
    )


@router.get("/completed", response_model=List[MatchWithScores])
def completed_matches(db: Session = Depends(get_db)):
    return (
        db.query(Match)
        .filter_by(status=MatchStatus.COMPLETED)
        .order_by(Match.match_date.desc())
        .all()
    )


@router.get("/organizer", response_model=List[MatchResponse])
def organizer_matches(
    current_user: User = Depends(scorer_role),
    db: Session = Depends(get_db),
):
    """Matches the current organizer created"""
    return (
        db.query(Match)
        .filter_by(organizer_id=current_user.id)
        .order_by(Match.match_date.desc())
        .all()
    )


@router.get("/scores", response_model=List[MatchWithScores])
def matches_with_scores(db: Session = Depends(get_db)):
    """Matches that have at least one innings score"""
    return (
        db.query(Match)
        .join(MatchScore, MatchScore.match_id == Match.id)
        .distinct()
        .order_by(Match.match_date.desc())
        .all()
    )


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------

@router.post("", response_model=MatchResponse, status_code=201)
def create_match(
    request: MatchCreate,
    current_user: User = Depends(scorer_role),
    db: Session = Depends(get_db),
):
    check = MatchValidator.validate_new_match(request.team1_id, request.team2_id, request.venue)
    if not check["valid"]:
        raise HTTPException(status_code=400, detail="; ".join(check["errors"]))

    for team_id in (request.team1_id, request.team2_id):
        if db.get(Team, team_id) is None:
            raise HTTPException(status_code=404, detail=f"Team {team_id} not found")

    match = Match(
        team1_id=request.team1_id,
        team2_id=request.team2_id,
        venue=request.venue.strip(),
        match_date=request.match_date,
        match_type=MatchType(request.match_type.value),
        status=MatchStatus.SCHEDULED,
        organizer_id=current_user.id,
    )
    db.add(match)
    db.commit()
    db.refresh(match)
    logger.info("Match %s scheduled by user %s", match.id, current_user.id)
    return match


@router.get("/{match_id}", response_model=MatchWithScores)
def get_match(match_id: int, db: Session = Depends(get_db)):
    return get_match_or_404(db, match_id)


@router.patch("/{match_id}/status", response_model=MatchResponse)
def update_match_status(
    match_id: int,
    request: StatusUpdate,
    current_user: User = Depends(scorer_role),
    db: Session = Depends(get_db),
):
    engine = get_scoring_engine(db, match_id, current_user)
    return engine.transition(MatchStatus(request.status.value))


# ----------------------------------------------------------------------
# Scores
# ----------------------------------------------------------------------

@router.get("/{match_id}/scores", response_model=List[ScoreResponse])
def get_scores(match_id: int, db: Session = Depends(get_db)):
    return ScoringEngine(db, get_match_or_404(db, match_id)).get_scores()


@router.post("/{match_id}/scores", response_model=ScoreResponse, status_code=201)
def add_score(
    match_id: int,
    request: ScoreCreate,
    current_user: User = Depends(scorer_role),
    db: Session = Depends(get_db),
):
    engine = get_scoring_engine(db, match_id, current_user)
    data = request.model_dump(exclude={"team_id", "innings"})
    return engine.add_score(request.team_id, request.innings, **data)


@router.patch("/{match_id}/scores/{team_id}", response_model=ScoreResponse)
def update_score(
    match_id: int,
    team_id: int,
    request: ScoreUpdate,
    current_user: User = Depends(scorer_role),
    db: Session = Depends(get_db),
):
    engine = get_scoring_engine(db, match_id, current_user)
    data = request.model_dump(exclude={"innings"}, exclude_none=True)
    return engine.update_score(team_id, data, innings=request.innings)


# ----------------------------------------------------------------------
# Ball by ball
# ----------------------------------------------------------------------

@router.get("/{match_id}/balls", response_model=List[BallResponse])
def get_balls(match_id: int, innings: Optional[int] = None, db: Session = Depends(get_db)):
    return ScoringEngine(db, get_match_or_404(db, match_id)).get_balls(innings)


@router.post("/{match_id}/balls", response_model=BallResponse, status_code=201)
def record_ball(
    match_id: int,
    request: BallCreate,
    current_user: User = Depends(scorer_role),
    db: Session = Depends(get_db),
):
    engine = get_scoring_engine(db, match_id, current_user)
    return engine.record_ball(request.model_dump())


@router.get("/{match_id}/latest-ball", response_model=Optional[BallResponse])
def latest_ball(match_id: int, db: Session = Depends(get_db)):
    get_match_or_404(db, match_id)
    return (
        db.query(BallEvent)
        .filter_by(match_id=match_id)
        .order_by(BallEvent.id.desc())
        .first()
    )


# ----------------------------------------------------------------------
# Player stats
# ----------------------------------------------------------------------

@router.get("/{match_id}/player-stats", response_model=List[PlayerStatResponse])
def get_player_stats(match_id: int, db: Session = Depends(get_db)):
    get_match_or_404(db, match_id)
    return db.query(PlayerStat).filter_by(match_id=match_id).order_by(PlayerStat.id).all()


@router.post("/{match_id}/player-stats", response_model=PlayerStatResponse)
def upsert_player_stats(
    match_id: int,
    request: PlayerStatUpsert,
    current_user: User = Depends(scorer_role),
    db: Session = Depends(get_db),
):
    engine = get_scoring_engine(db, match_id, current_user)
    return engine.upsert_player_stat(request.player_id, request.model_dump(exclude={"player_id"}))


# ----------------------------------------------------------------------
# Live state and summaries
# ----------------------------------------------------------------------

@router.get("/{match_id}/state", response_model=MatchStateResponse)
def get_match_state(match_id: int, db: Session = Depends(get_db)):
    """Live view: scores, target, next ball, recent deliveries, win probability"""
    engine = ScoringEngine(db, get_match_or_404(db, match_id))
    return engine.state(last_count=settings.LAST_BALLS_SHOWN)


@router.get("/{match_id}/scorecard", response_model=ScorecardResponse)
def get_scorecard(match_id: int, db: Session = Depends(get_db)):
    """
    Full scorecard. Innings with a ball feed get batting and bowling cards;
    innings scored by hand only carry their totals.
    """
    match = get_match_or_404(db, match_id)
    engine = ScoringEngine(db, match)
    events = engine.get_balls()
    names = _player_names(db, [e.batsman_id for e in events] + [e.bowler_id for e in events]
                          + [e.dismissed_player_id for e in events])
    team_names = {match.team1_id: match.team1.name, match.team2_id: match.team2.name}

    cards = []
    for score in engine.get_scores():
        innings_events = events_for_innings(events, score.innings)
        card = InningsCard(
            innings=score.innings,
            team_id=score.team_id,
            team_name=team_names.get(score.team_id),
            runs=score.runs or 0,
            wickets=score.wickets or 0,
            overs=score.overs,
            extras=score.extras or 0,
            run_rate=score.run_rate,
        )
        if innings_events:
            summary = summarize_innings(innings_events, score.innings)
            card.run_rate = summary.run_rate
            card.batting = [
                BattingEntry(
                    player_id=b.player_id,
                    player_name=names.get(b.player_id, f"Player #{b.player_id}"),
                    runs=b.runs, balls=b.balls, fours=b.fours, sixes=b.sixes,
                    strike_rate=b.strike_rate, is_out=b.is_out, dismissal=b.dismissal,
                )
                for b in build_batting_card(innings_events)
            ]
            card.bowling = [
                BowlingEntry(
                    player_id=s.player_id,
                    player_name=names.get(s.player_id, f"Player #{s.player_id}"),
                    overs=s.overs, runs=s.runs, wickets=s.wickets,
                    wides=s.wides, no_balls=s.no_balls, economy=s.economy,
                )
                for s in build_bowling_card(innings_events)
            ]
        cards.append(card)

    return ScorecardResponse(match_id=match.id, result_summary=match.result_summary, innings=cards)


@router.get("/{match_id}/top-performers", response_model=TopPerformersResponse)
def get_top_performers(match_id: int, db: Session = Depends(get_db)):
    batsman, bowler = StatsEngine(db).match_top_performers(match_id)
    return TopPerformersResponse(
        top_batsman=PlayerStatResponse.model_validate(batsman) if batsman else None,
        top_batsman_name=batsman.player.full_name if batsman else None,
        top_bowler=PlayerStatResponse.model_validate(bowler) if bowler else None,
        top_bowler_name=bowler.player.full_name if bowler else None,
    )
