"""
Tournament statistics endpoints
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pitchside.database import get_db
from pitchside.engine.stats_engine import StatsEngine
from pitchside.api.schemas import OverviewResponse, TeamStandingResponse

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("/overview", response_model=OverviewResponse)
def tournament_overview(db: Session = Depends(get_db)):
    """Match counts by status, run and wicket totals, leaders"""
    return StatsEngine(db).tournament_overview()


@router.get("/standings", response_model=List[TeamStandingResponse])
def team_standings(db: Session = Depends(get_db)):
    return StatsEngine(db).team_standings()
