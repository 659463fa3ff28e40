"""
Shared fixtures: in-memory database, API client and model factories.
"""
import os
from datetime import datetime, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pitchside.database import Base, get_db
from pitchside.models import (
    User, UserRole, Team, Player, PlayerPosition, Match, MatchStatus, MatchType,
)
from pitchside.auth.utils import create_access_token
from main import app


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(db_engine):
    """Create an in-memory test database session."""
    TestingSession = sessionmaker(bind=db_engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def client(db_engine):
    """API client whose requests share the in-memory database."""
    TestingSession = sessionmaker(bind=db_engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ----------------------------------------------------------------------
# Factories
# ----------------------------------------------------------------------

_counter = {"n": 0}


def _next() -> int:
    _counter["n"] += 1
    return _counter["n"]


def make_user(db, role: UserRole = UserRole.FAN, approved: bool = True, name: str = None) -> User:
    n = _next()
    user = User(
        email=f"user{n}@example.com",
        google_id=f"google-{n}",
        full_name=name or f"User {n}",
        role=role,
        is_approved=approved,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_team(db, name: str = None, created_by: User = None) -> Team:
    team = Team(
        name=name or f"Team {_next()}",
        location="Test City",
        created_by_id=created_by.id if created_by else None,
    )
    db.add(team)
    db.commit()
    db.refresh(team)
    return team


def make_player(db, team: Team = None, name: str = None, approved: bool = True,
                position: PlayerPosition = PlayerPosition.ALL_ROUNDER) -> Player:
    user = make_user(db, UserRole.PLAYER, name=name)
    player = Player(
        user_id=user.id,
        team_id=team.id if team else None,
        position=position,
        is_approved=approved,
    )
    db.add(player)
    db.commit()
    db.refresh(player)
    return player


def make_match(db, team1: Team, team2: Team, organizer: User,
               status: MatchStatus = MatchStatus.SCHEDULED,
               match_type: MatchType = MatchType.T20,
               days_from_now: int = 0) -> Match:
    match = Match(
        team1_id=team1.id,
        team2_id=team2.id,
        venue="Test Ground",
        match_date=datetime.utcnow() + timedelta(days=days_from_now),
        match_type=match_type,
        status=status,
        organizer_id=organizer.id,
    )
    db.add(match)
    db.commit()
    db.refresh(match)
    return match


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def organizer(db):
    return make_user(db, UserRole.ORGANIZER, name="Olivia Organizer")


@pytest.fixture
def admin(db):
    return make_user(db, UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
def fan(db):
    return make_user(db, UserRole.FAN, name="Fred Fan")


@pytest.fixture
def two_teams(db, organizer):
    """Two teams with three players each: (team, [players]) pairs"""
    lions = make_team(db, "Lions", organizer)
    tigers = make_team(db, "Tigers", organizer)
    lion_players = [make_player(db, lions, f"Lion {i}") for i in range(1, 4)]
    tiger_players = [make_player(db, tigers, f"Tiger {i}") for i in range(1, 4)]
    return (lions, lion_players), (tigers, tiger_players)


@pytest.fixture
def live_match(db, organizer, two_teams):
    (lions, _), (tigers, _) = two_teams
    return make_match(db, lions, tigers, organizer, status=MatchStatus.LIVE)
