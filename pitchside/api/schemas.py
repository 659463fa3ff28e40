"""
Pydantic schemas for API request/response models
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


# Enums
class UserRoleEnum(str, Enum):
    FAN = "fan"
    ORGANIZER = "organizer"
    PLAYER = "player"
    ADMIN = "admin"


class PlayerPositionEnum(str, Enum):
    BATSMAN = "batsman"
    BOWLER = "bowler"
    ALL_ROUNDER = "all_rounder"
    WICKET_KEEPER = "wicket_keeper"


class MatchStatusEnum(str, Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MatchTypeEnum(str, Enum):
    T20 = "T20"
    ODI = "ODI"
    TEST = "Test"


class ExtraTypeEnum(str, Enum):
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"


class WicketTypeEnum(str, Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    STUMPED = "stumped"
    RUN_OUT = "run_out"
    HIT_WICKET = "hit_wicket"


# User Schemas
class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    avatar_url: Optional[str] = None
    role: UserRoleEnum
    is_approved: bool
    phone: Optional[str] = None
    bio: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None


class RoleUpdate(BaseModel):
    role: UserRoleEnum


# Team Schemas
class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    location: str = Field(min_length=1, max_length=100)
    logo_url: Optional[str] = None


class TeamResponse(BaseModel):
    id: int
    name: str
    location: str
    logo_url: Optional[str] = None
    created_by_id: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TeamDetail(TeamResponse):
    squad_size: int = 0
    follower_count: int = 0


class FollowedTeamResponse(TeamResponse):
    follower_count: int = 0


# Player Schemas
class PlayerCreate(BaseModel):
    position: Optional[PlayerPositionEnum] = None
    batting_style: Optional[str] = None
    bowling_style: Optional[str] = None


class PlayerResponse(BaseModel):
    id: int
    user_id: int
    full_name: str
    team_id: Optional[int] = None
    team_name: Optional[str] = None
    position: Optional[PlayerPositionEnum] = None
    batting_style: Optional[str] = None
    bowling_style: Optional[str] = None
    is_approved: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PlayerTeamUpdate(BaseModel):
    team_id: Optional[int] = None  # None releases the player


# Match Schemas
class MatchCreate(BaseModel):
    team1_id: int
    team2_id: int
    venue: str
    match_date: datetime
    match_type: MatchTypeEnum = MatchTypeEnum.T20


class MatchResponse(BaseModel):
    id: int
    team1_id: int
    team2_id: int
    venue: str
    match_date: datetime
    match_type: MatchTypeEnum
    status: MatchStatusEnum
    winner_id: Optional[int] = None
    result_summary: Optional[str] = None
    organizer_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StatusUpdate(BaseModel):
    status: MatchStatusEnum


class ScoreCreate(BaseModel):
    team_id: int
    innings: int = Field(ge=1, le=4)
    runs: int = 0
    wickets: int = 0
    overs: str = "0.0"
    extras: int = 0


class ScoreUpdate(BaseModel):
    innings: Optional[int] = None
    runs: Optional[int] = None
    wickets: Optional[int] = None
    overs: Optional[str] = None
    extras: Optional[int] = None


class ScoreResponse(BaseModel):
    id: int
    match_id: int
    team_id: int
    innings: int
    runs: int
    wickets: int
    overs: str
    extras: int
    run_rate: float
    display: str

    class Config:
        from_attributes = True


class MatchWithScores(MatchResponse):
    scores: List[ScoreResponse] = []


class BallCreate(BaseModel):
    innings: int = Field(ge=1, le=4)
    over: int = Field(ge=1)
    ball: int = Field(ge=1, le=6)
    batting_team_id: Optional[int] = None  # needed when the ball opens an innings
    batsman_id: Optional[int] = None
    bowler_id: Optional[int] = None
    fielder_id: Optional[int] = None
    runs: int = Field(default=0, ge=0, le=6)
    extras: int = Field(default=0, ge=0)
    extra_type: Optional[ExtraTypeEnum] = None
    is_wicket: bool = False
    wicket_type: Optional[WicketTypeEnum] = None
    dismissed_player_id: Optional[int] = None


class BallResponse(BaseModel):
    id: int
    match_id: int
    innings: int
    over: int
    ball: int
    batsman_id: Optional[int] = None
    bowler_id: Optional[int] = None
    fielder_id: Optional[int] = None
    runs: int
    extras: int
    extra_type: Optional[ExtraTypeEnum] = None
    is_wicket: bool
    wicket_type: Optional[WicketTypeEnum] = None
    dismissed_player_id: Optional[int] = None
    total_runs: int
    timestamp: Optional[datetime] = None

    class Config:
        from_attributes = True


class PlayerStatUpsert(BaseModel):
    player_id: int
    runs: Optional[int] = Field(default=None, ge=0)
    balls_faced: Optional[int] = Field(default=None, ge=0)
    fours: Optional[int] = Field(default=None, ge=0)
    sixes: Optional[int] = Field(default=None, ge=0)
    is_out: Optional[bool] = None
    wickets_taken: Optional[int] = Field(default=None, ge=0, le=10)
    overs_bowled: Optional[str] = None
    runs_conceded: Optional[int] = Field(default=None, ge=0)
    catches: Optional[int] = Field(default=None, ge=0)
    stumps: Optional[int] = Field(default=None, ge=0)
    run_outs: Optional[int] = Field(default=None, ge=0)


class PlayerStatResponse(BaseModel):
    id: int
    player_id: int
    match_id: int
    runs: int
    balls_faced: int
    fours: int
    sixes: int
    is_out: bool
    wickets_taken: int
    overs_bowled: str
    runs_conceded: int
    catches: int
    stumps: int
    run_outs: int
    strike_rate: float
    economy_rate: float

    class Config:
        from_attributes = True


# Live state / scorecard
class InningsStateResponse(BaseModel):
    innings: int
    team_id: int
    runs: int
    wickets: int
    overs: str
    extras: int
    run_rate: float
    is_complete: bool

    class Config:
        from_attributes = True


class MatchStateResponse(BaseModel):
    match_id: int
    status: str
    match_type: str
    current_innings: Optional[int] = None
    innings: List[InningsStateResponse] = []
    target: Optional[int] = None
    runs_needed: Optional[int] = None
    required_run_rate: Optional[float] = None
    balls_remaining: Optional[int] = None
    next_over: int
    next_ball: int
    last_balls: List[str] = []
    innings_complete: bool
    win_probability: Optional[dict] = None
    winner_id: Optional[int] = None
    result_summary: Optional[str] = None

    class Config:
        from_attributes = True


class BattingEntry(BaseModel):
    player_id: int
    player_name: str
    runs: int
    balls: int
    fours: int
    sixes: int
    strike_rate: float
    is_out: bool
    dismissal: Optional[str] = None


class BowlingEntry(BaseModel):
    player_id: int
    player_name: str
    overs: str
    runs: int
    wickets: int
    wides: int
    no_balls: int
    economy: float


class InningsCard(BaseModel):
    innings: int
    team_id: Optional[int] = None
    team_name: Optional[str] = None
    runs: int
    wickets: int
    overs: str
    extras: int
    run_rate: float
    batting: List[BattingEntry] = []
    bowling: List[BowlingEntry] = []


class ScorecardResponse(BaseModel):
    match_id: int
    result_summary: Optional[str] = None
    innings: List[InningsCard] = []


class TopPerformersResponse(BaseModel):
    top_batsman: Optional[PlayerStatResponse] = None
    top_batsman_name: Optional[str] = None
    top_bowler: Optional[PlayerStatResponse] = None
    top_bowler_name: Optional[str] = None


# Stats
class TeamStandingResponse(BaseModel):
    position: int
    team_id: int
    team_name: str
    played: int
    won: int
    lost: int
    no_result: int
    points: int
    win_rate: float
    nrr: float
    average_score: float
    highest_score: int

    class Config:
        from_attributes = True


class TeamRecordResponse(BaseModel):
    standing: TeamStandingResponse
    live: List[MatchResponse] = []
    upcoming: List[MatchResponse] = []


class LeaderResponse(BaseModel):
    player_id: int
    player_name: str
    value: int

    class Config:
        from_attributes = True


class OverviewResponse(BaseModel):
    total_matches: int
    completed: int
    live: int
    upcoming: int
    cancelled: int
    completed_share: float
    live_share: float
    upcoming_share: float
    total_runs: int
    total_wickets: int
    most_successful_team: Optional[TeamStandingResponse] = None
    top_run_scorer: Optional[LeaderResponse] = None
    top_wicket_taker: Optional[LeaderResponse] = None

    class Config:
        from_attributes = True


class PlayerCareerResponse(BaseModel):
    player_id: int
    matches: int
    runs: int
    balls_faced: int
    fours: int
    sixes: int
    highest_score: int
    not_outs: int
    batting_average: float
    strike_rate: float
    wickets: int
    overs_bowled: str
    runs_conceded: int
    economy_rate: float
    bowling_average: float
    best_bowling: str
    catches: int
    stumps: int
    run_outs: int
    recent: List[PlayerStatResponse] = []

    class Config:
        from_attributes = True


# Fans
class FollowTeamRequest(BaseModel):
    team_id: int


class FollowPlayerRequest(BaseModel):
    player_id: int


class MessageResponse(BaseModel):
    message: str
