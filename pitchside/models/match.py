from typing import Optional, List
from sqlalchemy import String, Integer, ForeignKey, Enum, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from datetime import datetime
import enum
from pitchside.database import Base


class MatchStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MatchType(str, enum.Enum):
    T20 = "T20"
    ODI = "ODI"
    TEST = "Test"


# Overs per innings (None = unlimited) and innings per match
MATCH_FORMATS = {
    MatchType.T20: {"max_overs": 20, "max_innings": 2},
    MatchType.ODI: {"max_overs": 50, "max_innings": 2},
    MatchType.TEST: {"max_overs": None, "max_innings": 4},
}

MAX_WICKETS = 10


class ExtraType(str, enum.Enum):
    WIDE = "wide"
    NO_BALL = "no_ball"
    BYE = "bye"
    LEG_BYE = "leg_bye"


class WicketType(str, enum.Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    STUMPED = "stumped"
    RUN_OUT = "run_out"
    HIT_WICKET = "hit_wicket"


class Match(Base):
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Teams
    team1_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    team2_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))
    team1: Mapped["Team"] = relationship("Team", foreign_keys=[team1_id])
    team2: Mapped["Team"] = relationship("Team", foreign_keys=[team2_id])

    # Match info
    venue: Mapped[str] = mapped_column(String(100))
    match_date: Mapped[datetime] = mapped_column(DateTime)
    match_type: Mapped[MatchType] = mapped_column(Enum(MatchType), default=MatchType.T20)

    # Status
    status: Mapped[MatchStatus] = mapped_column(Enum(MatchStatus), default=MatchStatus.SCHEDULED)

    # Result
    winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)
    winner: Mapped[Optional["Team"]] = relationship("Team", foreign_keys=[winner_id])
    result_summary: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    organizer_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    scores: Mapped[List["MatchScore"]] = relationship(
        "MatchScore", back_populates="match", order_by="MatchScore.innings", cascade="all, delete-orphan"
    )
    player_stats: Mapped[List["PlayerStat"]] = relationship(
        "PlayerStat", back_populates="match", cascade="all, delete-orphan"
    )
    balls: Mapped[List["BallEvent"]] = relationship(
        "BallEvent", back_populates="match", order_by="BallEvent.id", cascade="all, delete-orphan"
    )

    @property
    def max_overs(self) -> Optional[int]:
        return MATCH_FORMATS[self.match_type]["max_overs"]

    @property
    def max_innings(self) -> int:
        return MATCH_FORMATS[self.match_type]["max_innings"]

    def involves(self, team_id: int) -> bool:
        return team_id in (self.team1_id, self.team2_id)

    def opponent_of(self, team_id: int) -> int:
        return self.team2_id if team_id == self.team1_id else self.team1_id

    def __repr__(self):
        return f"<Match #{self.id} {self.team1_id} vs {self.team2_id} ({self.status.value})>"


class MatchScore(Base):
    """One team's score for one innings"""
    __tablename__ = "match_scores"
    __table_args__ = (UniqueConstraint("match_id", "innings", name="uq_match_innings"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"))
    match: Mapped["Match"] = relationship("Match", back_populates="scores")
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"))

    innings: Mapped[int] = mapped_column(Integer)
    runs: Mapped[int] = mapped_column(Integer, default=0)
    wickets: Mapped[int] = mapped_column(Integer, default=0)
    overs: Mapped[str] = mapped_column(String(10), default="0.0")  # over.ball notation
    extras: Mapped[int] = mapped_column(Integer, default=0)

    @property
    def legal_balls(self) -> int:
        from pitchside.engine.calculations import parse_overs
        return parse_overs(self.overs)

    @property
    def run_rate(self) -> float:
        from pitchside.engine.calculations import run_rate
        return run_rate(self.runs or 0, self.legal_balls)

    @property
    def display(self) -> str:
        return f"{self.runs}/{self.wickets} ({self.overs})"

    def __repr__(self):
        return f"<MatchScore innings {self.innings}: {self.display}>"


class PlayerStat(Base):
    """A player's figures for one match"""
    __tablename__ = "player_stats"
    __table_args__ = (UniqueConstraint("player_id", "match_id", name="uq_player_match"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"))
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"))
    player: Mapped["Player"] = relationship("Player")
    match: Mapped["Match"] = relationship("Match", back_populates="player_stats")

    # Batting
    runs: Mapped[int] = mapped_column(Integer, default=0)
    balls_faced: Mapped[int] = mapped_column(Integer, default=0)
    fours: Mapped[int] = mapped_column(Integer, default=0)
    sixes: Mapped[int] = mapped_column(Integer, default=0)
    is_out: Mapped[bool] = mapped_column(default=False)

    # Bowling
    wickets_taken: Mapped[int] = mapped_column(Integer, default=0)
    overs_bowled: Mapped[str] = mapped_column(String(10), default="0.0")
    runs_conceded: Mapped[int] = mapped_column(Integer, default=0)

    # Fielding
    catches: Mapped[int] = mapped_column(Integer, default=0)
    stumps: Mapped[int] = mapped_column(Integer, default=0)
    run_outs: Mapped[int] = mapped_column(Integer, default=0)

    @property
    def balls_bowled(self) -> int:
        from pitchside.engine.calculations import parse_overs
        return parse_overs(self.overs_bowled)

    @property
    def strike_rate(self) -> float:
        from pitchside.engine.calculations import strike_rate
        return strike_rate(self.runs or 0, self.balls_faced or 0)

    @property
    def economy_rate(self) -> float:
        from pitchside.engine.calculations import economy_rate
        return economy_rate(self.runs_conceded or 0, self.balls_bowled)

    def __repr__(self):
        return f"<PlayerStat player={self.player_id} match={self.match_id}: {self.runs} runs, {self.wickets_taken} wkts>"


class BallEvent(Base):
    __tablename__ = "ball_by_ball"

    id: Mapped[int] = mapped_column(primary_key=True)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"))
    match: Mapped["Match"] = relationship("Match", back_populates="balls")

    innings: Mapped[int] = mapped_column(Integer)
    over: Mapped[int] = mapped_column(Integer)  # 1-based
    ball: Mapped[int] = mapped_column(Integer)  # 1-6

    # Players involved
    batsman_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    bowler_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)
    fielder_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)

    # Outcome
    runs: Mapped[int] = mapped_column(Integer, default=0)  # off the bat
    extras: Mapped[int] = mapped_column(Integer, default=0)
    extra_type: Mapped[Optional[ExtraType]] = mapped_column(Enum(ExtraType), nullable=True)

    # Wicket
    is_wicket: Mapped[bool] = mapped_column(default=False)
    wicket_type: Mapped[Optional[WicketType]] = mapped_column(Enum(WicketType), nullable=True)
    dismissed_player_id: Mapped[Optional[int]] = mapped_column(ForeignKey("players.id"), nullable=True)

    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    @property
    def is_legal(self) -> bool:
        return self.extra_type not in (ExtraType.WIDE, ExtraType.NO_BALL)

    @property
    def total_runs(self) -> int:
        return (self.runs or 0) + (self.extras or 0)

    def __repr__(self):
        return f"<Ball {self.innings}/{self.over}.{self.ball}: {self.total_runs} runs>"
