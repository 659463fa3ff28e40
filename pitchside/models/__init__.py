from pitchside.models.user import User, UserRole
from pitchside.models.team import Team
from pitchside.models.player import Player, PlayerPosition
from pitchside.models.match import (
    Match, MatchScore, PlayerStat, BallEvent,
    MatchStatus, MatchType, ExtraType, WicketType,
)
from pitchside.models.follow import TeamFollow, PlayerFollow

__all__ = [
    "User",
    "UserRole",
    "Team",
    "Player",
    "PlayerPosition",
    "Match",
    "MatchScore",
    "PlayerStat",
    "BallEvent",
    "MatchStatus",
    "MatchType",
    "ExtraType",
    "WicketType",
    "TeamFollow",
    "PlayerFollow",
]
