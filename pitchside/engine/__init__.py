from pitchside.engine.scoring_engine import ScoringEngine, MatchState, MatchResult
from pitchside.engine.stats_engine import StatsEngine

__all__ = ["ScoringEngine", "MatchState", "MatchResult", "StatsEngine"]
