"""
Cricket arithmetic - overs notation and derived rates.

Overs are written in over.ball notation ("4.3" = 4 overs and 3 balls = 27
legal deliveries). Everything here works in legal balls internally so that
"4.3" is never mistaken for 4.3 decimal overs.

Every ratio returns 0.0 when its denominator is zero.
"""
from typing import Optional, Tuple, Union

from pitchside.errors import ValidationError

BALLS_PER_OVER = 6


def parse_overs(overs: Optional[Union[str, int, float]]) -> int:
    """Convert over.ball notation to a count of legal balls: "4.3" -> 27"""
    if overs is None:
        return 0
    text = str(overs).strip()
    if not text:
        return 0

    whole, _, part = text.partition(".")
    if not whole.isdigit() or (part and not part.isdigit()):
        raise ValidationError(f"Invalid overs value '{overs}', expected over.ball notation like 4.3")

    balls = int(part) if part else 0
    if balls >= BALLS_PER_OVER:
        raise ValidationError(f"Invalid overs value '{overs}', ball part must be 0-5")

    return int(whole) * BALLS_PER_OVER + balls


def format_overs(balls: int) -> str:
    """Convert a count of legal balls to over.ball notation: 27 -> "4.3" """
    balls = max(0, int(balls))
    return f"{balls // BALLS_PER_OVER}.{balls % BALLS_PER_OVER}"


def balls_to_overs(balls: int) -> float:
    """True overs as a decimal: 27 -> 4.5"""
    return balls / BALLS_PER_OVER


def run_rate(runs: int, balls: int) -> float:
    """Runs per over"""
    if balls <= 0:
        return 0.0
    return round(runs / balls * BALLS_PER_OVER, 2)


def required_run_rate(target: int, runs: int, balls_remaining: int) -> float:
    """Runs per over still needed to reach the target"""
    runs_needed = target - runs
    if balls_remaining <= 0 or runs_needed <= 0:
        return 0.0
    return round(runs_needed / balls_remaining * BALLS_PER_OVER, 2)


def strike_rate(runs: int, balls_faced: int) -> float:
    """Runs per 100 balls faced"""
    if balls_faced <= 0:
        return 0.0
    return round(runs / balls_faced * 100, 2)


def economy_rate(runs_conceded: int, balls_bowled: int) -> float:
    """Runs conceded per over bowled"""
    if balls_bowled <= 0:
        return 0.0
    return round(runs_conceded / balls_to_overs(balls_bowled), 2)


def batting_average(runs: int, dismissals: int) -> float:
    """Runs per dismissal; a batter never dismissed averages their total"""
    if dismissals <= 0:
        return float(runs) if runs > 0 else 0.0
    return round(runs / dismissals, 2)


def bowling_average(runs_conceded: int, wickets: int) -> float:
    """Runs conceded per wicket"""
    if wickets <= 0:
        return 0.0
    return round(runs_conceded / wickets, 2)


def net_run_rate(runs_scored: int, balls_faced: int, runs_conceded: int, balls_bowled: int) -> float:
    """NRR: (runs scored / overs faced) - (runs conceded / overs bowled)"""
    if balls_faced <= 0 or balls_bowled <= 0:
        return 0.0
    scoring_rate = runs_scored / balls_to_overs(balls_faced)
    conceding_rate = runs_conceded / balls_to_overs(balls_bowled)
    return round(scoring_rate - conceding_rate, 3)


def win_rate(wins: int, played: int) -> float:
    """Percentage of matches won"""
    if played <= 0:
        return 0.0
    return round(wins / played * 100, 2)


def win_probability(team1_runs: int, team2_runs: int) -> Tuple[int, int]:
    """
    Rough win probability from the share of runs each side has scored.
    Returns whole percentages that always add up to 100.
    """
    total_runs = team1_runs + team2_runs
    if total_runs <= 0:
        return 50, 50

    # Round half up in integers, so a 50.5% share shows as 51
    team1 = (team1_runs * 200 + total_runs) // (2 * total_runs)
    return team1, 100 - team1


def share_of(part: int, whole: int) -> float:
    """Percentage share, used for status breakdowns"""
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, 2)
