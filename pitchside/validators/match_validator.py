from pitchside.engine.calculations import BALLS_PER_OVER, parse_overs
from pitchside.errors import ValidationError
from pitchside.models.match import (
    Match, MatchStatus, ExtraType, WicketType, MAX_WICKETS,
)

# Allowed status changes; completed and cancelled are final
STATUS_TRANSITIONS = {
    MatchStatus.SCHEDULED: {MatchStatus.LIVE, MatchStatus.CANCELLED},
    MatchStatus.LIVE: {MatchStatus.COMPLETED, MatchStatus.CANCELLED},
    MatchStatus.COMPLETED: set(),
    MatchStatus.CANCELLED: set(),
}

# Dismissals possible off a delivery that is not a legal ball
WIDE_DISMISSALS = {WicketType.STUMPED, WicketType.RUN_OUT, WicketType.HIT_WICKET}
NO_BALL_DISMISSALS = {WicketType.RUN_OUT}


class MatchValidator:
    @staticmethod
    def validate_new_match(team1_id: int, team2_id: int, venue: str) -> dict:
        """
        Validate a match fixture before it is created.

        Rules:
        1. Two different teams
        2. A venue
        """
        errors = []
        if team1_id == team2_id:
            errors.append("A team cannot play against itself")
        if not venue or not venue.strip():
            errors.append("Venue is required")
        return {"valid": len(errors) == 0, "errors": errors}

    @staticmethod
    def validate_ball(match: Match, ball: dict) -> dict:
        """
        Validate a single ball-by-ball entry for a match.

        Rules:
        1. Innings within the match format (2 limited overs, 4 Test)
        2. Over from 1 up to the over limit, ball 1-6
        3. 0-6 runs off the bat, non-negative extras
        4. Wides and no-balls carry at least 1 extra, byes and leg byes carry
           their runs as extras and none off the bat
        5. A wicket needs a dismissal type and only certain dismissals can
           happen off a wide or no-ball
        """
        errors = []

        innings = ball.get("innings")
        if innings is None or not 1 <= innings <= match.max_innings:
            errors.append(f"Innings must be between 1 and {match.max_innings} for a {match.match_type.value} match")

        over = ball.get("over")
        if over is None or over < 1:
            errors.append("Over must be 1 or more")
        elif match.max_overs is not None and over > match.max_overs:
            errors.append(f"Over {over} is beyond the {match.max_overs}-over limit")

        ball_number = ball.get("ball")
        if ball_number is None or not 1 <= ball_number <= BALLS_PER_OVER:
            errors.append(f"Ball must be between 1 and {BALLS_PER_OVER}")

        runs = ball.get("runs") or 0
        extras = ball.get("extras") or 0
        if not 0 <= runs <= 6:
            errors.append("Runs off the bat must be between 0 and 6")
        if extras < 0:
            errors.append("Extras cannot be negative")

        extra_type = ball.get("extra_type")
        if extra_type in (ExtraType.WIDE, ExtraType.NO_BALL) and extras < 1:
            errors.append(f"A {extra_type.value} must carry at least 1 extra run")
        if extra_type == ExtraType.WIDE and runs > 0:
            errors.append("No runs can be scored off the bat from a wide")
        if extra_type in (ExtraType.BYE, ExtraType.LEG_BYE):
            if runs > 0:
                errors.append(f"Runs from a {extra_type.value} are extras, not runs off the bat")
            if extras < 1:
                errors.append(f"A {extra_type.value} must carry at least 1 extra run")

        is_wicket = bool(ball.get("is_wicket"))
        wicket_type = ball.get("wicket_type")
        if is_wicket and wicket_type is None:
            errors.append("Wicket type is required when a wicket falls")
        if not is_wicket and wicket_type is not None:
            errors.append("Wicket type given but no wicket recorded")
        if is_wicket and wicket_type is not None:
            if extra_type == ExtraType.WIDE and wicket_type not in WIDE_DISMISSALS:
                errors.append(f"A batter cannot be out {wicket_type.value} off a wide")
            if extra_type == ExtraType.NO_BALL and wicket_type not in NO_BALL_DISMISSALS:
                errors.append(f"A batter cannot be out {wicket_type.value} off a no-ball")

        batsman_id = ball.get("batsman_id")
        if batsman_id is not None and batsman_id == ball.get("bowler_id"):
            errors.append("Batsman and bowler must be different players")

        return {"valid": len(errors) == 0, "errors": errors}

    @staticmethod
    def validate_score(data: dict) -> dict:
        """Validate a manual score correction"""
        errors = []

        runs = data.get("runs")
        if runs is not None and runs < 0:
            errors.append("Runs cannot be negative")

        wickets = data.get("wickets")
        if wickets is not None and not 0 <= wickets <= MAX_WICKETS:
            errors.append(f"Wickets must be between 0 and {MAX_WICKETS}")

        extras = data.get("extras")
        if extras is not None and extras < 0:
            errors.append("Extras cannot be negative")
        if extras is not None and runs is not None and extras > runs:
            errors.append("Extras cannot exceed total runs")

        overs = data.get("overs")
        if overs is not None:
            try:
                parse_overs(overs)
            except ValidationError as e:
                errors.append(e.message)

        return {"valid": len(errors) == 0, "errors": errors}

    @staticmethod
    def can_transition(current: MatchStatus, target: MatchStatus) -> bool:
        return target in STATUS_TRANSITIONS[current]
