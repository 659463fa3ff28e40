"""
Scoring Engine - live ball-by-ball scoring, innings completion and results
"""
import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from pitchside.engine.calculations import (
    BALLS_PER_OVER, format_overs, parse_overs, run_rate, required_run_rate, win_probability,
)
from pitchside.engine.scorecard import (
    build_player_figures, last_balls, next_ball_position, outcome_label, summarize_innings,
)
from pitchside.errors import NotFoundError, ScoringError, ValidationError, ConflictError
from pitchside.models.match import (
    Match, MatchScore, PlayerStat, BallEvent, MatchStatus, MatchType,
    ExtraType, WicketType, MAX_WICKETS,
)
from pitchside.models.player import Player
from pitchside.models.team import Team
from pitchside.validators.match_validator import MatchValidator

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """Outcome derived from the innings scores"""
    winner_id: Optional[int]
    summary: str
    is_tie: bool = False
    no_result: bool = False
    draw: bool = False


@dataclass
class InningsState:
    """Score line for one innings as shown on the live page"""
    innings: int
    team_id: int
    runs: int
    wickets: int
    overs: str
    extras: int
    run_rate: float
    is_complete: bool


@dataclass
class MatchState:
    """Everything a live scoring view needs for one match"""
    match_id: int
    status: str
    match_type: str
    current_innings: Optional[int] = None
    innings: list = field(default_factory=list)  # InningsState per innings
    target: Optional[int] = None
    runs_needed: Optional[int] = None
    required_run_rate: Optional[float] = None
    balls_remaining: Optional[int] = None
    next_over: int = 1
    next_ball: int = 1
    last_balls: list = field(default_factory=list)
    innings_complete: bool = False
    win_probability: Optional[dict] = None  # {"team1": pct, "team2": pct}
    winner_id: Optional[int] = None
    result_summary: Optional[str] = None


class ScoringEngine:
    """
    Drives one match: status changes, ball-by-ball entry, manual score
    corrections and the final result.

    Ball events are the source of truth for an innings once any have been
    recorded; the innings score row and the players' match stats are
    rebuilt from them after every ball.
    """

    def __init__(self, session: Session, match: Match):
        self.session = session
        self.match = match

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def transition(self, status: MatchStatus) -> Match:
        """Move the match to a new status, completing it if asked"""
        if status == self.match.status:
            return self.match
        if not MatchValidator.can_transition(self.match.status, status):
            logger.warning(
                "Rejected status change for match %s: %s -> %s",
                self.match.id, self.match.status.value, status.value,
            )
            raise ScoringError(
                f"Cannot change match status from {self.match.status.value} to {status.value}"
            )

        if status == MatchStatus.COMPLETED:
            self.complete()
        else:
            self.match.status = status
            self.session.commit()
            logger.info("Match %s is now %s", self.match.id, status.value)
        return self.match

    def start(self) -> Match:
        if self.match.status != MatchStatus.SCHEDULED:
            raise ScoringError(f"Only a scheduled match can be started (match is {self.match.status.value})")
        return self.transition(MatchStatus.LIVE)

    def cancel(self) -> Match:
        return self.transition(MatchStatus.CANCELLED)

    # ------------------------------------------------------------------
    # Innings bookkeeping
    # ------------------------------------------------------------------

    def get_score(self, innings: int) -> Optional[MatchScore]:
        return (
            self.session.query(MatchScore)
            .filter_by(match_id=self.match.id, innings=innings)
            .first()
        )

    def get_scores(self) -> list[MatchScore]:
        return (
            self.session.query(MatchScore)
            .filter_by(match_id=self.match.id)
            .order_by(MatchScore.innings)
            .all()
        )

    def get_balls(self, innings: Optional[int] = None) -> list[BallEvent]:
        query = self.session.query(BallEvent).filter_by(match_id=self.match.id)
        if innings is not None:
            query = query.filter_by(innings=innings)
        return query.order_by(BallEvent.id).all()

    def is_final_innings(self, innings: int) -> bool:
        return innings >= self.match.max_innings

    def target_for(self, innings: int, scores: Optional[list[MatchScore]] = None) -> Optional[int]:
        """
        Runs needed to win in the final innings: the opponent's total less
        what the chasing side already made, plus one.
        """
        if not self.is_final_innings(innings):
            return None
        scores = scores if scores is not None else self.get_scores()
        chasing = next((s for s in scores if s.innings == innings), None)
        if chasing is None:
            return None

        opponent_runs = sum(s.runs or 0 for s in scores if s.team_id != chasing.team_id)
        earlier_runs = sum(
            s.runs or 0 for s in scores
            if s.team_id == chasing.team_id and s.innings < innings
        )
        return opponent_runs - earlier_runs + 1

    def is_innings_complete(self, score: MatchScore, scores: Optional[list[MatchScore]] = None) -> bool:
        """All out, overs used up, or the target reached"""
        if (score.wickets or 0) >= MAX_WICKETS:
            return True
        max_overs = self.match.max_overs
        if max_overs is not None and score.legal_balls >= max_overs * BALLS_PER_OVER:
            return True
        target = self.target_for(score.innings, scores)
        return target is not None and (score.runs or 0) >= target

    def _open_innings(self, innings: int, batting_team_id: Optional[int]) -> MatchScore:
        """Create the score row for a new innings"""
        if batting_team_id is None:
            raise ValidationError(f"batting_team_id is required to open innings {innings}")
        if not self.match.involves(batting_team_id):
            raise ValidationError(f"Team {batting_team_id} is not playing in this match")

        previous = self.get_score(innings - 1) if innings > 1 else None
        if innings > 1 and previous is None:
            raise ScoringError(f"Innings {innings - 1} has not been played yet")
        if (
            previous is not None
            and self.match.match_type != MatchType.TEST
            and previous.team_id == batting_team_id
        ):
            raise ValidationError("The same team cannot bat in consecutive innings of a limited-overs match")

        score = MatchScore(match_id=self.match.id, team_id=batting_team_id, innings=innings)
        self.session.add(score)
        self.session.flush()
        logger.info("Match %s: innings %s opened, team %s batting", self.match.id, innings, batting_team_id)
        return score

    def _check_player(self, player_id: Optional[int], team_id: int, label: str) -> None:
        if player_id is None:
            return
        player = self.session.get(Player, player_id)
        if player is None:
            raise ValidationError(f"Unknown {label} {player_id}")
        if player.team_id is not None and player.team_id != team_id:
            raise ValidationError(f"{label.capitalize()} {player_id} does not play for team {team_id}")

    # ------------------------------------------------------------------
    # Ball by ball
    # ------------------------------------------------------------------

    def record_ball(self, ball: dict) -> BallEvent:
        """
        Record one delivery, then refresh the innings score and every
        player's match figures. Completes the match when the final innings
        ends.
        """
        if self.match.status != MatchStatus.LIVE:
            raise ScoringError(f"Balls can only be recorded for a live match (match is {self.match.status.value})")

        ball = _normalize_ball(ball)
        check = MatchValidator.validate_ball(self.match, ball)
        if not check["valid"]:
            logger.warning("Rejected ball for match %s: %s", self.match.id, check["errors"])
            raise ValidationError("; ".join(check["errors"]))

        innings = ball["innings"]
        later = (
            self.session.query(MatchScore)
            .filter(MatchScore.match_id == self.match.id, MatchScore.innings > innings)
            .first()
        )
        if later is not None:
            raise ScoringError(f"Innings {innings} is closed; innings {later.innings} has started")

        score = self.get_score(innings)
        batting_team_id = ball.pop("batting_team_id", None)
        if score is not None:
            if batting_team_id is not None and batting_team_id != score.team_id:
                raise ValidationError(f"Team {score.team_id} is batting in innings {innings}")
            if self.is_innings_complete(score):
                raise ScoringError(f"Innings {innings} is already complete")
            batting_team_id = score.team_id
        elif batting_team_id is not None and not self.match.involves(batting_team_id):
            raise ValidationError(f"Team {batting_team_id} is not playing in this match")

        if batting_team_id is not None:
            bowling_team_id = self.match.opponent_of(batting_team_id)
            self._check_player(ball.get("batsman_id"), batting_team_id, "batsman")
            self._check_player(ball.get("dismissed_player_id"), batting_team_id, "dismissed player")
            self._check_player(ball.get("bowler_id"), bowling_team_id, "bowler")
            self._check_player(ball.get("fielder_id"), bowling_team_id, "fielder")

        if score is None:
            score = self._open_innings(innings, batting_team_id)

        event = BallEvent(match_id=self.match.id, **ball)
        self.session.add(event)
        self.session.flush()
        logger.debug(
            "Match %s: ball %s.%s innings %s - %s",
            self.match.id, event.over, event.ball, innings, outcome_label(event),
        )

        self._refresh_score(score)
        self.refresh_player_stats()

        if self.is_innings_complete(score):
            logger.info("Match %s: innings %s complete at %s", self.match.id, innings, score.display)
            if self.is_final_innings(innings):
                self.complete()
                self.session.refresh(event)
                return event

        self.session.commit()
        self.session.refresh(event)
        return event

    def _refresh_score(self, score: MatchScore) -> MatchScore:
        """Rebuild an innings score row from its ball events"""
        summary = summarize_innings(self.get_balls(score.innings), score.innings)
        score.runs = summary.runs
        score.wickets = summary.wickets
        score.overs = summary.overs
        score.extras = summary.extras
        return score

    def refresh_player_stats(self) -> list[PlayerStat]:
        """
        Rebuild match stats for every player who appears in the ball events.
        Rows for players with no ball events are left as entered.
        """
        figures = build_player_figures(self.get_balls())
        existing = {
            s.player_id: s
            for s in self.session.query(PlayerStat).filter_by(match_id=self.match.id).all()
        }

        rows = []
        for player_id, fig in figures.items():
            stat = existing.get(player_id)
            if stat is None:
                stat = PlayerStat(player_id=player_id, match_id=self.match.id)
                self.session.add(stat)

            stat.runs = fig.runs
            stat.balls_faced = fig.balls_faced
            stat.fours = fig.fours
            stat.sixes = fig.sixes
            stat.is_out = fig.is_out
            stat.wickets_taken = fig.wickets
            stat.overs_bowled = format_overs(fig.balls_bowled)
            stat.runs_conceded = fig.runs_conceded
            stat.catches = fig.fielding.catches if fig.fielding else 0
            stat.stumps = fig.fielding.stumps if fig.fielding else 0
            stat.run_outs = fig.fielding.run_outs if fig.fielding else 0
            rows.append(stat)

        self.session.flush()
        return rows

    # ------------------------------------------------------------------
    # Manual scores and stats
    # ------------------------------------------------------------------

    def add_score(self, team_id: int, innings: int, **data) -> MatchScore:
        """Create a score row by hand (matches scored without a ball feed)"""
        if self.match.status == MatchStatus.CANCELLED:
            raise ScoringError("Cannot score a cancelled match")
        if not self.match.involves(team_id):
            raise ValidationError(f"Team {team_id} is not playing in this match")
        if not 1 <= innings <= self.match.max_innings:
            raise ValidationError(f"Innings must be between 1 and {self.match.max_innings}")
        if self.get_score(innings) is not None:
            raise ConflictError(f"Innings {innings} already has a score")

        check = MatchValidator.validate_score(data)
        if not check["valid"]:
            raise ValidationError("; ".join(check["errors"]))

        score = MatchScore(match_id=self.match.id, team_id=team_id, innings=innings)
        _apply_score(score, data)
        self.session.add(score)
        self.session.commit()
        self.session.refresh(score)
        return score

    def update_score(self, team_id: int, data: dict, innings: Optional[int] = None) -> MatchScore:
        """
        Correct a team's score. Without an innings number the team's latest
        innings is updated. A completed match has its result re-derived.
        """
        if self.match.status == MatchStatus.CANCELLED:
            raise ScoringError("Cannot score a cancelled match")

        query = self.session.query(MatchScore).filter_by(match_id=self.match.id, team_id=team_id)
        if innings is not None:
            query = query.filter_by(innings=innings)
        score = query.order_by(MatchScore.innings.desc()).first()
        if score is None:
            raise NotFoundError(f"No score for team {team_id} in this match")

        check = MatchValidator.validate_score(data)
        if not check["valid"]:
            raise ValidationError("; ".join(check["errors"]))

        _apply_score(score, data)
        if self.match.status == MatchStatus.COMPLETED:
            self._apply_result(self.determine_result())
        self.session.commit()
        self.session.refresh(score)
        logger.info("Match %s: score corrected for team %s innings %s", self.match.id, team_id, score.innings)
        return score

    def upsert_player_stat(self, player_id: int, data: dict) -> PlayerStat:
        """Enter or overwrite a player's figures for this match"""
        if self.session.get(Player, player_id) is None:
            raise NotFoundError("Player not found")
        data = dict(data)
        if data.get("overs_bowled") is not None:
            data["overs_bowled"] = format_overs(parse_overs(data["overs_bowled"]))

        stat = (
            self.session.query(PlayerStat)
            .filter_by(player_id=player_id, match_id=self.match.id)
            .first()
        )
        if stat is None:
            stat = PlayerStat(player_id=player_id, match_id=self.match.id)
            self.session.add(stat)

        for key, value in data.items():
            if value is not None:
                setattr(stat, key, value)
        self.session.commit()
        self.session.refresh(stat)
        return stat

    # ------------------------------------------------------------------
    # Result
    # ------------------------------------------------------------------

    def determine_result(self) -> MatchResult:
        """
        Work out the winner from the score rows. The side that batted last
        wins by the wickets it had left, the side that batted first by the
        run difference. Tests can also end drawn or in an innings win.
        """
        scores = self.get_scores()
        teams_batted = {s.team_id for s in scores}
        if len(teams_batted) < 2:
            return MatchResult(winner_id=None, summary="No result", no_result=True)

        last = scores[-1]
        chasing_id = last.team_id
        defending_id = self.match.opponent_of(chasing_id)

        chasing_total = sum(s.runs or 0 for s in scores if s.team_id == chasing_id)
        defending_total = sum(s.runs or 0 for s in scores if s.team_id == defending_id)

        if self.match.match_type == MatchType.TEST:
            result = self._test_result(last, chasing_total, defending_total, scores)
            if result is not None:
                return result

        if chasing_total > defending_total:
            margin = MAX_WICKETS - (last.wickets or 0)
            unit = "wicket" if margin == 1 else "wickets"
            return MatchResult(
                winner_id=chasing_id,
                summary=f"{self._team_name(chasing_id)} won by {margin} {unit}",
            )
        if defending_total > chasing_total:
            margin = defending_total - chasing_total
            unit = "run" if margin == 1 else "runs"
            return MatchResult(
                winner_id=defending_id,
                summary=f"{self._team_name(defending_id)} won by {margin} {unit}",
            )
        return MatchResult(winner_id=None, summary="Match tied", is_tie=True)

    def _test_result(self, last: MatchScore, chasing_total: int, defending_total: int,
                     scores: list[MatchScore]) -> Optional[MatchResult]:
        """
        A Test only has a winner once the fourth innings is over, or when the
        side batting third is bowled out still behind. Anything else is a draw.
        Returns None when the usual chase result applies.
        """
        complete = self.is_innings_complete(last, scores)
        if last.innings >= self.match.max_innings and complete:
            return None
        if last.innings == 3 and complete and chasing_total < defending_total:
            defending_id = self.match.opponent_of(last.team_id)
            margin = defending_total - chasing_total
            unit = "run" if margin == 1 else "runs"
            return MatchResult(
                winner_id=defending_id,
                summary=f"{self._team_name(defending_id)} won by an innings and {margin} {unit}",
            )
        return MatchResult(winner_id=None, summary="Match drawn", draw=True)

    def complete(self) -> MatchResult:
        """Finish the match and record its result"""
        if self.match.status not in (MatchStatus.LIVE, MatchStatus.COMPLETED):
            raise ScoringError(f"Cannot complete a {self.match.status.value} match")

        result = self.determine_result()
        self._apply_result(result)
        self.match.status = MatchStatus.COMPLETED
        self.session.commit()
        logger.info("Match %s completed: %s", self.match.id, result.summary)
        return result

    def _apply_result(self, result: MatchResult) -> None:
        self.match.winner_id = result.winner_id
        self.match.result_summary = result.summary

    def _team_name(self, team_id: int) -> str:
        team = self.session.get(Team, team_id)
        return team.name if team else f"Team {team_id}"

    # ------------------------------------------------------------------
    # Live state
    # ------------------------------------------------------------------

    def state(self, last_count: int = 6) -> MatchState:
        """Current match picture for the live scoring and summary views"""
        scores = self.get_scores()
        state = MatchState(
            match_id=self.match.id,
            status=self.match.status.value,
            match_type=self.match.match_type.value,
            winner_id=self.match.winner_id,
            result_summary=self.match.result_summary,
        )

        for score in scores:
            state.innings.append(InningsState(
                innings=score.innings,
                team_id=score.team_id,
                runs=score.runs or 0,
                wickets=score.wickets or 0,
                overs=score.overs,
                extras=score.extras or 0,
                run_rate=run_rate(score.runs or 0, score.legal_balls),
                is_complete=self.is_innings_complete(score, scores),
            ))

        if scores:
            current = scores[-1]
            state.current_innings = current.innings
            state.innings_complete = self.is_innings_complete(current, scores)

            max_overs = self.match.max_overs
            if max_overs is not None:
                state.balls_remaining = max(0, max_overs * BALLS_PER_OVER - current.legal_balls)

            target = self.target_for(current.innings, scores)
            if target is not None:
                state.target = target
                state.runs_needed = max(0, target - (current.runs or 0))
                if state.balls_remaining is not None:
                    state.required_run_rate = required_run_rate(target, current.runs or 0, state.balls_remaining)

            balls = self.get_balls(current.innings)
            # A finished innings leaves the next one to start at 1.1
            if balls and not state.innings_complete:
                last = balls[-1]
                state.next_over, state.next_ball = next_ball_position(last.over, last.ball, last.is_legal)
            state.last_balls = [outcome_label(b) for b in last_balls(balls, last_count)]

        state.win_probability = self.win_probability(scores)
        return state

    def win_probability(self, scores: Optional[list[MatchScore]] = None) -> Optional[dict]:
        """Runs-share estimate; only shown while live with both sides batting"""
        if self.match.status != MatchStatus.LIVE:
            return None
        scores = scores if scores is not None else self.get_scores()
        team1 = [s for s in scores if s.team_id == self.match.team1_id]
        team2 = [s for s in scores if s.team_id == self.match.team2_id]
        if not team1 or not team2:
            return None

        p1, p2 = win_probability(sum(s.runs or 0 for s in team1), sum(s.runs or 0 for s in team2))
        return {"team1": p1, "team2": p2}


def _normalize_ball(ball: dict) -> dict:
    """Coerce enum fields from their string values"""
    ball = dict(ball)
    for key, enum_cls in (("extra_type", ExtraType), ("wicket_type", WicketType)):
        value = ball.get(key)
        if value is not None and not isinstance(value, enum_cls):
            try:
                ball[key] = enum_cls(getattr(value, "value", value))
            except ValueError:
                raise ValidationError(f"Invalid {key.replace('_', ' ')} '{value}'")
    ball.setdefault("runs", 0)
    ball.setdefault("extras", 0)
    ball["is_wicket"] = bool(ball.get("is_wicket"))
    return ball


def _apply_score(score: MatchScore, data: dict) -> None:
    for key in ("runs", "wickets", "extras"):
        if data.get(key) is not None:
            setattr(score, key, data[key])
    if data.get("overs") is not None:
        score.overs = format_overs(parse_overs(data["overs"]))
