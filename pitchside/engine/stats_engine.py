"""
Stats Engine - team standings, tournament overview and player careers
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from pitchside.engine.calculations import (
    parse_overs, format_overs, net_run_rate, win_rate, share_of,
    batting_average, bowling_average, strike_rate, economy_rate,
)
from pitchside.engine.scorecard import top_performers
from pitchside.errors import NotFoundError
from pitchside.models.match import Match, MatchScore, MatchStatus, PlayerStat
from pitchside.models.player import Player
from pitchside.models.team import Team

logger = logging.getLogger(__name__)

POINTS_FOR_WIN = 2
POINTS_FOR_NO_RESULT = 1


@dataclass
class TeamStanding:
    """Team record across completed matches"""
    team_id: int
    team_name: str
    position: int = 0
    played: int = 0
    won: int = 0
    lost: int = 0
    no_result: int = 0
    points: int = 0
    win_rate: float = 0.0
    nrr: float = 0.0
    average_score: float = 0.0
    highest_score: int = 0

    # NRR and average components
    runs_scored: int = 0
    balls_faced: int = 0
    runs_conceded: int = 0
    balls_bowled: int = 0
    innings_batted: int = 0


@dataclass
class LeaderEntry:
    player_id: int
    player_name: str
    value: int


@dataclass
class TournamentOverview:
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
    most_successful_team: Optional[TeamStanding] = None
    top_run_scorer: Optional[LeaderEntry] = None
    top_wicket_taker: Optional[LeaderEntry] = None


@dataclass
class PlayerCareer:
    """Career figures summed over every match a player has stats for"""
    player_id: int
    matches: int = 0
    runs: int = 0
    balls_faced: int = 0
    fours: int = 0
    sixes: int = 0
    highest_score: int = 0
    not_outs: int = 0
    batting_average: float = 0.0
    strike_rate: float = 0.0
    wickets: int = 0
    overs_bowled: str = "0.0"
    runs_conceded: int = 0
    economy_rate: float = 0.0
    bowling_average: float = 0.0
    best_bowling: str = "0/0"
    catches: int = 0
    stumps: int = 0
    run_outs: int = 0
    recent: list = field(default_factory=list)


class StatsEngine:
    """
    Read-only aggregates over matches, score rows and player stats.
    """

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Teams
    # ------------------------------------------------------------------

    def team_standings(self) -> list[TeamStanding]:
        """League table sorted by points, then NRR, then name"""
        teams = self.session.query(Team).all()
        table = {t.id: TeamStanding(team_id=t.id, team_name=t.name) for t in teams}

        completed = self.session.query(Match).filter_by(status=MatchStatus.COMPLETED).all()
        for match in completed:
            self._add_match(table, match)

        for standing in table.values():
            standing.win_rate = win_rate(standing.won, standing.played)
            standing.nrr = net_run_rate(
                standing.runs_scored, standing.balls_faced,
                standing.runs_conceded, standing.balls_bowled,
            )
            if standing.innings_batted:
                standing.average_score = round(standing.runs_scored / standing.innings_batted, 2)

        logger.debug("Standings built from %d completed matches", len(completed))
        standings = sorted(table.values(), key=lambda s: (-s.points, -s.nrr, s.team_name))
        for pos, standing in enumerate(standings, 1):
            standing.position = pos
        return standings

    def _add_match(self, table: dict, match: Match) -> None:
        team1 = table.get(match.team1_id)
        team2 = table.get(match.team2_id)
        if team1 is None or team2 is None:
            return

        team1.played += 1
        team2.played += 1

        if match.winner_id == match.team1_id:
            team1.won += 1
            team1.points += POINTS_FOR_WIN
            team2.lost += 1
        elif match.winner_id == match.team2_id:
            team2.won += 1
            team2.points += POINTS_FOR_WIN
            team1.lost += 1
        else:
            # Tie, draw or no result
            team1.no_result += 1
            team2.no_result += 1
            team1.points += POINTS_FOR_NO_RESULT
            team2.points += POINTS_FOR_NO_RESULT

        for score in match.scores:
            batting = table.get(score.team_id)
            bowling = table.get(match.opponent_of(score.team_id))
            if batting is None or bowling is None:
                continue
            balls = parse_overs(score.overs)
            runs = score.runs or 0

            batting.runs_scored += runs
            batting.balls_faced += balls
            batting.innings_batted += 1
            batting.highest_score = max(batting.highest_score, runs)

            bowling.runs_conceded += runs
            bowling.balls_bowled += balls

    def team_record(self, team_id: int) -> dict:
        """One team's standing plus its live and upcoming fixtures"""
        team = self.session.get(Team, team_id)
        if team is None:
            raise NotFoundError("Team not found")

        standing = next(s for s in self.team_standings() if s.team_id == team_id)
        fixtures = (
            self.session.query(Match)
            .filter(
                (Match.team1_id == team_id) | (Match.team2_id == team_id),
                Match.status.in_([MatchStatus.LIVE, MatchStatus.SCHEDULED]),
            )
            .order_by(Match.match_date)
            .all()
        )
        return {
            "standing": standing,
            "live": [m for m in fixtures if m.status == MatchStatus.LIVE],
            "upcoming": [m for m in fixtures if m.status == MatchStatus.SCHEDULED],
        }

    # ------------------------------------------------------------------
    # Tournament
    # ------------------------------------------------------------------

    def tournament_overview(self) -> TournamentOverview:
        matches = self.session.query(Match).all()
        by_status = defaultdict(int)
        for match in matches:
            by_status[match.status] += 1

        total = len(matches)
        completed_ids = [m.id for m in matches if m.status == MatchStatus.COMPLETED]
        scores = (
            self.session.query(MatchScore).filter(MatchScore.match_id.in_(completed_ids)).all()
            if completed_ids else []
        )

        standings = [s for s in self.team_standings() if s.played > 0]
        most_successful = max(standings, key=lambda s: (s.win_rate, s.points), default=None)

        return TournamentOverview(
            total_matches=total,
            completed=by_status[MatchStatus.COMPLETED],
            live=by_status[MatchStatus.LIVE],
            upcoming=by_status[MatchStatus.SCHEDULED],
            cancelled=by_status[MatchStatus.CANCELLED],
            completed_share=share_of(by_status[MatchStatus.COMPLETED], total),
            live_share=share_of(by_status[MatchStatus.LIVE], total),
            upcoming_share=share_of(by_status[MatchStatus.SCHEDULED], total),
            total_runs=sum(s.runs or 0 for s in scores),
            total_wickets=sum(s.wickets or 0 for s in scores),
            most_successful_team=most_successful,
            top_run_scorer=self._leader(PlayerStat.runs),
            top_wicket_taker=self._leader(PlayerStat.wickets_taken),
        )

    def _leader(self, column) -> Optional[LeaderEntry]:
        totals = defaultdict(int)
        for player_id, value in self.session.query(PlayerStat.player_id, column).all():
            totals[player_id] += value or 0
        if not totals:
            return None

        player_id, value = max(totals.items(), key=lambda item: (item[1], -item[0]))
        if value <= 0:
            return None
        player = self.session.get(Player, player_id)
        return LeaderEntry(
            player_id=player_id,
            player_name=player.full_name if player else f"Player #{player_id}",
            value=value,
        )

    # ------------------------------------------------------------------
    # Players
    # ------------------------------------------------------------------

    def player_career(self, player_id: int, recent_limit: int = 5) -> PlayerCareer:
        if self.session.get(Player, player_id) is None:
            raise NotFoundError("Player not found")

        stats = (
            self.session.query(PlayerStat)
            .filter_by(player_id=player_id)
            .order_by(PlayerStat.match_id.desc())
            .all()
        )
        career = PlayerCareer(player_id=player_id, matches=len(stats))

        balls_bowled = 0
        best = None  # (wickets, runs)
        for stat in stats:
            runs = stat.runs or 0
            career.runs += runs
            career.balls_faced += stat.balls_faced or 0
            career.fours += stat.fours or 0
            career.sixes += stat.sixes or 0
            career.highest_score = max(career.highest_score, runs)

            bowled = stat.balls_bowled
            balls_bowled += bowled
            career.wickets += stat.wickets_taken or 0
            career.runs_conceded += stat.runs_conceded or 0
            if bowled > 0:
                figures = (stat.wickets_taken or 0, stat.runs_conceded or 0)
                if best is None or (figures[0], -figures[1]) > (best[0], -best[1]):
                    best = figures

            career.catches += stat.catches or 0
            career.stumps += stat.stumps or 0
            career.run_outs += stat.run_outs or 0

        batted = [s for s in stats if (s.balls_faced or 0) > 0 or s.is_out]
        career.not_outs = sum(1 for s in batted if not s.is_out)
        dismissals = len(batted) - career.not_outs
        career.batting_average = batting_average(career.runs, dismissals)
        career.strike_rate = strike_rate(career.runs, career.balls_faced)

        career.overs_bowled = format_overs(balls_bowled)
        career.economy_rate = economy_rate(career.runs_conceded, balls_bowled)
        career.bowling_average = bowling_average(career.runs_conceded, career.wickets)
        if best is not None:
            career.best_bowling = f"{best[0]}/{best[1]}"

        career.recent = stats[:recent_limit]
        return career

    def match_top_performers(self, match_id: int) -> tuple[Optional[PlayerStat], Optional[PlayerStat]]:
        if self.session.get(Match, match_id) is None:
            raise NotFoundError("Match not found")
        stats = self.session.query(PlayerStat).filter_by(match_id=match_id).all()
        return top_performers(stats)
