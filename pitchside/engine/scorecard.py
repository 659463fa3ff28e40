"""
Scorecard aggregation - turns ball-by-ball events into innings totals,
batting cards, bowling figures and fielding credits.

Works on BallEvent rows or any object exposing the same attributes.
"""
from dataclasses import dataclass, field
from typing import Iterable, Optional

from pitchside.engine.calculations import (
    BALLS_PER_OVER, format_overs, run_rate, strike_rate, economy_rate,
)
from pitchside.models.match import ExtraType, WicketType

# Extras charged to the bowler; byes and leg byes are not
BOWLER_EXTRAS = (ExtraType.WIDE, ExtraType.NO_BALL)
# Dismissals not credited to the bowler
NON_BOWLER_DISMISSALS = (WicketType.RUN_OUT,)


@dataclass
class InningsSummary:
    """Totals for one innings"""
    innings: int
    runs: int = 0
    wickets: int = 0
    legal_balls: int = 0
    extras: int = 0
    fours: int = 0
    sixes: int = 0
    batting_team_id: Optional[int] = None

    @property
    def overs(self) -> str:
        return format_overs(self.legal_balls)

    @property
    def run_rate(self) -> float:
        return run_rate(self.runs, self.legal_balls)

    @property
    def display(self) -> str:
        return f"{self.runs}/{self.wickets} ({self.overs})"


@dataclass
class BatterInnings:
    """Tracks a batter's innings"""
    player_id: int
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    dismissal: Optional[str] = None

    @property
    def strike_rate(self) -> float:
        return strike_rate(self.runs, self.balls)


@dataclass
class BowlerSpell:
    """Tracks a bowler's figures"""
    player_id: int
    legal_balls: int = 0
    runs: int = 0
    wickets: int = 0
    wides: int = 0
    no_balls: int = 0

    @property
    def overs(self) -> str:
        return format_overs(self.legal_balls)

    @property
    def economy(self) -> float:
        return economy_rate(self.runs, self.legal_balls)


@dataclass
class FieldingRecord:
    player_id: int
    catches: int = 0
    stumps: int = 0
    run_outs: int = 0


@dataclass
class PlayerFigures:
    """Everything one player did in a match, across all innings"""
    player_id: int
    batting: list = field(default_factory=list)  # BatterInnings per innings
    bowling: list = field(default_factory=list)  # BowlerSpell per innings
    fielding: Optional[FieldingRecord] = None

    @property
    def runs(self) -> int:
        return sum(b.runs for b in self.batting)

    @property
    def balls_faced(self) -> int:
        return sum(b.balls for b in self.batting)

    @property
    def fours(self) -> int:
        return sum(b.fours for b in self.batting)

    @property
    def sixes(self) -> int:
        return sum(b.sixes for b in self.batting)

    @property
    def is_out(self) -> bool:
        return any(b.is_out for b in self.batting)

    @property
    def balls_bowled(self) -> int:
        return sum(s.legal_balls for s in self.bowling)

    @property
    def runs_conceded(self) -> int:
        return sum(s.runs for s in self.bowling)

    @property
    def wickets(self) -> int:
        return sum(s.wickets for s in self.bowling)


def is_legal(event) -> bool:
    return event.extra_type not in BOWLER_EXTRAS


def _enum_value(value) -> Optional[str]:
    return value.value if value is not None else None


def events_for_innings(events: Iterable, innings: int) -> list:
    return [e for e in events if e.innings == innings]


def summarize_innings(events: Iterable, innings: int) -> InningsSummary:
    """Total up one innings from its ball events"""
    summary = InningsSummary(innings=innings)
    for event in events_for_innings(events, innings):
        summary.runs += (event.runs or 0) + (event.extras or 0)
        summary.extras += event.extras or 0
        if event.is_wicket:
            summary.wickets += 1
        if is_legal(event):
            summary.legal_balls += 1
        if event.runs == 4:
            summary.fours += 1
        elif event.runs == 6:
            summary.sixes += 1
    return summary


def build_batting_card(events: Iterable) -> list[BatterInnings]:
    """Batting card in order of first appearance"""
    card: dict[int, BatterInnings] = {}

    for event in events:
        if event.batsman_id is not None:
            batter = card.setdefault(event.batsman_id, BatterInnings(player_id=event.batsman_id))
            batter.runs += event.runs or 0
            # A batter faces no-balls but not wides
            if event.extra_type != ExtraType.WIDE:
                batter.balls += 1
            if event.runs == 4:
                batter.fours += 1
            elif event.runs == 6:
                batter.sixes += 1

        if event.is_wicket:
            out_id = event.dismissed_player_id or event.batsman_id
            if out_id is None:
                continue
            dismissed = card.setdefault(out_id, BatterInnings(player_id=out_id))
            dismissed.is_out = True
            dismissed.dismissal = _enum_value(event.wicket_type)

    return list(card.values())


def build_bowling_card(events: Iterable) -> list[BowlerSpell]:
    """Bowling figures in order of first appearance"""
    card: dict[int, BowlerSpell] = {}

    for event in events:
        if event.bowler_id is None:
            continue
        spell = card.setdefault(event.bowler_id, BowlerSpell(player_id=event.bowler_id))
        spell.runs += event.runs or 0

        if event.extra_type in BOWLER_EXTRAS:
            spell.runs += event.extras or 0
            if event.extra_type == ExtraType.WIDE:
                spell.wides += 1
            else:
                spell.no_balls += 1
        else:
            spell.legal_balls += 1

        if event.is_wicket and event.wicket_type not in NON_BOWLER_DISMISSALS:
            spell.wickets += 1

    return list(card.values())


def build_fielding_card(events: Iterable) -> list[FieldingRecord]:
    """Catches, stumpings and run outs credited to fielders"""
    card: dict[int, FieldingRecord] = {}

    for event in events:
        if not event.is_wicket or event.fielder_id is None:
            continue
        record = card.setdefault(event.fielder_id, FieldingRecord(player_id=event.fielder_id))
        if event.wicket_type == WicketType.CAUGHT:
            record.catches += 1
        elif event.wicket_type == WicketType.STUMPED:
            record.stumps += 1
        elif event.wicket_type == WicketType.RUN_OUT:
            record.run_outs += 1

    return list(card.values())


def build_player_figures(events: list) -> dict[int, PlayerFigures]:
    """Per-player match figures across every innings in the events"""
    figures: dict[int, PlayerFigures] = {}

    def entry(player_id: int) -> PlayerFigures:
        return figures.setdefault(player_id, PlayerFigures(player_id=player_id))

    for innings in sorted({e.innings for e in events}):
        innings_events = events_for_innings(events, innings)
        for batter in build_batting_card(innings_events):
            entry(batter.player_id).batting.append(batter)
        for spell in build_bowling_card(innings_events):
            entry(spell.player_id).bowling.append(spell)

    for record in build_fielding_card(events):
        entry(record.player_id).fielding = record

    return figures


def next_ball_position(over: int, ball: int, legal: bool = True) -> tuple[int, int]:
    """
    Where the next delivery goes. Wides and no-balls are re-bowled, so the
    position only moves on after a legal ball.
    """
    if not legal:
        return over, ball
    if ball < BALLS_PER_OVER:
        return over, ball + 1
    return over + 1, 1


def outcome_label(event) -> str:
    """Short label for an over summary: W, Wd, Nb, B, Lb or the runs"""
    if event.is_wicket:
        return "W"
    if event.extra_type == ExtraType.WIDE:
        return "Wd"
    if event.extra_type == ExtraType.NO_BALL:
        return "Nb"
    if event.extra_type == ExtraType.BYE:
        return f"{event.extras}B"
    if event.extra_type == ExtraType.LEG_BYE:
        return f"{event.extras}Lb"
    return str(event.runs)


def last_balls(events: list, count: int = 6) -> list:
    """Most recent deliveries first"""
    return list(reversed(events[-count:])) if count > 0 else []


def top_performers(stats: Iterable) -> tuple[Optional[object], Optional[object]]:
    """
    Best batter (most runs, then fewest balls) and best bowler (most wickets,
    then fewest runs conceded) from per-match player stats.
    """
    stats = list(stats)
    batters = [s for s in stats if (s.runs or 0) > 0 or (s.balls_faced or 0) > 0]
    bowlers = [s for s in stats if s.balls_bowled > 0]

    top_batsman = min(batters, key=lambda s: (-(s.runs or 0), s.balls_faced or 0), default=None)
    top_bowler = min(bowlers, key=lambda s: (-(s.wickets_taken or 0), s.runs_conceded or 0), default=None)
    return top_batsman, top_bowler
