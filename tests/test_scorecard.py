"""
Tests for turning ball events into innings totals and player cards.
"""
from types import SimpleNamespace

from pitchside.engine.scorecard import (
    summarize_innings, build_batting_card, build_bowling_card, build_fielding_card,
    build_player_figures, next_ball_position, outcome_label, last_balls, top_performers,
)
from pitchside.models.match import ExtraType, WicketType


def ev(innings=1, over=1, ball=1, batsman_id=1, bowler_id=10, runs=0, extras=0,
       extra_type=None, is_wicket=False, wicket_type=None, dismissed_player_id=None, fielder_id=None):
    return SimpleNamespace(
        innings=innings, over=over, ball=ball, batsman_id=batsman_id, bowler_id=bowler_id,
        runs=runs, extras=extras, extra_type=extra_type, is_wicket=is_wicket,
        wicket_type=wicket_type, dismissed_player_id=dismissed_player_id, fielder_id=fielder_id,
    )


def stat(player_id, runs=0, balls_faced=0, wickets_taken=0, runs_conceded=0, balls_bowled=0):
    return SimpleNamespace(
        player_id=player_id, runs=runs, balls_faced=balls_faced, wickets_taken=wickets_taken,
        runs_conceded=runs_conceded, balls_bowled=balls_bowled,
    )


class TestSummarizeInnings:
    def test_totals(self):
        events = [
            ev(ball=1, runs=4),
            ev(ball=2, extras=1, extra_type=ExtraType.WIDE),
            ev(ball=2, runs=6),
            ev(ball=3, extras=2, extra_type=ExtraType.LEG_BYE),
            ev(ball=4, is_wicket=True, wicket_type=WicketType.BOWLED),
        ]
        summary = summarize_innings(events, 1)
        assert summary.runs == 13
        assert summary.extras == 3
        assert summary.wickets == 1
        assert summary.legal_balls == 4
        assert summary.fours == 1
        assert summary.sixes == 1
        assert summary.overs == "0.4"
        assert summary.display == "13/1 (0.4)"

    def test_only_counts_its_innings(self):
        events = [ev(innings=1, runs=4), ev(innings=2, runs=6)]
        assert summarize_innings(events, 2).runs == 6

    def test_empty_innings(self):
        summary = summarize_innings([], 1)
        assert summary.runs == 0
        assert summary.run_rate == 0.0


class TestBattingCard:
    def test_wide_not_faced_no_ball_faced(self):
        events = [
            ev(extras=1, extra_type=ExtraType.WIDE),
            ev(runs=2, extras=1, extra_type=ExtraType.NO_BALL),
            ev(runs=1),
        ]
        batter = build_batting_card(events)[0]
        assert batter.balls == 2
        assert batter.runs == 3

    def test_byes_not_credited_to_batter(self):
        events = [ev(extras=4, extra_type=ExtraType.BYE)]
        batter = build_batting_card(events)[0]
        assert batter.runs == 0
        assert batter.balls == 1

    def test_run_out_of_non_striker(self):
        events = [
            ev(batsman_id=1, runs=1, is_wicket=True, wicket_type=WicketType.RUN_OUT, dismissed_player_id=2),
        ]
        card = {b.player_id: b for b in build_batting_card(events)}
        assert not card[1].is_out
        assert card[2].is_out
        assert card[2].dismissal == "run_out"
        assert card[2].balls == 0

    def test_order_of_appearance(self):
        events = [ev(batsman_id=5), ev(batsman_id=3), ev(batsman_id=5)]
        assert [b.player_id for b in build_batting_card(events)] == [5, 3]


class TestBowlingCard:
    def test_wides_and_no_balls_charged(self):
        events = [
            ev(ball=1, runs=1),
            ev(ball=2, extras=1, extra_type=ExtraType.WIDE),
            ev(ball=2, runs=4, extras=1, extra_type=ExtraType.NO_BALL),
            ev(ball=2, extras=4, extra_type=ExtraType.BYE),
        ]
        spell = build_bowling_card(events)[0]
        assert spell.runs == 7  # 1 + 1 wide + 4 + 1 no-ball, byes not charged
        assert spell.legal_balls == 2
        assert spell.wides == 1
        assert spell.no_balls == 1
        assert spell.overs == "0.2"

    def test_run_out_not_bowler_wicket(self):
        events = [
            ev(is_wicket=True, wicket_type=WicketType.CAUGHT, fielder_id=20),
            ev(ball=2, is_wicket=True, wicket_type=WicketType.RUN_OUT, fielder_id=21),
        ]
        assert build_bowling_card(events)[0].wickets == 1

    def test_economy(self):
        events = [ev(ball=b, runs=2) for b in range(1, 7)]
        spell = build_bowling_card(events)[0]
        assert spell.overs == "1.0"
        assert spell.economy == 12.0


class TestFieldingCard:
    def test_credits(self):
        events = [
            ev(is_wicket=True, wicket_type=WicketType.CAUGHT, fielder_id=20),
            ev(ball=2, is_wicket=True, wicket_type=WicketType.STUMPED, fielder_id=21),
            ev(ball=3, is_wicket=True, wicket_type=WicketType.RUN_OUT, fielder_id=20),
            ev(ball=4, is_wicket=True, wicket_type=WicketType.BOWLED),
        ]
        card = {r.player_id: r for r in build_fielding_card(events)}
        assert card[20].catches == 1
        assert card[20].run_outs == 1
        assert card[21].stumps == 1
        assert len(card) == 2


class TestPlayerFigures:
    def test_figures_across_innings(self):
        events = [
            ev(innings=1, batsman_id=1, bowler_id=10, runs=4),
            ev(innings=2, batsman_id=10, bowler_id=1, runs=6),
            ev(innings=2, ball=2, batsman_id=10, bowler_id=1, is_wicket=True,
               wicket_type=WicketType.CAUGHT, fielder_id=2),
        ]
        figures = build_player_figures(events)
        assert figures[1].runs == 4
        assert figures[1].wickets == 1
        assert figures[1].balls_bowled == 2
        assert figures[10].runs == 6
        assert figures[10].is_out
        assert figures[10].runs_conceded == 4
        assert figures[2].fielding.catches == 1


class TestBallPosition:
    def test_advances_within_over(self):
        assert next_ball_position(3, 2) == (3, 3)

    def test_new_over_after_sixth_ball(self):
        assert next_ball_position(3, 6) == (4, 1)

    def test_illegal_ball_rebowled(self):
        assert next_ball_position(3, 6, legal=False) == (3, 6)


class TestOutcomeLabels:
    def test_labels(self):
        assert outcome_label(ev(runs=4)) == "4"
        assert outcome_label(ev(extras=1, extra_type=ExtraType.WIDE)) == "Wd"
        assert outcome_label(ev(extras=1, extra_type=ExtraType.NO_BALL)) == "Nb"
        assert outcome_label(ev(extras=2, extra_type=ExtraType.BYE)) == "2B"
        assert outcome_label(ev(extras=1, extra_type=ExtraType.LEG_BYE)) == "1Lb"
        assert outcome_label(ev(is_wicket=True, wicket_type=WicketType.LBW)) == "W"

    def test_last_balls_most_recent_first(self):
        events = [ev(ball=b, runs=b) for b in range(1, 6)]
        assert [e.runs for e in last_balls(events, 3)] == [5, 4, 3]
        assert last_balls(events, 0) == []


class TestTopPerformers:
    def test_picks_best(self):
        stats = [
            stat(1, runs=45, balls_faced=30),
            stat(2, runs=45, balls_faced=25),
            stat(3, wickets_taken=3, runs_conceded=30, balls_bowled=24),
            stat(4, wickets_taken=3, runs_conceded=22, balls_bowled=24),
        ]
        batsman, bowler = top_performers(stats)
        assert batsman.player_id == 2
        assert bowler.player_id == 4

    def test_non_bowlers_ignored(self):
        stats = [stat(1, runs=10, balls_faced=8)]
        batsman, bowler = top_performers(stats)
        assert batsman.player_id == 1
        assert bowler is None

    def test_empty(self):
        assert top_performers([]) == (None, None)
