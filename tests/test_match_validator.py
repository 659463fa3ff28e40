"""
Tests for fixture, ball and score validation rules.
"""
import pytest

from pitchside.models.match import Match, MatchType, MatchStatus, ExtraType, WicketType
from pitchside.validators.match_validator import MatchValidator


def ball(**overrides):
    data = {
        "innings": 1, "over": 1, "ball": 1, "batsman_id": 1, "bowler_id": 2,
        "runs": 0, "extras": 0, "extra_type": None, "is_wicket": False, "wicket_type": None,
    }
    data.update(overrides)
    return data


@pytest.fixture
def t20():
    return Match(match_type=MatchType.T20)


@pytest.fixture
def five_day():
    return Match(match_type=MatchType.TEST)


class TestNewMatch:
    def test_valid(self):
        assert MatchValidator.validate_new_match(1, 2, "Oval")["valid"]

    def test_same_team(self):
        result = MatchValidator.validate_new_match(1, 1, "Oval")
        assert not result["valid"]
        assert "A team cannot play against itself" in result["errors"]

    def test_venue_required(self):
        assert not MatchValidator.validate_new_match(1, 2, "  ")["valid"]


class TestBallValidation:
    def test_plain_ball_valid(self, t20):
        assert MatchValidator.validate_ball(t20, ball(runs=4))["valid"]

    def test_third_innings_rejected_for_t20(self, t20):
        assert not MatchValidator.validate_ball(t20, ball(innings=3))["valid"]

    def test_fourth_innings_allowed_for_test(self, five_day):
        assert MatchValidator.validate_ball(five_day, ball(innings=4, over=130))["valid"]

    def test_over_beyond_limit(self, t20):
        result = MatchValidator.validate_ball(t20, ball(over=21))
        assert not result["valid"]
        assert "beyond the 20-over limit" in result["errors"][0]

    @pytest.mark.parametrize("number", [0, 7])
    def test_ball_number_range(self, t20, number):
        assert not MatchValidator.validate_ball(t20, ball(ball=number))["valid"]

    def test_runs_off_bat_range(self, t20):
        assert not MatchValidator.validate_ball(t20, ball(runs=7))["valid"]

    def test_wide_needs_extra_and_no_bat_runs(self, t20):
        assert not MatchValidator.validate_ball(t20, ball(extra_type=ExtraType.WIDE))["valid"]
        assert not MatchValidator.validate_ball(t20, ball(extra_type=ExtraType.WIDE, extras=1, runs=2))["valid"]
        assert MatchValidator.validate_ball(t20, ball(extra_type=ExtraType.WIDE, extras=5))["valid"]

    def test_no_ball_can_carry_bat_runs(self, t20):
        assert MatchValidator.validate_ball(t20, ball(extra_type=ExtraType.NO_BALL, extras=1, runs=6))["valid"]

    def test_byes_are_extras(self, t20):
        assert not MatchValidator.validate_ball(t20, ball(extra_type=ExtraType.BYE, runs=2))["valid"]
        assert MatchValidator.validate_ball(t20, ball(extra_type=ExtraType.LEG_BYE, extras=2))["valid"]

    def test_wicket_needs_type(self, t20):
        assert not MatchValidator.validate_ball(t20, ball(is_wicket=True))["valid"]
        assert not MatchValidator.validate_ball(t20, ball(wicket_type=WicketType.BOWLED))["valid"]

    def test_dismissals_off_wide(self, t20):
        stumped = ball(extra_type=ExtraType.WIDE, extras=1, is_wicket=True, wicket_type=WicketType.STUMPED)
        caught = ball(extra_type=ExtraType.WIDE, extras=1, is_wicket=True, wicket_type=WicketType.CAUGHT)
        assert MatchValidator.validate_ball(t20, stumped)["valid"]
        assert not MatchValidator.validate_ball(t20, caught)["valid"]

    def test_dismissals_off_no_ball(self, t20):
        run_out = ball(extra_type=ExtraType.NO_BALL, extras=1, is_wicket=True, wicket_type=WicketType.RUN_OUT)
        bowled = ball(extra_type=ExtraType.NO_BALL, extras=1, is_wicket=True, wicket_type=WicketType.BOWLED)
        assert MatchValidator.validate_ball(t20, run_out)["valid"]
        assert not MatchValidator.validate_ball(t20, bowled)["valid"]

    def test_batsman_and_bowler_differ(self, t20):
        assert not MatchValidator.validate_ball(t20, ball(batsman_id=3, bowler_id=3))["valid"]


class TestScoreValidation:
    def test_valid(self):
        assert MatchValidator.validate_score({"runs": 150, "wickets": 6, "overs": "20.0", "extras": 8})["valid"]

    def test_too_many_wickets(self):
        assert not MatchValidator.validate_score({"wickets": 11})["valid"]

    def test_bad_overs(self):
        result = MatchValidator.validate_score({"overs": "12.7"})
        assert not result["valid"]

    def test_extras_exceed_runs(self):
        assert not MatchValidator.validate_score({"runs": 5, "extras": 6})["valid"]


class TestTransitions:
    @pytest.mark.parametrize("current,target,allowed", [
        (MatchStatus.SCHEDULED, MatchStatus.LIVE, True),
        (MatchStatus.SCHEDULED, MatchStatus.CANCELLED, True),
        (MatchStatus.SCHEDULED, MatchStatus.COMPLETED, False),
        (MatchStatus.LIVE, MatchStatus.COMPLETED, True),
        (MatchStatus.LIVE, MatchStatus.SCHEDULED, False),
        (MatchStatus.COMPLETED, MatchStatus.LIVE, False),
        (MatchStatus.CANCELLED, MatchStatus.SCHEDULED, False),
    ])
    def test_can_transition(self, current, target, allowed):
        assert MatchValidator.can_transition(current, target) is allowed
