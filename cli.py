#!/usr/bin/env python3
"""
CLI for managing Pitchside data and viewing scorecards
"""
from datetime import datetime, timedelta

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from pitchside.config import settings
from pitchside.database import init_db, get_session
from pitchside.logging_config import setup_logging
from pitchside.models import (
    User, UserRole, Team, Player, PlayerPosition, Match, MatchStatus, MatchType,
)
from pitchside.engine import ScoringEngine, StatsEngine
from pitchside.engine.scorecard import build_batting_card, build_bowling_card, events_for_innings
from pitchside.errors import PitchsideError

console = Console()

# Demo squads: (name, position) per team
DEMO_SQUADS = {
    ("Riverside Strikers", "Riverside"): [
        ("Arjun Mehta", PlayerPosition.BATSMAN),
        ("Tom Hale", PlayerPosition.ALL_ROUNDER),
        ("Sam Okafor", PlayerPosition.BOWLER),
    ],
    ("Hillcrest Royals", "Hillcrest"): [
        ("Dev Patel", PlayerPosition.BATSMAN),
        ("Liam Ward", PlayerPosition.WICKET_KEEPER),
        ("Ravi Iyer", PlayerPosition.BOWLER),
    ],
}

# (runs, extras, extra_type, wicket_type) for each demo delivery
DEMO_OVER = [
    (1, 0, None, None),
    (4, 0, None, None),
    (0, 1, "wide", None),
    (0, 0, None, None),
    (6, 0, None, None),
    (2, 0, None, None),
    (0, 0, None, "bowled"),
]


@click.group()
@click.option("--verbose", is_flag=True, help="Log at DEBUG level")
def cli(verbose: bool):
    """Pitchside - Cricket Management"""
    setup_logging("DEBUG" if verbose else settings.LOG_LEVEL, settings.LOG_FILE or None)


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


def _bowl_demo_over(engine: ScoringEngine, innings: int, over: int, batting_team_id: int,
                    batsman: Player, bowler: Player):
    ball = 1
    for runs, extras, extra_type, wicket_type in DEMO_OVER:
        if ball > 6:
            break
        engine.record_ball({
            "innings": innings,
            "over": over,
            "ball": ball,
            "batting_team_id": batting_team_id,
            "batsman_id": batsman.id,
            "bowler_id": bowler.id,
            "runs": runs,
            "extras": extras,
            "extra_type": extra_type,
            "is_wicket": wicket_type is not None,
            "wicket_type": wicket_type,
        })
        if extra_type not in ("wide", "no_ball"):
            ball += 1


@cli.command()
def seed():
    """Create demo users, teams, players and two scored matches"""
    init_db()
    session = get_session()
    try:
        if session.query(Team).count():
            console.print("[red]Database already has teams; seed skipped.[/red]")
            return

        organizer = User(
            email="organizer@pitchside.local", google_id="seed-organizer",
            full_name="Demo Organizer", role=UserRole.ORGANIZER, is_approved=True,
        )
        session.add(organizer)
        session.flush()

        teams = []
        for (team_name, location), squad in DEMO_SQUADS.items():
            team = Team(name=team_name, location=location, created_by_id=organizer.id)
            session.add(team)
            session.flush()
            for full_name, position in squad:
                slug = full_name.lower().replace(" ", ".")
                user = User(
                    email=f"{slug}@pitchside.local", google_id=f"seed-{slug}",
                    full_name=full_name, role=UserRole.PLAYER, is_approved=True,
                )
                session.add(user)
                session.flush()
                session.add(Player(user_id=user.id, team_id=team.id, position=position, is_approved=True))
            teams.append(team)
        session.commit()

        home, away = teams
        now = datetime.utcnow()

        # Finished match scored by hand
        finished = Match(
            team1_id=home.id, team2_id=away.id, venue="Riverside Oval",
            match_date=now - timedelta(days=3), match_type=MatchType.T20,
            organizer_id=organizer.id,
        )
        session.add(finished)
        session.commit()
        engine = ScoringEngine(session, finished)
        engine.start()
        engine.add_score(home.id, 1, runs=162, wickets=7, overs="20.0", extras=9)
        engine.add_score(away.id, 2, runs=151, wickets=10, overs="19.2", extras=6)
        result = engine.complete()

        # Live match with a ball feed
        live = Match(
            team1_id=away.id, team2_id=home.id, venue="Hillcrest Park",
            match_date=now, match_type=MatchType.T20, organizer_id=organizer.id,
        )
        session.add(live)
        session.commit()
        engine = ScoringEngine(session, live)
        engine.start()
        away_players, home_players = list(away.players), list(home.players)
        _bowl_demo_over(engine, 1, 1, away.id, away_players[0], home_players[-1])
        _bowl_demo_over(engine, 1, 2, away.id, away_players[1], home_players[1])

        # Fixture for later in the week
        session.add(Match(
            team1_id=home.id, team2_id=away.id, venue="Riverside Oval",
            match_date=now + timedelta(days=4), match_type=MatchType.ODI,
            organizer_id=organizer.id,
        ))
        session.commit()

        console.print(f"[green]Seeded {len(teams)} teams and 3 matches.[/green]")
        console.print(f"  Match #{finished.id}: {result.summary}")
        console.print(f"  Match #{live.id}: live")
    except PitchsideError as e:
        session.rollback()
        raise click.ClickException(e.message)
    finally:
        session.close()


def _print_innings(session, match: Match, score, events, names: dict):
    team = session.get(Team, score.team_id)
    console.print(Panel(
        f"[bold]{team.name if team else score.team_id}[/bold]  {score.display}  RR {score.run_rate:.2f}",
        title=f"Innings {score.innings}",
    ))
    innings_events = events_for_innings(events, score.innings)
    if not innings_events:
        console.print("[dim]No ball-by-ball record for this innings.[/dim]")
        return

    bat_table = Table(title="Batting")
    bat_table.add_column("Batter", style="cyan")
    bat_table.add_column("Dismissal")
    bat_table.add_column("R", justify="right")
    bat_table.add_column("B", justify="right")
    bat_table.add_column("4s", justify="right")
    bat_table.add_column("6s", justify="right")
    bat_table.add_column("SR", justify="right")
    for bi in build_batting_card(innings_events):
        bat_table.add_row(
            names.get(bi.player_id, str(bi.player_id)),
            bi.dismissal if bi.is_out else "not out",
            str(bi.runs),
            str(bi.balls),
            str(bi.fours),
            str(bi.sixes),
            f"{bi.strike_rate:.1f}",
        )
    console.print(bat_table)

    bowl_table = Table(title="Bowling")
    bowl_table.add_column("Bowler", style="magenta")
    bowl_table.add_column("O", justify="right")
    bowl_table.add_column("R", justify="right")
    bowl_table.add_column("W", justify="right")
    bowl_table.add_column("Econ", justify="right")
    for spell in build_bowling_card(innings_events):
        bowl_table.add_row(
            names.get(spell.player_id, str(spell.player_id)),
            spell.overs,
            str(spell.runs),
            str(spell.wickets),
            f"{spell.economy:.2f}",
        )
    console.print(bowl_table)


@cli.command()
@click.argument("match_id", type=int)
def scorecard(match_id: int):
    """Show a match scorecard"""
    session = get_session()
    try:
        match = session.get(Match, match_id)
        if match is None:
            raise click.ClickException(f"Match {match_id} not found")

        console.print(Panel(
            f"[bold cyan]{match.team1.name}[/bold cyan] vs [bold magenta]{match.team2.name}[/bold magenta]\n"
            f"{match.match_type.value} at {match.venue} - {match.status.value}",
            title=f"Match #{match.id}",
        ))

        engine = ScoringEngine(session, match)
        events = engine.get_balls()
        names = {p.id: p.full_name for p in session.query(Player).all()}
        for score in engine.get_scores():
            _print_innings(session, match, score, events, names)

        state = engine.state()
        if state.target is not None and match.status == MatchStatus.LIVE:
            console.print(f"Target {state.target}: {state.runs_needed} needed, RRR {state.required_run_rate}")
        if state.win_probability:
            console.print(
                f"Win probability: {match.team1.name} {state.win_probability['team1']}% - "
                f"{match.team2.name} {state.win_probability['team2']}%"
            )
        if match.result_summary:
            console.print(f"\n[bold green]{match.result_summary}[/bold green]")
    finally:
        session.close()


@cli.command()
def standings():
    """Show the team standings"""
    session = get_session()
    try:
        rows = StatsEngine(session).team_standings()
        if not rows:
            console.print("[red]No teams found. Run 'seed' first.[/red]")
            return

        table = Table(title="Standings")
        table.add_column("#", justify="right")
        table.add_column("Team", style="cyan")
        table.add_column("P", justify="right")
        table.add_column("W", justify="right")
        table.add_column("L", justify="right")
        table.add_column("NR", justify="right")
        table.add_column("Pts", justify="right", style="green")
        table.add_column("NRR", justify="right")
        for s in rows:
            table.add_row(
                str(s.position), s.team_name, str(s.played), str(s.won), str(s.lost),
                str(s.no_result), str(s.points), f"{s.nrr:+.3f}",
            )
        console.print(table)
    finally:
        session.close()


@cli.command()
def overview():
    """Show the tournament overview"""
    session = get_session()
    try:
        o = StatsEngine(session).tournament_overview()
        console.print(Panel("[bold]Tournament Overview[/bold]"))
        console.print(f"[cyan]Matches:[/cyan] {o.total_matches} "
                      f"({o.completed} completed, {o.live} live, {o.upcoming} upcoming, {o.cancelled} cancelled)")
        console.print(f"[cyan]Runs:[/cyan] {o.total_runs}  [cyan]Wickets:[/cyan] {o.total_wickets}")
        if o.most_successful_team:
            console.print(f"[cyan]Most successful:[/cyan] {o.most_successful_team.team_name} "
                          f"({o.most_successful_team.win_rate:.1f}% wins)")
        if o.top_run_scorer:
            console.print(f"[cyan]Top run scorer:[/cyan] {o.top_run_scorer.player_name} ({o.top_run_scorer.value})")
        if o.top_wicket_taker:
            console.print(f"[cyan]Top wicket taker:[/cyan] {o.top_wicket_taker.player_name} ({o.top_wicket_taker.value})")
    finally:
        session.close()


if __name__ == "__main__":
    cli()
