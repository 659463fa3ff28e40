"""
API tests for teams, player profiles and stats endpoints.
"""
from pitchside.models.user import UserRole
from pitchside.models.player import Player
from pitchside.models.match import MatchStatus
from pitchside.engine.scoring_engine import ScoringEngine

from conftest import make_user, make_team, make_player, make_match, auth_headers


class TestTeams:
    def test_create_and_list(self, client, organizer):
        headers = auth_headers(organizer)
        response = client.post("/api/teams", headers=headers, json={"name": "Zebras", "location": "Zion"})
        assert response.status_code == 201
        assert response.json()["created_by_id"] == organizer.id

        client.post("/api/teams", headers=headers, json={"name": "Antelopes", "location": "Accra"})
        names = [t["name"] for t in client.get("/api/teams").json()]
        assert names == ["Antelopes", "Zebras"]

    def test_player_cannot_create_team(self, client, db):
        player_user = make_user(db, UserRole.PLAYER)
        response = client.post("/api/teams", headers=auth_headers(player_user),
                               json={"name": "Nope", "location": "Nowhere"})
        assert response.status_code == 403

    def test_my_teams(self, client, db, organizer):
        make_team(db, "Mine", organizer)
        make_team(db, "Theirs", make_user(db, UserRole.ORGANIZER))
        response = client.get("/api/teams/my", headers=auth_headers(organizer))
        assert [t["name"] for t in response.json()] == ["Mine"]

    def test_team_detail(self, client, two_teams):
        (lions, _), _ = two_teams
        data = client.get(f"/api/teams/{lions.id}").json()
        assert data["name"] == "Lions"
        assert data["squad_size"] == 3
        assert data["follower_count"] == 0

    def test_team_players(self, client, two_teams):
        (lions, _), _ = two_teams
        players = client.get(f"/api/teams/{lions.id}/players").json()
        assert [p["full_name"] for p in players] == ["Lion 1", "Lion 2", "Lion 3"]
        assert all(p["team_name"] == "Lions" for p in players)

    def test_unknown_team(self, client):
        assert client.get("/api/teams/999").status_code == 404
        assert client.get("/api/teams/999/record").status_code == 404

    def test_team_record(self, client, db, organizer, two_teams):
        (lions, _), (tigers, _) = two_teams
        match = make_match(db, lions, tigers, organizer, status=MatchStatus.LIVE)
        engine = ScoringEngine(db, match)
        engine.add_score(lions.id, 1, runs=120, overs="20.0")
        engine.add_score(tigers.id, 2, runs=100, wickets=10, overs="18.0")
        engine.complete()
        make_match(db, lions, tigers, organizer, days_from_now=3)

        data = client.get(f"/api/teams/{lions.id}/record").json()
        assert data["standing"]["won"] == 1
        assert data["standing"]["points"] == 2
        assert data["live"] == []
        assert len(data["upcoming"]) == 1


class TestPlayers:
    def test_create_profile(self, client, db):
        user = make_user(db, UserRole.PLAYER, name="Priya Player")
        headers = auth_headers(user)
        response = client.post("/api/players", headers=headers,
                               json={"position": "bowler", "bowling_style": "left-arm spin"})
        assert response.status_code == 201
        data = response.json()
        assert data["full_name"] == "Priya Player"
        assert data["position"] == "bowler"
        assert data["is_approved"] is False
        assert data["team_id"] is None

        again = client.post("/api/players", headers=headers, json={})
        assert again.status_code == 409

        me = client.get("/api/players/me", headers=headers).json()
        assert me["id"] == data["id"]

    def test_me_without_profile(self, client, fan):
        response = client.get("/api/players/me", headers=auth_headers(fan))
        assert response.status_code == 200
        assert response.json() is None

    def test_fan_cannot_create_profile(self, client, fan):
        assert client.post("/api/players", headers=auth_headers(fan), json={}).status_code == 403

    def test_available_players(self, client, db, organizer, two_teams):
        free_agent = make_player(db, name="Free Agent")
        response = client.get("/api/players/available", headers=auth_headers(organizer))
        assert [p["id"] for p in response.json()] == [free_agent.id]

    def test_organizer_signs_player_to_own_team(self, client, db, organizer, two_teams):
        (lions, _), _ = two_teams
        free_agent = make_player(db, name="Free Agent")
        response = client.patch(f"/api/players/{free_agent.id}/team", headers=auth_headers(organizer),
                                json={"team_id": lions.id})
        assert response.status_code == 200
        db.expire_all()
        assert db.get(Player, free_agent.id).team_id == lions.id

    def test_organizer_cannot_use_other_team(self, client, db, two_teams):
        (lions, _), _ = two_teams
        other = make_user(db, UserRole.ORGANIZER)
        free_agent = make_player(db, name="Free Agent")
        response = client.patch(f"/api/players/{free_agent.id}/team", headers=auth_headers(other),
                                json={"team_id": lions.id})
        assert response.status_code == 403

    def test_organizer_cannot_poach_from_other_team(self, client, db, two_teams):
        (lions, lion_players), _ = two_teams
        other = make_user(db, UserRole.ORGANIZER)
        bears = make_team(db, "Bears", other)
        response = client.patch(f"/api/players/{lion_players[0].id}/team", headers=auth_headers(other),
                                json={"team_id": bears.id})
        assert response.status_code == 403
        db.expire_all()
        assert db.get(Player, lion_players[0].id).team_id == lions.id

    def test_release_player(self, client, db, admin, two_teams):
        (_, lion_players), _ = two_teams
        response = client.patch(f"/api/players/{lion_players[0].id}/team", headers=auth_headers(admin),
                                json={"team_id": None})
        assert response.status_code == 200
        db.expire_all()
        assert db.get(Player, lion_players[0].id).team_id is None

    def test_stats_and_career(self, client, db, organizer, two_teams):
        (lions, lp), (tigers, _) = two_teams
        match = make_match(db, lions, tigers, organizer, status=MatchStatus.LIVE)
        ScoringEngine(db, match).upsert_player_stat(lp[0].id, {"runs": 64, "balls_faced": 40, "is_out": True})

        stats = client.get(f"/api/players/{lp[0].id}/stats").json()
        assert len(stats) == 1
        assert stats[0]["strike_rate"] == 160.0

        career = client.get(f"/api/players/{lp[0].id}/career").json()
        assert career["runs"] == 64
        assert career["batting_average"] == 64.0
        assert len(career["recent"]) == 1

    def test_unknown_player(self, client):
        assert client.get("/api/players/999").status_code == 404
        assert client.get("/api/players/999/career").status_code == 404


class TestStatsEndpoints:
    def test_overview_and_standings(self, client, two_teams):
        overview = client.get("/api/stats/overview").json()
        assert overview["total_matches"] == 0
        assert overview["top_run_scorer"] is None

        standings = client.get("/api/stats/standings").json()
        assert {s["team_name"] for s in standings} == {"Lions", "Tigers"}
        assert all(s["played"] == 0 for s in standings)
