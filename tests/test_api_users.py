"""
API tests for auth, admin approvals, profiles, following and dashboards.
"""
from unittest.mock import patch

from pitchside.models.user import User, UserRole
from pitchside.models.match import MatchStatus
from pitchside.auth.utils import create_refresh_token

from conftest import make_user, make_player, make_match, auth_headers


class TestAuth:
    def test_google_sign_in_creates_unapproved_fan(self, client, db):
        claims = {"sub": "g-123", "email": "new@example.com", "name": "New Person"}
        with patch("pitchside.api.auth.verify_google_token", return_value=claims):
            response = client.post("/api/auth/google", json={"token": "google-id-token"})

        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "fan"
        assert data["user"]["is_approved"] is False

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
        assert me.json()["email"] == "new@example.com"

    def test_second_sign_in_reuses_account(self, client, db):
        claims = {"sub": "g-456", "email": "again@example.com", "name": "Again"}
        with patch("pitchside.api.auth.verify_google_token", return_value=claims):
            first = client.post("/api/auth/google", json={"token": "t"}).json()
            second = client.post("/api/auth/google", json={"token": "t"}).json()
        assert first["user"]["id"] == second["user"]["id"]
        assert db.query(User).filter_by(email="again@example.com").count() == 1

    def test_invalid_google_token(self, client):
        with patch("pitchside.api.auth.verify_google_token", side_effect=ValueError("bad token")):
            response = client.post("/api/auth/google", json={"token": "nope"})
        assert response.status_code == 401

    def test_refresh(self, client, fan):
        response = client.post("/api/auth/refresh", json={"refresh_token": create_refresh_token(fan.id)})
        assert response.status_code == 200
        assert response.json()["access_token"]

    def test_access_token_not_accepted_for_refresh(self, client, fan):
        headers = auth_headers(fan)
        access_token = headers["Authorization"].split()[1]
        response = client.post("/api/auth/refresh", json={"refresh_token": access_token})
        assert response.status_code == 401

    def test_bad_bearer_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestAdmin:
    def test_pending_and_approve_user(self, client, db, admin):
        pending = make_user(db, UserRole.ORGANIZER, approved=False)
        headers = auth_headers(admin)

        ids = [u["id"] for u in client.get("/api/admin/pending-users", headers=headers).json()]
        assert ids == [pending.id]

        response = client.patch(f"/api/admin/users/{pending.id}/approve", headers=headers,
                                json={"is_approved": True})
        assert response.status_code == 200
        assert client.get("/api/admin/pending-users", headers=headers).json() == []

    def test_change_role(self, client, db, admin, fan):
        response = client.patch(f"/api/admin/users/{fan.id}/role", headers=auth_headers(admin),
                                json={"role": "organizer"})
        assert response.status_code == 200
        db.expire_all()
        assert db.get(User, fan.id).role == UserRole.ORGANIZER

    def test_invalid_role(self, client, admin, fan):
        response = client.patch(f"/api/admin/users/{fan.id}/role", headers=auth_headers(admin),
                                json={"role": "captain"})
        assert response.status_code == 422

    def test_pending_players(self, client, db, admin):
        player = make_player(db, approved=False)
        headers = auth_headers(admin)
        assert [p["id"] for p in client.get("/api/admin/pending-players", headers=headers).json()] == [player.id]

        client.patch(f"/api/admin/players/{player.id}/approve", headers=headers, json={"is_approved": True})
        assert client.get("/api/admin/pending-players", headers=headers).json() == []

    def test_admin_only(self, client, organizer):
        response = client.get("/api/admin/users", headers=auth_headers(organizer))
        assert response.status_code == 403

    def test_unknown_user(self, client, admin):
        response = client.patch("/api/admin/users/999/approve", headers=auth_headers(admin), json={})
        assert response.status_code == 404


class TestProfile:
    def test_update_profile(self, client, fan):
        response = client.patch("/api/users/profile", headers=auth_headers(fan), json={
            "full_name": "Fred Follower", "email": "fred@example.org", "phone": "555-0100", "bio": "Loves cricket"})
        assert response.status_code == 200
        data = response.json()
        assert data["full_name"] == "Fred Follower"
        assert data["email"] == "fred@example.org"
        assert data["bio"] == "Loves cricket"

    def test_full_name_required(self, client, fan):
        response = client.patch("/api/users/profile", headers=auth_headers(fan), json={"full_name": " "})
        assert response.status_code == 400
        assert response.json()["detail"] == "Full name is required"

    def test_invalid_email(self, client, fan):
        response = client.patch("/api/users/profile", headers=auth_headers(fan),
                                json={"full_name": "Fred", "email": "not-an-email"})
        assert response.json()["detail"] == "Invalid email format"

    def test_email_in_use(self, client, fan, organizer):
        response = client.patch("/api/users/profile", headers=auth_headers(fan),
                                json={"full_name": "Fred", "email": organizer.email})
        assert response.status_code == 400
        assert response.json()["detail"] == "Email already in use"


class TestFollowing:
    def test_follow_is_idempotent(self, client, fan, two_teams):
        (lions, _), _ = two_teams
        headers = auth_headers(fan)
        for _ in range(2):
            response = client.post("/api/fan/follow-team", headers=headers, json={"team_id": lions.id})
            assert response.status_code == 200

        teams = client.get("/api/user/followed-teams", headers=headers).json()
        assert len(teams) == 1
        assert teams[0]["follower_count"] == 1

        public = client.get(f"/api/fan/{fan.id}/followed-teams").json()
        assert [t["id"] for t in public] == [lions.id]
        assert client.get(f"/api/teams/{lions.id}").json()["follower_count"] == 1

    def test_follower_counts_include_other_fans(self, client, db, fan, two_teams):
        (lions, _), _ = two_teams
        other = make_user(db, UserRole.FAN)
        client.post("/api/fan/follow-team", headers=auth_headers(other), json={"team_id": lions.id})
        client.post("/api/fan/follow-team", headers=auth_headers(fan), json={"team_id": lions.id})
        teams = client.get("/api/user/followed-teams", headers=auth_headers(fan)).json()
        assert teams[0]["follower_count"] == 2

    def test_unfollow_team(self, client, fan, two_teams):
        (lions, _), _ = two_teams
        headers = auth_headers(fan)
        client.post("/api/fan/follow-team", headers=headers, json={"team_id": lions.id})
        client.post("/api/fan/unfollow-team", headers=headers, json={"team_id": lions.id})
        assert client.get("/api/user/followed-teams", headers=headers).json() == []

    def test_follow_player(self, client, fan, two_teams):
        (_, lion_players), _ = two_teams
        headers = auth_headers(fan)
        client.post("/api/fan/follow-player", headers=headers, json={"player_id": lion_players[0].id})

        players = client.get("/api/user/followed-players", headers=headers).json()
        assert players[0]["full_name"] == "Lion 1"
        assert players[0]["team_name"] == "Lions"

        client.post("/api/fan/unfollow-player", headers=headers, json={"player_id": lion_players[0].id})
        assert client.get(f"/api/fan/{fan.id}/followed-players").json() == []

    def test_follow_unknown(self, client, fan):
        headers = auth_headers(fan)
        assert client.post("/api/fan/follow-team", headers=headers, json={"team_id": 999}).status_code == 404
        assert client.post("/api/fan/follow-player", headers=headers, json={"player_id": 999}).status_code == 404

    def test_only_fans_follow(self, client, organizer, two_teams):
        (lions, _), _ = two_teams
        response = client.post("/api/fan/follow-team", headers=auth_headers(organizer), json={"team_id": lions.id})
        assert response.status_code == 403


class TestDashboard:
    def test_fan_dashboard(self, client, db, fan, organizer, two_teams):
        (lions, _), (tigers, _) = two_teams
        live = make_match(db, lions, tigers, organizer, status=MatchStatus.LIVE)
        upcoming = make_match(db, tigers, lions, organizer, days_from_now=2)
        client.post("/api/fan/follow-team", headers=auth_headers(fan), json={"team_id": lions.id})

        data = client.get("/api/dashboard", headers=auth_headers(fan)).json()
        assert data["role"] == "fan"
        assert [t["name"] for t in data["followed_teams"]] == ["Lions"]
        assert [m["id"] for m in data["live_matches"]] == [live.id]
        assert [m["id"] for m in data["upcoming_matches"]] == [upcoming.id]

    def test_organizer_dashboard(self, client, db, organizer, two_teams):
        (lions, _), (tigers, _) = two_teams
        make_match(db, lions, tigers, organizer, status=MatchStatus.LIVE)
        make_match(db, lions, tigers, organizer)

        data = client.get("/api/dashboard", headers=auth_headers(organizer)).json()
        assert data["role"] == "organizer"
        assert len(data["teams"]) == 2
        assert data["match_counts"] == {"scheduled": 1, "live": 1, "completed": 0, "cancelled": 0}

    def test_player_dashboard(self, client, db, two_teams):
        (_, lion_players), _ = two_teams
        player_user = db.get(User, lion_players[0].user_id)

        data = client.get("/api/dashboard", headers=auth_headers(player_user)).json()
        assert data["role"] == "player"
        assert data["profile"]["id"] == lion_players[0].id
        assert data["team"]["name"] == "Lions"
        assert data["career"]["matches"] == 0
        assert data["recent_stats"] == []

    def test_player_without_profile(self, client, db):
        player_user = make_user(db, UserRole.PLAYER)
        data = client.get("/api/dashboard", headers=auth_headers(player_user)).json()
        assert data["profile"] is None

    def test_admin_dashboard(self, client, db, admin, two_teams):
        make_user(db, UserRole.FAN, approved=False)
        data = client.get("/api/dashboard", headers=auth_headers(admin)).json()
        assert data["role"] == "admin"
        assert data["total_players"] == 6
        assert data["pending_users"] == 1
        assert data["pending_players"] == 0


class TestHealth:
    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "healthy"}
        assert client.get("/").json()["status"] == "running"
