"""
Tests for run normalization and time formatting.
"""

import pytest

from conftest import make_raw_run
from srcexport.ingestion.normalizer import format_run_time, normalize_run


class TestFormatRunTime:
    """Tests for format_run_time."""

    def test_hours_minutes_seconds(self):
        assert format_run_time(3661) == "01:01:01"

    def test_seconds_only(self):
        assert format_run_time(59) == "00:00:59"

    def test_whole_hours(self):
        assert format_run_time(7200) == "02:00:00"

    def test_minute_boundary(self):
        assert format_run_time(60) == "00:01:00"
        assert format_run_time(3599) == "00:59:59"

    def test_hours_not_capped(self):
        assert format_run_time(360000) == "100:00:00"
        assert format_run_time(360000 + 3600 + 61) == "101:01:01"

    def test_matches_divmod_for_many_values(self):
        for total in range(0, 200000, 997):
            hours, rem = divmod(total, 3600)
            minutes, seconds = divmod(rem, 60)
            assert format_run_time(total) == f"{hours:02d}:{minutes:02d}:{seconds:02d}"


@pytest.fixture
def client(make_client, lookup_routes):
    client, _ = make_client(lookup_routes)
    return client


class TestRejection:
    """Runs that normalize_run must reject."""

    def test_not_a_mapping(self, client):
        assert normalize_run(None, client) is None
        assert normalize_run("run", client) is None

    def test_missing_status(self, client):
        raw = make_raw_run("r1", 100)
        raw["status"] = {}
        assert normalize_run(raw, client) is None

    def test_status_not_an_object(self, client):
        raw = make_raw_run("r1", 100)
        raw["status"] = None
        assert normalize_run(raw, client) is None

    def test_unverified_excluded_by_default(self, client):
        assert normalize_run(make_raw_run("r1", 100, status="new"), client) is None
        assert normalize_run(make_raw_run("r1", 100, status="rejected"), client) is None

    def test_missing_time(self, client):
        raw = make_raw_run("r1", 100)
        del raw["times"]
        assert normalize_run(raw, client) is None

    def test_zero_time(self, client):
        assert normalize_run(make_raw_run("r1", 0), client) is None

    def test_sub_second_time_floors_to_zero(self, client):
        assert normalize_run(make_raw_run("r1", 0.5), client) is None

    def test_negative_time(self, client):
        assert normalize_run(make_raw_run("r1", -12), client) is None


class TestNormalizeRun:
    """Field mapping of accepted runs."""

    def test_verified_run_fields(self, client):
        run = normalize_run(make_raw_run("r1", 3661.5, values={"v1": "a"}), client)

        assert run["id"] == "r1"
        assert run["comment"] == "comment r1"
        assert run["submit_time"] == "2024-01-01T00:00:00Z"
        assert run["status"] == "verified"
        assert run["variables"] == {"v1": "a"}
        assert run["time_seconds"] == 3661.5
        assert run["time"] == "01:01:01"
        assert run["verify_time"] == "2024-01-02T00:00:00Z"
        assert run["verifier"] == "Moderator"
        assert run["videos"] == ["https://youtu.be/x"]
        assert run["platform"] == "GameCube"
        assert run["player"] == {"rel": "user", "id": "u1", "name": "Alice"}

    def test_unverified_included_on_request(self, client):
        run = normalize_run(make_raw_run("r1", 40, status="new"), client, include_unverified_runs=True)
        assert run is not None
        assert run["status"] == "new"
        assert "verify_time" not in run
        assert "verifier" not in run

    def test_guest_player(self, client):
        run = normalize_run(make_raw_run("r1", 40, guest="Speedy"), client)
        assert run["player"] == {"rel": "guest", "id": "Speedy", "name": "Speedy"}

    def test_multiple_players_leave_player_unset(self, client):
        players = [{"rel": "user", "id": "u1"}, {"rel": "user", "id": "u2"}]
        run = normalize_run(make_raw_run("r1", 40, players=players), client)
        assert run is not None
        assert "player" not in run

    def test_no_players_leave_player_unset(self, client):
        run = normalize_run(make_raw_run("r1", 40, player=None), client)
        assert "player" not in run

    def test_videos_filter_empty_uris(self, client):
        raw = make_raw_run("r1", 40)
        raw["videos"] = {"links": [{"uri": "https://a"}, {"uri": ""}, {"uri": "https://b"}]}
        run = normalize_run(raw, client)
        assert run["videos"] == ["https://a", "https://b"]

    def test_no_videos_key_without_links(self, client):
        run = normalize_run(make_raw_run("r1", 40, videos=()), client)
        assert "videos" not in run

    def test_no_platform_key_without_system(self, client):
        raw = make_raw_run("r1", 40)
        raw["system"] = {"platform": None}
        run = normalize_run(raw, client)
        assert "platform" not in run

    def test_missing_values_become_empty_mapping(self, client):
        raw = make_raw_run("r1", 40)
        raw["values"] = None
        assert normalize_run(raw, client)["variables"] == {}

    def test_does_not_modify_raw_run(self, client):
        raw = make_raw_run("r1", 40, values={"v1": "a"})
        normalize_run(raw, client)["variables"]["v1"] = "changed"
        assert raw["values"] == {"v1": "a"}


class TestIdempotence:
    """Normalizing again gives the same run without extra lookups."""

    def test_same_input_same_output(self, make_client, lookup_routes):
        client, session = make_client(lookup_routes)
        raw = make_raw_run("r1", 100)

        first = normalize_run(raw, client)
        requests_after_first = len(session.calls)
        second = normalize_run(raw, client)

        assert first == second
        assert len(session.calls) == requests_after_first

    def test_shared_ids_fetched_once(self, make_client, lookup_routes):
        client, session = make_client(lookup_routes)
        for i in range(5):
            normalize_run(make_raw_run(f"r{i}", 100 + i), client)
        assert sorted(session.paths()) == ["platforms/p1", "users/mod1", "users/u1"]
