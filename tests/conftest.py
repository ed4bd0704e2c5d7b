"""
Shared fixtures: an in-memory stand-in for the speedrun.com HTTP API.
"""

import pytest
import requests

from srcexport.config import SPEEDRUN_API_BASE
from srcexport.ingestion.client import RateLimiter, SpeedrunClient


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """
    Answers GET requests from a route table keyed by API path.

    A route value may be a response body, a FakeResponse, an exception to
    raise, or a callable taking the query params and returning any of those.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.headers = {}
        self.calls = []

    def get(self, url, params=None, timeout=None):
        path = url[len(SPEEDRUN_API_BASE):]
        self.calls.append((path, dict(params or {})))
        if path not in self.routes:
            return FakeResponse({"status": 404, "message": "not found"}, status_code=404)

        result = self.routes[path]
        if callable(result) and not isinstance(result, FakeResponse):
            result = result(params or {})
        if isinstance(result, Exception):
            raise result
        if isinstance(result, FakeResponse):
            return result
        return FakeResponse(result)

    def paths(self):
        return [path for path, _ in self.calls]


def paged(items):
    """Route handler serving a list through offset/max pagination."""
    def handler(params):
        offset = int(params.get("offset", 0))
        size = int(params.get("max", 100))
        return {"data": items[offset:offset + size]}
    return handler


def make_raw_run(
    run_id,
    seconds,
    status="verified",
    player="u1",
    guest=None,
    players=None,
    values=None,
    examiner="mod1",
    platform="p1",
    videos=("https://youtu.be/x",),
    submitted="2024-01-01T00:00:00Z",
):
    """Build a raw run object shaped like the /runs endpoint output."""
    if players is None:
        if guest is not None:
            players = [{"rel": "guest", "name": guest}]
        elif player is not None:
            players = [{"rel": "user", "id": player}]
        else:
            players = []
    raw = {
        "id": run_id,
        "comment": f"comment {run_id}",
        "submitted": submitted,
        "status": {"status": status, "examiner": examiner, "verify-date": "2024-01-02T00:00:00Z"},
        "times": {"primary_t": seconds},
        "players": players,
        "values": dict(values or {}),
        "system": {"platform": platform},
        "videos": {"links": [{"uri": uri} for uri in videos]} if videos else None,
    }
    return raw


def user_routes(names):
    """Routes for users/<id> lookups."""
    return {f"users/{uid}": {"data": {"id": uid, "names": {"international": name}}} for uid, name in names.items()}


@pytest.fixture
def make_client():
    """Build a SpeedrunClient over a FakeSession with no real waiting."""
    def factory(routes=None, max_attempts=3):
        session = FakeSession(routes)
        client = SpeedrunClient(
            session=session,
            rate_limiter=RateLimiter(interval=0, sleep=lambda s: None),
            max_attempts=max_attempts,
            sleep=lambda s: None,
        )
        return client, session
    return factory


@pytest.fixture
def lookup_routes():
    routes = user_routes({"u1": "Alice", "u2": "Bob", "u3": "Cara", "mod1": "Moderator"})
    routes["platforms/p1"] = {"data": {"id": "p1", "name": "GameCube"}}
    return routes
