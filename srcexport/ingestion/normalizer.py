"""
Run Normalizer

Converts raw speedrun.com run objects into flat run records. Runs that cannot
be ranked (no status, unverified when only verified runs are wanted, no
positive time) are rejected by returning None; that is not an error.

Usage:
    from srcexport.ingestion.normalizer import normalize_run
    run = normalize_run(raw_run, client, include_unverified_runs=False)
"""

import math
from collections.abc import Mapping

from srcexport.config import VERIFIED_STATUS
from srcexport.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def format_run_time(total_seconds: int) -> str:
    """
    Format whole seconds as zero-padded HH:MM:SS.

    Hours are padded to two digits but never capped, so 360000 seconds
    formats as "100:00:00".

    Args:
        total_seconds: Whole number of seconds

    Returns:
        Formatted time string
    """
    seconds = total_seconds % 60
    remaining = total_seconds - seconds
    minutes_raw = remaining % 3600
    minutes = minutes_raw // 60
    hours = (remaining - minutes_raw) // 3600
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def _primary_time(raw_run: Mapping):
    times = raw_run.get("times")
    if not isinstance(times, Mapping):
        return None
    primary = times.get("primary_t")
    if isinstance(primary, bool) or not isinstance(primary, (int, float)):
        return None
    return primary


def _video_uris(raw_run: Mapping) -> list[str] | None:
    videos = raw_run.get("videos")
    links = videos.get("links") if isinstance(videos, Mapping) else None
    if not links or not links[0]:
        return None
    return [link["uri"] for link in links if isinstance(link, Mapping) and link.get("uri")]


def _resolve_player(players, client) -> dict | None:
    """Resolve the single attributed player, or None for zero/multiple players."""
    if not isinstance(players, list) or len(players) != 1:
        return None

    player = players[0]
    if not isinstance(player, Mapping):
        return None

    if player.get("rel") == "guest":
        return {"rel": "guest", "id": player.get("name"), "name": player.get("name")}
    if player.get("rel") == "user":
        return {"rel": "user", "id": player.get("id"), "name": client.resolve_username(player.get("id"))}
    return None


def normalize_run(raw_run, client, include_unverified_runs: bool = False) -> dict | None:
    """
    Normalize one raw run object.

    Args:
        raw_run: Run object as returned by the ``runs`` endpoint
        client: Object providing resolve_username() and resolve_platform_name()
        include_unverified_runs: Keep runs of any status, not just verified ones

    Returns:
        Run record with keys id, comment, submit_time, status, variables,
        time_seconds, time and, where available, verify_time, verifier,
        videos, platform, player. None if the run is rejected.
    """
    if not isinstance(raw_run, Mapping):
        return None

    status_obj = raw_run.get("status")
    status = status_obj.get("status") if isinstance(status_obj, Mapping) else None
    if not status:
        logger.debug(f"Skipping run {raw_run.get('id')}: no status")
        return None
    if not include_unverified_runs and status != VERIFIED_STATUS:
        logger.debug(f"Skipping run {raw_run.get('id')}: status '{status}'")
        return None

    primary = _primary_time(raw_run)
    if primary is None or math.floor(primary) <= 0:
        logger.debug(f"Skipping run {raw_run.get('id')}: no positive time")
        return None

    run = {
        "id": raw_run.get("id"),
        "comment": raw_run.get("comment"),
        "submit_time": raw_run.get("submitted"),
        "status": status,
        "variables": dict(raw_run.get("values") or {}),
        "time_seconds": primary,
        "time": format_run_time(math.floor(primary)),
    }

    if status == VERIFIED_STATUS:
        run["verify_time"] = status_obj.get("verify-date")
        run["verifier"] = client.resolve_username(status_obj.get("examiner"))

    videos = _video_uris(raw_run)
    if videos is not None:
        run["videos"] = videos

    system = raw_run.get("system")
    if isinstance(system, Mapping) and system.get("platform"):
        run["platform"] = client.resolve_platform_name(system["platform"])

    player = _resolve_player(raw_run.get("players"), client)
    if player is not None:
        run["player"] = player

    return run
