"""
Leaderboard Ranker

Turns a leaderboard's raw run list into ranked entries:
- Each player keeps only their fastest run
- Entries are ordered by time, fastest first
- Ranks use standard competition ranking: tied times share a rank and the
  next distinct time gets its 1-based position (10, 10, 20 -> 1, 1, 3)
- Optionally, a player's slower runs are kept as that entry's obsolete_runs

Runs without a time or without a resolved player are never ranked.
"""

import pandas as pd

from srcexport.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def is_rankable(run: dict) -> bool:
    """A run can be ranked only with a time and a single resolved player."""
    player = run.get("player") or {}
    return bool(run.get("time_seconds")) and bool(player.get("id"))


def rank_runs(runs: list[dict], include_run_history: bool = False) -> list[dict]:
    """
    Collapse runs to one ranked entry per player.

    Args:
        runs: Normalized runs of one leaderboard
        include_run_history: Attach each player's slower runs as obsolete_runs

    Returns:
        New list of entry dicts (copies of the runs) with a 'rank' key
    """
    eligible = [run for run in runs if is_rankable(run)]
    if not eligible:
        return []

    frame = pd.DataFrame({
        "player_id": [run["player"]["id"] for run in eligible],
        "time_seconds": [run["time_seconds"] for run in eligible],
    })
    # Players are ordered by first appearance to break ties deterministically
    frame["player_order"] = frame.groupby("player_id", sort=False).ngroup()

    by_time = frame.sort_values("time_seconds", kind="stable")
    best = by_time.drop_duplicates("player_id", keep="first")
    best = best.sort_values("player_order", kind="stable").sort_values("time_seconds", kind="stable")
    best = best.assign(rank=best["time_seconds"].rank(method="min").astype(int))

    history = {}
    if include_run_history:
        for player_id, group in by_time.groupby("player_id", sort=False):
            history[player_id] = [dict(eligible[pos]) for pos in group.index[1:]]

    entries = []
    for pos, row in best.iterrows():
        entry = dict(eligible[pos])
        entry["rank"] = int(row["rank"])
        if include_run_history:
            entry["obsolete_runs"] = history.get(row["player_id"], [])
        entries.append(entry)

    return entries


def rank_leaderboard(leaderboard: dict, include_run_history: bool = False) -> dict:
    """Return a copy of the leaderboard with its runs replaced by ranked entries."""
    entries = rank_runs(leaderboard.get("runs") or [], include_run_history)
    dropped = len(leaderboard.get("runs") or []) - len(entries)
    logger.debug(f"Leaderboard {leaderboard['name']!r}: {len(entries)} ranked entries, {dropped} runs collapsed or dropped")
    return {**leaderboard, "runs": entries}


def rank_leaderboards(leaderboards: dict[str, dict], include_run_history: bool = False) -> dict[str, dict]:
    """Rank every leaderboard of a mapping, keeping its order."""
    ranked = {
        lb_id: rank_leaderboard(leaderboard, include_run_history)
        for lb_id, leaderboard in leaderboards.items()
    }
    total = sum(len(lb["runs"]) for lb in ranked.values())
    logger.info(f"Ranked {len(ranked)} leaderboards ({total} entries)")
    return ranked
