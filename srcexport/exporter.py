"""
Leaderboard Exporter

Writes ranked leaderboards to disk:
- csv: one file per non-empty leaderboard, each entry followed by its
  obsolete runs (if history was kept)
- json: a single document holding the game, its categories and every
  leaderboard

Record keys are snake_case inside the exporter's callers; published files use
the camelCase field names of the speedrun.com API.
"""

import json
from pathlib import Path

import pandas as pd

from srcexport.config import CSV_COLUMNS
from srcexport.utils import (
    atomic_write_csv,
    atomic_write_json,
    leaderboard_filename,
    setup_logging,
    validate_output_format,
)

# --- Module Logger ---
logger = setup_logging(__name__)

# snake_case record key -> published field name
PUBLISHED_FIELDS = {
    "category_id": "categoryId",
    "submit_time": "submitTime",
    "time_seconds": "timeSeconds",
    "verify_time": "verifyTime",
    "obsolete_runs": "obsoleteRuns",
}


def make_csv_row(run: dict) -> dict:
    """Flatten one run or entry into a CSV row keyed by CSV_COLUMNS."""
    player = run.get("player") or {}
    videos = run.get("videos")
    variables = run.get("variables") or {}
    return {
        "rank": run.get("rank"),
        "player": player.get("name"),
        "time": run.get("time"),
        "platform": run.get("platform"),
        "videos": ", ".join(videos) if videos else None,
        "submitTime": run.get("submit_time"),
        "status": run.get("status"),
        "verifyTime": run.get("verify_time"),
        "verifier": run.get("verifier"),
        "comment": run.get("comment"),
        "variables": json.dumps(variables, separators=(",", ":")) if variables else "",
    }


def leaderboard_to_dataframe(leaderboard: dict) -> pd.DataFrame:
    """Build the CSV table of one leaderboard, obsolete runs under their entry."""
    rows = []
    for entry in leaderboard.get("runs") or []:
        rows.append(make_csv_row(entry))
        for obsolete in entry.get("obsolete_runs") or []:
            rows.append(make_csv_row(obsolete))
    # object dtype keeps integer ranks intact next to blank obsolete ranks
    return pd.DataFrame(rows, columns=CSV_COLUMNS, dtype=object)


def export_csv(game: dict, leaderboards: dict[str, dict], output_dir: Path) -> list[Path]:
    """
    Write one CSV file per non-empty leaderboard.

    Returns:
        Paths of the files written, in leaderboard order
    """
    written = []
    for leaderboard in leaderboards.values():
        if not leaderboard.get("runs"):
            logger.debug(f"Skipping empty leaderboard {leaderboard['name']!r}")
            continue
        path = Path(output_dir) / leaderboard_filename(game["abbreviation"], leaderboard["name"])
        df = leaderboard_to_dataframe(leaderboard)
        atomic_write_csv(df, path, index=False)
        written.append(path)
        logger.info(f"Wrote {len(df)} rows to {path}")
    return written


def to_published(record: dict) -> dict:
    """Rename a run/entry/leaderboard's keys to their published names."""
    published = {}
    for key, value in record.items():
        if key in ("runs", "obsolete_runs"):
            value = [to_published(run) for run in value]
        published[PUBLISHED_FIELDS.get(key, key)] = value
    return published


def build_json_document(game: dict, categories: list[dict], leaderboards: dict[str, dict]) -> dict:
    """Assemble the JSON export document."""
    return {
        "game": {"id": game["id"], "abbrev": game["abbreviation"]},
        "categories": {category["id"]: category for category in categories},
        "leaderboards": {lb_id: to_published(lb) for lb_id, lb in leaderboards.items()},
    }


def export_json(game: dict, categories: list[dict], leaderboards: dict[str, dict], output_dir: Path) -> Path:
    """Write the single JSON export file and return its path."""
    path = Path(output_dir) / f"{game['abbreviation']}.json"
    atomic_write_json(build_json_document(game, categories, leaderboards), path)
    logger.info(f"Wrote {len(leaderboards)} leaderboards to {path}")
    return path


def export(game: dict, categories: list[dict], leaderboards: dict[str, dict], output_dir: Path, output_format: str) -> list[Path]:
    """
    Export in the requested format.

    Raises:
        ValueError: If the output format is not supported
    """
    validate_output_format(output_format)
    if output_format == "json":
        return [export_json(game, categories, leaderboards, output_dir)]
    return export_csv(game, leaderboards, output_dir)
