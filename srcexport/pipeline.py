"""
Export Pipeline

Runs one export end to end:
    resolve game -> fetch categories/variables -> fetch & normalize runs
    -> build leaderboards -> rank -> write CSV/JSON

Usage:
    from srcexport.config import ExportOptions
    from srcexport.pipeline import run_export
    run_export(ExportOptions(game="sms", output_dir="out"))
"""

from srcexport.config import ExportOptions
from srcexport.exporter import export
from srcexport.ingestion.client import SpeedrunClient
from srcexport.ingestion.game_loader import load_categories, load_category_runs, load_game
from srcexport.leaderboards.builder import build_all_leaderboards
from srcexport.leaderboards.ranker import rank_leaderboards
from srcexport.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def run_export(options: ExportOptions, client=None) -> dict:
    """
    Export one game's leaderboards.

    Args:
        options: Export options
        client: API client (default: a new SpeedrunClient)

    Returns:
        Dictionary with the game, categories, ranked leaderboards and the
        paths written

    Raises:
        NotFoundError: If the game abbreviation is unknown
        TransportError: If the API could not be reached
        FormatError: If the API answered with an unexpected payload
    """
    client = client or SpeedrunClient()

    logger.info("=" * 60)
    logger.info(f"Exporting speedrun.com leaderboards for '{options.game}'")
    logger.info("=" * 60)

    game = load_game(client, options.game)
    categories = load_categories(client, game["id"])

    runs_by_category = {}
    for category in categories:
        logger.info(f"Fetching runs for category {category['name']!r}...")
        runs_by_category[category["id"]] = load_category_runs(
            client, category["id"], include_unverified_runs=options.include_unverified_runs
        )

    leaderboards = build_all_leaderboards(
        categories, runs_by_category, breakout_variables=options.breakout_variables
    )
    ranked = rank_leaderboards(leaderboards, include_run_history=options.include_run_history)

    options.output_dir.mkdir(parents=True, exist_ok=True)
    paths = export(game, categories, ranked, options.output_dir, options.output_format)

    logger.info("=" * 60)
    logger.info(f"Export complete: {len(paths)} file(s) in {options.output_dir}")
    logger.info("=" * 60)

    return {
        "game": game,
        "categories": categories,
        "leaderboards": ranked,
        "paths": paths,
    }
