"""
Game Loader

Resolves a game by abbreviation and fetches its categories, category
variables and (normalized) runs from the speedrun.com API.

Usage:
    from srcexport.ingestion.game_loader import load_game, load_categories, load_category_runs
"""

from srcexport.config import RUNS_QUERY
from srcexport.ingestion.client import FormatError, NotFoundError
from srcexport.ingestion.normalizer import normalize_run
from srcexport.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def load_game(client, abbreviation: str) -> dict:
    """
    Resolve a game abbreviation to its id.

    Raises:
        NotFoundError: If no game has this abbreviation
    """
    abbreviation = abbreviation.lower()
    games = client.fetch_object("games", {"abbreviation": abbreviation})
    if not isinstance(games, list):
        raise FormatError("Expected a list of games")
    if not games or not games[0].get("id"):
        raise NotFoundError(f"Game not found: '{abbreviation}'")

    game = {"id": games[0]["id"], "abbreviation": abbreviation}
    logger.info(f"Resolved game '{abbreviation}' to id {game['id']}")
    return game


def parse_variable(variable_obj: dict) -> dict:
    """Convert a raw variable object into {id, name, values}."""
    values_obj = variable_obj.get("values") or {}
    values_map = values_obj.get("values") or {}
    return {
        "id": variable_obj.get("id"),
        "name": variable_obj.get("name"),
        "values": {
            value_id: {"label": value.get("label"), "rules": value.get("rules")}
            for value_id, value in values_map.items()
        },
    }


def load_categories(client, game_id: str) -> list[dict]:
    """
    Fetch a game's categories together with their ordered variables.

    Returns:
        List of category dicts: {id, name, rules, variables}
    """
    categories = []
    for category_obj in client.fetch_object(f"games/{game_id}/categories"):
        variables = [
            parse_variable(variable_obj)
            for variable_obj in client.fetch_object(f"categories/{category_obj['id']}/variables")
        ]
        categories.append({
            "id": category_obj["id"],
            "name": category_obj.get("name"),
            "rules": category_obj.get("rules"),
            "variables": variables,
        })
        logger.debug(f"Category {category_obj.get('name')!r}: {len(variables)} variables")

    logger.info(f"Loaded {len(categories)} categories for game {game_id}")
    return categories


def load_category_runs(client, category_id: str, include_unverified_runs: bool = False) -> list[dict]:
    """
    Fetch and normalize every run of a category, oldest submission first.

    Runs rejected by the normalizer are skipped.
    """
    query = {"category": category_id, **RUNS_QUERY}
    runs = []
    skipped = 0
    for raw_run in client.paginate("runs", query):
        run = normalize_run(raw_run, client, include_unverified_runs=include_unverified_runs)
        if run is None:
            skipped += 1
            continue
        runs.append(run)

    logger.info(f"Category {category_id}: kept {len(runs)} runs, skipped {skipped}")
    return runs
