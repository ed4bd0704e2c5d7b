"""
Leaderboard Builder

Groups a category's normalized runs into leaderboards. Without breakout every
category gets exactly one leaderboard. With breakout each combination of
category variable values gets its own leaderboard, keyed in the category's
variable order; runs missing a value (or carrying an unknown one) land on the
category's "Uncategorized" leaderboard.

The category dict and run list passed in are never modified.
"""

from srcexport.config import UNCATEGORIZED_LABEL, UNCATEGORIZED_SUFFIX
from srcexport.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


def breakout_key(category: dict, run: dict) -> list[tuple[str, str]] | None:
    """
    Return the ordered (variable_id, value_id) pairs a run belongs to.

    Returns None as soon as one variable has no recognized value.
    """
    run_variables = run.get("variables") or {}
    pairs = []
    for variable in category["variables"]:
        value_id = run_variables.get(variable["id"])
        if not value_id or value_id not in variable["values"]:
            return None
        pairs.append((variable["id"], value_id))
    return pairs


def leaderboard_identity(category: dict, pairs: list[tuple[str, str]] | None) -> tuple[str, str]:
    """Return (id, name) for a category breakout, or its uncategorized board."""
    if pairs is None:
        return (
            f"{category['id']}${UNCATEGORIZED_SUFFIX}",
            f"{category['name']} - {UNCATEGORIZED_LABEL}",
        )

    lb_id = category["id"] + "".join(f"${var_id}^{value_id}" for var_id, value_id in pairs)
    labels = [
        variable["values"][value_id]["label"]
        for variable, (_, value_id) in zip(category["variables"], pairs)
    ]
    lb_name = category["name"]
    if labels:
        lb_name += " - " + ", ".join(str(label) for label in labels)
    return lb_id, lb_name


def build_leaderboards(category: dict, runs: list[dict], breakout_variables: bool = False) -> dict[str, dict]:
    """
    Build the leaderboards of one category.

    Args:
        category: Category dict with ordered variables
        runs: Normalized runs of this category
        breakout_variables: Split by variable value combination

    Returns:
        Mapping of leaderboard id to leaderboard dict
        {id, category_id, variables, name, runs}, in first-use order
    """
    if not breakout_variables:
        return {
            category["id"]: {
                "id": category["id"],
                "category_id": category["id"],
                "variables": {},
                "name": category["name"],
                "runs": list(runs),
            }
        }

    leaderboards = {}
    for run in runs:
        pairs = breakout_key(category, run)
        lb_id, lb_name = leaderboard_identity(category, pairs)
        if lb_id not in leaderboards:
            leaderboards[lb_id] = {
                "id": lb_id,
                "category_id": category["id"],
                "variables": dict(pairs or []),
                "name": lb_name,
                "runs": [],
            }
        leaderboards[lb_id]["runs"].append(run)

    logger.debug(f"Category {category['name']!r}: {len(runs)} runs over {len(leaderboards)} leaderboards")
    return leaderboards


def build_all_leaderboards(
    categories: list[dict],
    runs_by_category: dict[str, list[dict]],
    breakout_variables: bool = False,
) -> dict[str, dict]:
    """Build and merge the leaderboards of every category, in category order."""
    leaderboards = {}
    for category in categories:
        leaderboards.update(
            build_leaderboards(category, runs_by_category.get(category["id"], []), breakout_variables)
        )
    logger.info(f"Built {len(leaderboards)} leaderboards from {len(categories)} categories")
    return leaderboards
