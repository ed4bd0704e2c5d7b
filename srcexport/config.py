"""
Central configuration for the speedrun.com leaderboard exporter.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

from dataclasses import dataclass
from pathlib import Path

# --- Project Paths ---
PROJECT_ROOT = Path(__file__).parent.parent
DEFAULT_OUTPUT_FOLDER = PROJECT_ROOT / "data" / "exports"

# --- Upstream API ---
SPEEDRUN_API_BASE = "https://www.speedrun.com/api/v1/"
USER_AGENT = "srcexport/1.0"
REQUEST_TIMEOUT_S = 30

# speedrun.com throttles each IP to 100 requests per minute
REQUEST_INTERVAL_S = 1.0
MAX_REQUEST_ATTEMPTS = 3
RETRY_BACKOFF_S = 10.0

# Runs are paged; a page shorter than this ends pagination
PAGE_SIZE = 100
RUNS_QUERY = {"orderby": "date", "direction": "asc"}

# --- Run Filtering ---
VERIFIED_STATUS = "verified"

# --- Leaderboards ---
UNCATEGORIZED_SUFFIX = "UNCATEGORIZED"
UNCATEGORIZED_LABEL = "Uncategorized"

# --- Output ---
ALLOWED_OUTPUT_FORMATS = frozenset({"csv", "json"})
DEFAULT_OUTPUT_FORMAT = "csv"
JSON_INDENT = 4

CSV_COLUMNS = [
    "rank",
    "player",
    "time",
    "platform",
    "videos",
    "submitTime",
    "status",
    "verifyTime",
    "verifier",
    "comment",
    "variables",
]


@dataclass
class ExportOptions:
    """Values that steer one export run."""

    game: str
    output_dir: Path = DEFAULT_OUTPUT_FOLDER
    breakout_variables: bool = False
    include_unverified_runs: bool = False
    include_run_history: bool = False
    output_format: str = DEFAULT_OUTPUT_FORMAT
    debug: bool = False

    def __post_init__(self):
        # utils imports config at module level
        from srcexport.utils import validate_game, validate_output_format

        validate_game(self.game)
        self.output_format = (self.output_format or DEFAULT_OUTPUT_FORMAT).lower()
        validate_output_format(self.output_format)
        self.game = self.game.strip().lower()
        self.output_dir = Path(self.output_dir).expanduser().resolve()
