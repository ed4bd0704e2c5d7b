"""
Shared utilities for the speedrun.com leaderboard exporter.

This module provides common functions used across multiple modules
to avoid code duplication.
"""

import json
import logging
import re
import shutil
import tempfile
from pathlib import Path

from srcexport.config import ALLOWED_OUTPUT_FORMATS, JSON_INDENT

# Runs of whitespace, slashes, underscores and hyphens collapse to one underscore
FILENAME_SEPARATOR_RE = re.compile(r"[\s/_-]+")

PACKAGE_LOGGER = "srcexport"


# --- Logging Setup ---
def setup_logging(name: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger with consistent formatting.

    Args:
        name: Logger name (usually __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


def set_log_level(level: int) -> None:
    """Apply a level to every logger already created under the package."""
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (
            name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + ".")
        ):
            logger.setLevel(level)


# --- File Operations ---
def _atomic_write(path: Path, suffix: str, write) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with tempfile.NamedTemporaryFile(
            mode='w',
            delete=False,
            suffix=suffix,
            dir=path.parent,  # Same filesystem for atomic move
            encoding='utf-8',
            newline='',
        ) as tmp:
            tmp_path = Path(tmp.name)
            write(tmp)

        shutil.move(str(tmp_path), str(path))

    except Exception:
        if 'tmp_path' in locals() and tmp_path.exists():
            tmp_path.unlink()
        raise


def atomic_write_csv(df, path: Path, **kwargs) -> None:
    """
    Write a DataFrame to CSV atomically using a temporary file.

    This prevents a half-written leaderboard if the write is interrupted.

    Args:
        df: pandas DataFrame to write
        path: Destination path for the CSV file
        **kwargs: Additional arguments to pass to df.to_csv()
    """
    logger = setup_logging(__name__)
    _atomic_write(path, '.csv', lambda fh: df.to_csv(fh, **kwargs))
    logger.debug(f"Atomically wrote {len(df)} rows to {path}")


def atomic_write_json(payload, path: Path, indent: int = JSON_INDENT) -> None:
    """
    Write a JSON document atomically, pretty-printed with a trailing newline.

    Args:
        payload: JSON-serializable object
        path: Destination path for the JSON file
        indent: Indentation width
    """
    logger = setup_logging(__name__)

    def write(fh):
        json.dump(payload, fh, indent=indent, ensure_ascii=False)
        fh.write('\n')

    _atomic_write(path, '.json', write)
    logger.debug(f"Atomically wrote JSON document to {path}")


def leaderboard_filename(game_abbrev: str, leaderboard_name: str, extension: str = "csv") -> str:
    """
    Build the output file name for one leaderboard.

    >>> leaderboard_filename("SMS", "Any% - Glitchless / No-Sprinkles")
    'sms_any%_glitchless_no_sprinkles.csv'
    """
    slug = FILENAME_SEPARATOR_RE.sub("_", leaderboard_name.lower())
    return f"{game_abbrev.lower()}_{slug}.{extension}"


# --- Validation ---
def validate_output_format(output_format: str) -> None:
    """
    Validate that an output format is supported.

    Raises:
        ValueError: If the format is not in ALLOWED_OUTPUT_FORMATS
    """
    if output_format not in ALLOWED_OUTPUT_FORMATS:
        raise ValueError(
            f"Invalid output format: '{output_format}'. "
            f"Allowed values: {', '.join(sorted(ALLOWED_OUTPUT_FORMATS))}"
        )


def validate_game(game: str | None) -> None:
    """
    Validate that a game abbreviation was supplied.

    Raises:
        ValueError: If the abbreviation is missing or blank
    """
    if not game or not game.strip():
        raise ValueError("A game abbreviation is required (e.g. 'sms')")


__all__ = [
    # Logging
    'setup_logging',
    'set_log_level',
    # File operations
    'atomic_write_csv',
    'atomic_write_json',
    'leaderboard_filename',
    # Validation
    'validate_output_format',
    'validate_game',
]
