"""
Data Ingestion

Modules:
- client: Rate-limited speedrun.com API client and export errors
- normalizer: Raw run -> run record conversion
- game_loader: Game, category, variable and run fetching
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "SpeedrunClient":
        from srcexport.ingestion.client import SpeedrunClient
        return SpeedrunClient
    if name == "normalize_run":
        from srcexport.ingestion.normalizer import normalize_run
        return normalize_run
    if name == "format_run_time":
        from srcexport.ingestion.normalizer import format_run_time
        return format_run_time
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
