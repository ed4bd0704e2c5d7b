"""
Leaderboards

Modules:
- builder: Group runs into (optionally broken-out) leaderboards
- ranker: Best run per player, competition ranks, obsolete-run history
"""


def __getattr__(name):
    """Lazy imports to avoid RuntimeWarning when running modules directly."""
    if name == "build_leaderboards":
        from srcexport.leaderboards.builder import build_leaderboards
        return build_leaderboards
    if name == "rank_leaderboard":
        from srcexport.leaderboards.ranker import rank_leaderboard
        return rank_leaderboard
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
