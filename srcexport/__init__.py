"""
speedrun.com Leaderboard Exporter - Core Package

This package contains the core modules for:
- API access and run normalization (srcexport.ingestion)
- Leaderboard building and ranking (srcexport.leaderboards)
- CSV/JSON export, the export pipeline and the command line
- Shared configuration and utilities
"""

__version__ = "1.0.0"
