"""
Database module for TechScore.

Provides SQLite database connection and models.
"""

from techscore.db.database import get_db, get_db_context, init_db, AsyncSessionLocal
from techscore.db.models import Base, HistoricalBar, Tick, TechnicalAnalysisRecord

__all__ = [
    "get_db",
    "get_db_context",
    "init_db",
    "AsyncSessionLocal",
    "Base",
    "HistoricalBar",
    "Tick",
    "TechnicalAnalysisRecord",
]
