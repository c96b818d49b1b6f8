"""
Database module for Clon.

Provides SQLite database connection, models and signal persistence.
"""

from clon.db.database import get_db, get_db_context, init_db, close_db, AsyncSessionLocal
from clon.db.models import Base, SignalRecord
from clon.db.signals import (
    DatabaseSignalStore,
    compute_performance,
    get_active_signals,
    get_closed_signals,
    get_signal,
    get_todays_signals,
    save_signal,
    update_signal_status,
)

__all__ = [
    "get_db",
    "get_db_context",
    "init_db",
    "close_db",
    "AsyncSessionLocal",
    "Base",
    "SignalRecord",
    "DatabaseSignalStore",
    "compute_performance",
    "get_active_signals",
    "get_closed_signals",
    "get_signal",
    "get_todays_signals",
    "save_signal",
    "update_signal_status",
]
