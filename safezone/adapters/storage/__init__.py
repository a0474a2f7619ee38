"""
Storage adapters for SafeZone hexagonal architecture.

This module contains the SQLite-backed records store that
implements the safety records port.
"""

from .sqlite_records import SQLiteRecordsStore

__all__ = ["SQLiteRecordsStore"]
