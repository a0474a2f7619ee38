"""
Adapters for SafeZone hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .storage import SQLiteRecordsStore

__all__ = ["SQLiteRecordsStore"]
