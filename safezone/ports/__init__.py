"""
Port interfaces for SafeZone hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the core domain and external adapters.
"""

from .records import SafetyRecordsPort

__all__ = ["SafetyRecordsPort"]
