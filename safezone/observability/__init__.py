"""
Observability components for SafeZone.

This module contains logging setup, Prometheus metrics and the
FastAPI health/query endpoints.
"""

from .logging_setup import setup_logger, get_logger, with_context

__all__ = ["setup_logger", "get_logger", "with_context"]
