"""
Common utilities for SafeZone.

This module contains geographic helpers and retry utilities
shared across layers.
"""

from .geo import haversine_distance, validate_coordinates, within_bounds, polygon_centroid
from .retry import retry_with_backoff, backoff_delay

__all__ = [
    "haversine_distance", "validate_coordinates", "within_bounds", "polygon_centroid",
    "retry_with_backoff", "backoff_delay",
]
