"""
Core domain models and pure functions for SafeZone.

This module contains the domain models and pure business logic
(zone classification, decay math, signal scoring) that are
independent of external I/O and infrastructure concerns.
"""

from .models import (
    GeoPoint, NamedArea, CityAnchor, RegionBounds, ZoneClassification, ZoneType,
    LocationSafety, SafetyZone, ComputedSafetyScore, ScoreFactors, SafetyCategory
)
from .classifier import ZoneClassifier, adjust_for_time, adjust_for_weather
from .scoring import SafetyScorer, SignalSnapshot, categorize
from .decay import temporal_decay, spatial_decay

__all__ = [
    "GeoPoint", "NamedArea", "CityAnchor", "RegionBounds", "ZoneClassification", "ZoneType",
    "LocationSafety", "SafetyZone", "ComputedSafetyScore", "ScoreFactors", "SafetyCategory",
    "ZoneClassifier", "adjust_for_time", "adjust_for_weather",
    "SafetyScorer", "SignalSnapshot", "categorize",
    "temporal_decay", "spatial_decay",
]
