"""
Orchestrators for SafeZone.

This module contains the services that coordinate the flow
between ports, the pure scoring core and the score cache.
"""
from .scoring_service import SafetyScoringService
from .score_cache import ZoneScoreCache, ScoreSnapshot
from .scheduler import PeriodicTask

__all__ = ["SafetyScoringService", "ZoneScoreCache", "ScoreSnapshot", "PeriodicTask"]
