"""
SafeZone tourist safety scoring service.

Classifies coordinates into safety zones and maintains periodically
recomputed risk scores per zone from incident, news, responder and
density signals.
"""

__version__ = "0.2.0"
