"""
Optional features for SafeZone.

This module contains curated anchor dataset loading.
"""

from .anchor_datasets import build_classifier, load_anchor_rows

__all__ = ["build_classifier", "load_anchor_rows"]
