"""
Post-Harvest Agent

Spoilage risk for stored produce; the downstream target of climate
escalation.
"""

from .agent import PostHarvestAgent

__all__ = [
    "PostHarvestAgent",
]
