"""
Climate Agent

Forecasts climate risk for a region and escalates high-risk forecasts to
the post-harvest agent.

Usage:
    from agents.climate import ClimateAgent

    result = ClimateAgent().run(ctx, {"region": "Kiambu"})
"""

from .agent import COLLABORATION_NOTIFIED, ClimateAgent

__all__ = [
    "ClimateAgent",
    "COLLABORATION_NOTIFIED",
]
