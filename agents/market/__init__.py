"""
Market Agent

Commodity price trend analysis with selling-opportunity alerts.
"""

from .agent import MarketAgent

__all__ = [
    "MarketAgent",
]
