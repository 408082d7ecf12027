"""
Crop Health Agent

Assesses the health of a crop at a location and raises pest alerts for
serious findings.
"""

from .agent import CropHealthAgent

__all__ = [
    "CropHealthAgent",
]
