"""
Government Reporting Agent

National food security policy brief.
"""

from .agent import HIGH_RISK_ALERT_COUNT, GovernmentReportAgent

__all__ = [
    "GovernmentReportAgent",
    "HIGH_RISK_ALERT_COUNT",
]
