"""API route handlers."""

from api.routes import agents, capabilities, dashboard, health

__all__ = ["agents", "capabilities", "dashboard", "health"]
