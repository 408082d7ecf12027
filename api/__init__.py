"""
Shamba Agents API (FastAPI)

HTTP API for the agent network:
- POST /agents/{agent_type} - Run one agent
- POST /climate-agent, /crop-health-agent, ... - Function-name aliases
- GET /dashboard - Aggregation View
- GET /capabilities - Registered agents and providers
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
