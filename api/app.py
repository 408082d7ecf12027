"""
FastAPI application for the agent network.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import json
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import config_search_paths, set_service
from api.errors import install_error_handlers
from api.routes import agents, capabilities, dashboard, health

DESCRIPTION = """
HTTP API for the agricultural prediction agent network.

- **POST /agents/{agent_type}** runs one agent (climate, crop-health, market,
  post-harvest, government-reporting); **POST /climate-agent** and the other
  function names do the same
- **GET /dashboard** aggregates the latest predictions of every agent
- **GET /capabilities** lists registered agents and oracle providers
- **GET /health** is the liveness check

Failures return `{"success": false, "error": ..., "code": ...}`: 502 when
the AI oracle is unavailable, 400 for bad input or an unknown agent, 500
otherwise.
"""


def resolve_log_level() -> int:
    """SHAMBA_LOG_LEVEL, else ``log_level`` from the first config file found, else INFO."""
    raw = os.getenv("SHAMBA_LOG_LEVEL")
    if raw is None:
        for path in config_search_paths():
            if not path.exists():
                continue
            try:
                raw = json.loads(path.read_text()).get("log_level")
            except (OSError, ValueError, AttributeError):
                raw = None
            break
    return getattr(logging, str(raw or "INFO").upper(), logging.INFO)


logging.basicConfig(
    level=resolve_log_level(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Let in-flight post-harvest runs finish before the process exits
    set_service(None)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shamba Agents API",
        description=DESCRIPTION,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    for module in (health, agents, dashboard, capabilities):
        app.include_router(module.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=os.getenv("SHAMBA_HOST", "0.0.0.0"), port=int(os.getenv("SHAMBA_PORT", "8000")))
