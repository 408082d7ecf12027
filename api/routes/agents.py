"""
Agent Routes

One RPC-style JSON endpoint per agent:

- POST /agents/{agent_type}
- POST /climate-agent, /crop-health-agent, /market-intelligence-agent,
  /post-harvest-agent, /government-reporting-agent (function-name aliases)

The body is the agent's context input. A successful run returns the
record under ``prediction``, ``analysis`` or ``report`` depending on the
agent; a failed run returns the error envelope.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from agents.base import AgentResult
from api.deps import get_service
from api.errors import AgentRunFailed
from api.models.requests import AgentRunRequest
from api.models.responses import RESULT_KEYS, SUCCESS_MESSAGES, AgentRunResponse
from core.schemas import AgentType, UnknownAgentException, parse_agent_type
from orchestrator import AgentService

router = APIRouter(tags=["agents"])


# Per-function endpoint names existing clients call
FUNCTION_ROUTES: dict[str, AgentType] = {
    "/climate-agent": AgentType.CLIMATE,
    "/crop-health-agent": AgentType.CROP_HEALTH,
    "/market-intelligence-agent": AgentType.MARKET,
    "/post-harvest-agent": AgentType.POST_HARVEST,
    "/government-reporting-agent": AgentType.GOVERNMENT_REPORTING,
}


def build_run_response(agent_type: AgentType, result: AgentResult) -> dict[str, Any]:
    """Serialize a successful AgentResult for the wire."""
    record = result.output
    record_json = None
    if record is not None:
        record_json = record.model_dump(mode="json")
        record_json["persisted"] = record.persisted

    response = AgentRunResponse(
        message=SUCCESS_MESSAGES[agent_type],
        alerts=[a.model_dump(mode="json") for a in result.alerts],
        metadata=dict(result.metadata),
        **{RESULT_KEYS[agent_type]: record_json},
    )
    return response.to_content(agent_type)


def run_agent(
    agent_type: AgentType,
    request: AgentRunRequest | None,
    service: AgentService,
) -> JSONResponse:
    context_input = request.context_input() if request is not None else {}
    result = service.run(agent_type, context_input)
    if not result.success:
        raise AgentRunFailed(agent_type, result)
    return JSONResponse(content=build_run_response(agent_type, result))


@router.post("/agents/{agent_type}")
def run_agent_by_type(
    agent_type: str,
    request: AgentRunRequest | None = Body(default=None),
    service: AgentService = Depends(get_service),
) -> JSONResponse:
    """
    Run an agent by type.

    Accepts "climate", "crop-health", "market", "post-harvest",
    "government-reporting" (and "government" / underscore spellings).
    """
    try:
        key = parse_agent_type(agent_type)
    except ValueError:
        raise UnknownAgentException(agent_type) from None
    return run_agent(key, request, service)


def _function_endpoint(agent_type: AgentType):
    def endpoint(
        request: AgentRunRequest | None = Body(default=None),
        service: AgentService = Depends(get_service),
    ) -> JSONResponse:
        return run_agent(agent_type, request, service)

    endpoint.__name__ = f"run_{agent_type.value.replace('-', '_')}_agent"
    endpoint.__doc__ = f"Run the {agent_type.value} agent."
    return endpoint


for _path, _agent_type in FUNCTION_ROUTES.items():
    router.add_api_route(_path, _function_endpoint(_agent_type), methods=["POST"])
