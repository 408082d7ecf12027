"""
Capabilities Route

What this deployment can run: the registered implementation of every
agent, whether configuration enables it, which agent it can trigger, and
which oracle providers have credentials.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from agents.escalation import TRIGGER_TARGETS
from api.deps import get_service
from core.llm.providers import get_configured_providers
from core.schemas import AgentType
from orchestrator import AgentService


router = APIRouter(tags=["capabilities"])


class ProviderInfo(BaseModel):
    provider: str
    default_model: str


class AgentInfo(BaseModel):
    name: str
    version: str
    capabilities: list[str] = Field(default_factory=list)
    priority: int = 0


class AgentTypeInfo(BaseModel):
    agent_type: str
    enabled: bool = True
    triggers: Optional[str] = Field(default=None, description="Agent started on escalation")
    agents: list[AgentInfo] = Field(default_factory=list)


class CapabilitiesResponse(BaseModel):
    ok: bool = True
    oracle: Optional[str] = Field(default=None, description="provider/model in use, if any")
    providers: list[ProviderInfo] = Field(
        default_factory=list,
        description="Providers with API keys in the server environment",
    )
    agent_types: list[AgentTypeInfo] = Field(default_factory=list)


def _agent_type_info(service: AgentService, agent_type: AgentType) -> AgentTypeInfo:
    agent_cfg = service.agent_config(agent_type)
    target = TRIGGER_TARGETS.get(agent_type)
    return AgentTypeInfo(
        agent_type=agent_type.value,
        enabled=agent_cfg is None or agent_cfg.enabled,
        triggers=target.value if target else None,
        agents=[AgentInfo(**e.describe()) for e in service.registry.list_agents(agent_type)],
    )


@router.get("/capabilities", response_model=CapabilitiesResponse)
def get_capabilities(service: AgentService = Depends(get_service)) -> CapabilitiesResponse:
    llm = service.context.llm
    return CapabilitiesResponse(
        oracle=llm.label if llm is not None else None,
        providers=[ProviderInfo(**p) for p in get_configured_providers()],
        agent_types=[_agent_type_info(service, t) for t in AgentType],
    )
