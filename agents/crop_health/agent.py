"""
Crop Health Agent

Assesses crop health for a crop at a location, optionally from a field
photo. Disease and pest findings raise pest alerts; nothing is triggered
downstream.
"""

from __future__ import annotations

from typing import Any

from agents.base import AgentCapability
from agents.registry import register_agent
from agents.runner import PredictionAgent
from core.schemas import AgentType, CropHealthInput, CropHealthPayload, RiskLevel

from .prompts import (
    IMAGE_MESSAGE_TEMPLATE,
    IMAGE_PROVIDED,
    NO_IMAGE,
    SYSTEM_PROMPT,
    USER_PROMPT_TEMPLATE,
)


class CropHealthAgent(PredictionAgent):
    """Crop health assessor."""

    _name = "CropHealthAgent"
    _capabilities = {AgentCapability.LLM, AgentCapability.VISION}

    agent_type = AgentType.CROP_HEALTH
    input_model = CropHealthInput
    system_prompt = SYSTEM_PROMPT
    temperature = 0.5

    def build_prompt(self, inp: CropHealthInput, context: dict[str, Any]) -> str:
        return USER_PROMPT_TEMPLATE.format(
            location=inp.location,
            crop_type=inp.crop_type,
            image_note=IMAGE_PROVIDED if inp.image_url else NO_IMAGE,
        )

    def build_messages(self, inp: CropHealthInput, context: dict[str, Any]) -> list[dict[str, Any]]:
        messages = super().build_messages(inp, context)
        if inp.image_url:
            messages.append({
                "role": "user",
                "content": IMAGE_MESSAGE_TEMPLATE.format(image_url=inp.image_url),
            })
        return messages

    def enrich(
        self,
        payload: CropHealthPayload,
        inp: CropHealthInput,
        context: dict[str, Any],
    ) -> CropHealthPayload:
        return payload.model_copy(update={"crop_type": inp.crop_type, "location": inp.location})

    def derive_risk(self, payload: CropHealthPayload) -> RiskLevel:
        if payload.health_status == "critical":
            return RiskLevel.CRITICAL
        return RiskLevel(payload.severity)

    def region_of(self, inp: CropHealthInput) -> str:
        return inp.location


def _register_agents() -> None:
    """Register the crop health agent."""
    register_agent(
        agent_type=AgentType.CROP_HEALTH,
        name="CropHealthAgent",
        factory=lambda ctx: CropHealthAgent(),
        capabilities={AgentCapability.LLM, AgentCapability.VISION},
        priority=100,
    )


# Auto-register on import
_register_agents()
