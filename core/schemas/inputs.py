"""
Schemas
File: inputs.py

Purpose: Context input accepted by each agent runner.

Field names are snake_case; the camelCase spellings used by existing
callers (``cropType``, ``storageType``, ``triggerReason``...) are accepted
as aliases.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import AgentType, NATIONAL_REGION


class AgentInput(BaseModel):
    """Base class for agent context input."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)


class ClimateInput(AgentInput):
    region: str = Field(..., min_length=1, description="Region to forecast")
    request_type: str = Field(default="forecast", alias="requestType")


class CropHealthInput(AgentInput):
    location: str = Field(..., min_length=1)
    crop_type: str = Field(..., min_length=1, alias="cropType")
    image_url: Optional[str] = Field(
        default=None,
        alias="imageUrl",
        description="Optional field photo passed to the oracle",
    )


class MarketInput(AgentInput):
    commodity: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)


class PostHarvestInput(AgentInput):
    region: str = Field(..., min_length=1)
    crop_type: str = Field(..., min_length=1, alias="cropType")
    storage_type: str = Field(..., min_length=1, alias="storageType")
    trigger_reason: Optional[str] = Field(
        default=None,
        alias="triggerReason",
        description="Set when another agent started this run",
    )

    @field_validator("trigger_reason")
    @classmethod
    def blank_reason(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class GovernmentReportInput(AgentInput):
    region: str = Field(default=NATIONAL_REGION)


INPUT_MODELS: dict[AgentType, type[AgentInput]] = {
    AgentType.CLIMATE: ClimateInput,
    AgentType.CROP_HEALTH: CropHealthInput,
    AgentType.MARKET: MarketInput,
    AgentType.POST_HARVEST: PostHarvestInput,
    AgentType.GOVERNMENT_REPORTING: GovernmentReportInput,
}
