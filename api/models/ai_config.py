"""
AI Configuration Models
Models for inspecting the configured LLM providers
"""
from pydantic import BaseModel, Field, field_validator
from typing import Dict

from req_analyzer.llm_client import PROVIDERS


class AIConfigResponse(BaseModel):
    """Active provider and per-provider defaults"""
    provider: str = Field(..., description="Provider used for analysis")
    models: Dict[str, str] = Field(..., description="Configured model per provider")
    hasApiKeys: Dict[str, bool] = Field(..., description="Whether each provider has credentials configured")


class AIConfigUpdateRequest(BaseModel):
    """Request to select a provider"""
    provider: str = Field(..., description="Provider name", examples=["openai"])

    @field_validator('provider')
    @classmethod
    def validate_provider(cls, v):
        if v.lower() not in PROVIDERS:
            raise ValueError(f"Unsupported LLM provider: {v}. Supported: {sorted(PROVIDERS)}")
        return v.lower()


class AIConfigUpdateResponse(BaseModel):
    success: bool
    message: str
