"""
AI Configuration Routes
Expose which LLM provider and models are configured
"""
from fastapi import APIRouter, Depends
import logging

from req_analyzer.config import Config

from ..models.ai_config import AIConfigResponse, AIConfigUpdateRequest, AIConfigUpdateResponse
from ..dependencies import get_config

router = APIRouter(prefix="/api/ai-config")
logger = logging.getLogger(__name__)


@router.get("",
         tags=["Configuration"],
         summary="Get AI provider configuration",
         response_model=AIConfigResponse)
async def get_ai_config(config: Config = Depends(get_config)) -> AIConfigResponse:
    """Current provider, model per provider and which providers have API keys"""
    providers = config.get_supported_providers()
    return AIConfigResponse(
        provider=config.get_default_provider(),
        models={provider: config.get_provider_model(provider) for provider in providers},
        hasApiKeys={provider: config.has_api_key(provider) for provider in providers}
    )


@router.post("",
          tags=["Configuration"],
          summary="Select AI provider",
          description="Validates the provider name and acknowledges it. Configuration is read-only at runtime; change AI_PROVIDER to switch providers.",
          response_model=AIConfigUpdateResponse)
async def update_ai_config(request: AIConfigUpdateRequest) -> AIConfigUpdateResponse:
    logger.info(f"AI provider change requested: {request.provider}")
    return AIConfigUpdateResponse(success=True, message=f"AI provider changed to {request.provider}")
