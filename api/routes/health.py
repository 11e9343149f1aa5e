"""
Health Routes
Liveness and readiness of the Confluence and LLM integrations
"""
from fastapi import APIRouter
from datetime import datetime
from typing import Dict

from .. import dependencies

router = APIRouter()


def _service_statuses() -> Dict[str, str]:
    services = {}

    if dependencies.config is None:
        services["config"] = "not loaded"
    else:
        errors = dependencies.config.get_errors()
        services["config"] = "complete" if not errors else f"incomplete: {'; '.join(errors)}"

    services["confluence"] = "configured" if dependencies.confluence_client else "not configured"

    analyzer = dependencies.analyzer
    services["llm"] = f"configured ({analyzer.provider.display_name})" if analyzer else "not configured"

    return services


@router.get("/", tags=["Health"])
async def root():
    """Service banner"""
    return {
        "message": "Requirements Analyzer API",
        "status": "healthy",
        "version": "1.0.0",
        "docs_url": "/docs",
    }


@router.get("/health", tags=["Health"])
async def health_check():
    """Degraded while configuration is incomplete or no LLM provider could be built"""
    services = _service_statuses()
    ready = services["config"] == "complete" and services["llm"] != "not configured"
    return {
        "status": "healthy" if ready else "degraded",
        "timestamp": datetime.now().isoformat(),
        "services": services,
    }
