"""
Routes Package
Aggregate all route routers
"""
from fastapi import APIRouter

# Import all routers
from .health import router as health_router
from .requirements import router as requirements_router
from .ai_config import router as ai_config_router

# Create main router
api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(requirements_router)
api_router.include_router(ai_config_router)
