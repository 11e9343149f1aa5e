"""
Models Package
Export all API models for easy imports
"""
# Requirements models
from .requirements import (
    ProcessRequirementsRequest,
    ActionResponse,
    StoredValueResponse,
    ModulesResponse
)

# AI configuration models
from .ai_config import (
    AIConfigResponse,
    AIConfigUpdateRequest,
    AIConfigUpdateResponse
)

__all__ = [
    "ProcessRequirementsRequest",
    "ActionResponse",
    "StoredValueResponse",
    "ModulesResponse",
    "AIConfigResponse",
    "AIConfigUpdateRequest",
    "AIConfigUpdateResponse",
]
