"""
Requirements Models
Request and response models for requirement extraction and analysis endpoints
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class ProcessRequirementsRequest(BaseModel):
    """Request model for extracting requirements from a Confluence page"""
    url: Optional[str] = Field(
        None,
        description="Confluence page URL (a leading @ is accepted)",
        examples=["@acme.atlassian.net/wiki/spaces/PROJ/pages/123456/My+Page"]
    )


class ActionResponse(BaseModel):
    """Result of a pipeline action; failures are reported in the body, not as HTTP errors"""
    success: bool = Field(..., description="Whether the action succeeded")
    data: Optional[Dict[str, Any]] = Field(None, description="Action payload on success")
    error: Optional[str] = Field(None, description="Human-readable error message on failure")


class StoredValueResponse(BaseModel):
    """A single value read back from the session"""
    value: Optional[str] = Field(None, description="Stored value, or null when nothing is stored")


class ModulesResponse(BaseModel):
    """Module headers identified in the stored requirements"""
    modules: Optional[List[str]] = Field(None, description="Heading captions in order of appearance")
