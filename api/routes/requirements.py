"""
Requirements Routes
Endpoints for extracting requirements from Confluence and analyzing them with an LLM
"""
from fastapi import APIRouter, Depends
import logging

from req_analyzer import pipeline as pipeline_actions
from req_analyzer.pipeline import RequirementsPipeline
from req_analyzer.session_store import BoundedValueStore

from ..models.requirements import (
    ProcessRequirementsRequest,
    ActionResponse,
    StoredValueResponse,
    ModulesResponse
)
from ..dependencies import get_pipeline, get_session_store

router = APIRouter(prefix="/requirements")
logger = logging.getLogger(__name__)


@router.post("/process",
          tags=["Requirements"],
          summary="Extract requirements from a Confluence page",
          description="Fetch a Confluence page, keep the requirement-like lines and store them in the session for analysis.",
          response_model=ActionResponse)
def process_requirements(
    request: ProcessRequirementsRequest,
    pipeline: RequirementsPipeline = Depends(get_pipeline),
    store: BoundedValueStore = Depends(get_session_store)
) -> ActionResponse:
    """Extract requirements from a Confluence page URL"""
    result = pipeline.process_requirements(request.url, store)
    return ActionResponse(**result.model_dump())


@router.post("/analyze",
          tags=["Requirements"],
          summary="Analyze stored requirements with the LLM",
          description="Send the stored requirement text to the configured LLM and store the requirements, test cases and summary sections.",
          response_model=ActionResponse)
def process_with_ai(
    pipeline: RequirementsPipeline = Depends(get_pipeline),
    store: BoundedValueStore = Depends(get_session_store)
) -> ActionResponse:
    """Analyze the requirements stored by /requirements/process"""
    result = pipeline.process_with_ai(store)
    return ActionResponse(**result.model_dump())


@router.get("/original", tags=["Requirements"], response_model=StoredValueResponse)
def get_original_content(store: BoundedValueStore = Depends(get_session_store)):
    """Filtered requirement text extracted from the page"""
    return StoredValueResponse(value=pipeline_actions.get_original_content(store))


@router.get("/modules", tags=["Requirements"], response_model=ModulesResponse)
def get_identified_modules(store: BoundedValueStore = Depends(get_session_store)):
    """Module headers found in the extracted requirements"""
    return ModulesResponse(modules=pipeline_actions.get_identified_modules(store))


@router.get("/processed", tags=["Requirements"], response_model=StoredValueResponse)
def get_processed_requirements(store: BoundedValueStore = Depends(get_session_store)):
    """Requirements section of the last analysis"""
    return StoredValueResponse(value=pipeline_actions.get_processed_requirements(store))


@router.get("/test-cases", tags=["Requirements"], response_model=StoredValueResponse)
def get_generated_test_cases(store: BoundedValueStore = Depends(get_session_store)):
    """Test cases section of the last analysis"""
    return StoredValueResponse(value=pipeline_actions.get_generated_test_cases(store))


@router.get("/summary", tags=["Requirements"], response_model=StoredValueResponse)
def get_generated_summaries(store: BoundedValueStore = Depends(get_session_store)):
    """Backend and frontend summary section of the last analysis"""
    return StoredValueResponse(value=pipeline_actions.get_generated_summaries(store))
