from typing import Dict, Any, Optional, List
from pydantic import BaseModel, Field


class PageReference(BaseModel):
    """Confluence page coordinates parsed from a page URL"""
    space_key: str
    page_id: str

    model_config = {"frozen": True}


class RequirementSet(BaseModel):
    """Requirement lines retained from a page and the module headers among them"""
    text: str = ""
    modules: List[str] = []


class AnalysisSections(BaseModel):
    """The three blocks split out of an LLM analysis reply"""
    requirements: str = ""
    test_cases: str = Field("", alias="testCases")
    summary: str = ""

    model_config = {"populate_by_name": True}

    def to_dict(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


class AnalysisResult(BaseModel):
    """Outcome of a single completion request"""
    success: bool
    text: str = ""
    sections: AnalysisSections = Field(default_factory=AnalysisSections)
    error: Optional[str] = None


class ActionResult(BaseModel):
    """Result handed back to the API layer; failures never raise"""
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
