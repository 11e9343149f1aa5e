"""
Requirements Pipeline
Actions behind the API and CLI: extract requirements from a Confluence page,
run them through the analyzer, and read stored results back.

Actions never raise; every failure comes back as
``ActionResult(success=False, error=...)``.
"""
from typing import List, Optional
import logging

from .confluence_client import (
    CONFLUENCE_URL_MARKER,
    ConfluenceClient,
    convert_storage_to_text,
    resolve_page_reference,
)
from .exceptions import EmptyResultError, FormatError, RequirementsAnalyzerError
from .llm_client import RequirementsAnalyzer
from .models import ActionResult, RequirementSet
from .requirement_filter import filter_requirements
from .session_store import (
    BoundedValueStore,
    GENERATED_SUMMARIES_KEY,
    GENERATED_TEST_CASES_KEY,
    IDENTIFIED_MODULES_KEY,
    ORIGINAL_CONTENT_KEY,
    PROCESSED_REQUIREMENTS_KEY,
)

logger = logging.getLogger(__name__)

UNSUPPORTED_URL_MESSAGE = (
    "Only Atlassian Confluence URLs are supported "
    "(e.g., https://company.atlassian.net/wiki/spaces/...)"
)
INVALID_URL_MESSAGE = (
    "Invalid Confluence URL format. Please use format: "
    "@company.atlassian.net/wiki/spaces/PROJECT/pages/123456/Page+Name"
)


class RequirementsPipeline:
    """Confluence page -> requirement text -> three-part analysis"""

    def __init__(self, confluence_client: ConfluenceClient, analyzer: Optional[RequirementsAnalyzer] = None):
        self.confluence_client = confluence_client
        self.analyzer = analyzer

    def extract_requirements(self, url: str) -> RequirementSet:
        """Fetch a page and filter it down to requirement lines.

        Raises:
            FormatError: the URL is not a Confluence page URL
            ConfigError: Confluence credentials are missing
            FetchError: the page could not be fetched or has no body
            EmptyResultError: no requirement lines survived filtering
        """
        if CONFLUENCE_URL_MARKER not in url:
            raise FormatError(UNSUPPORTED_URL_MESSAGE)

        page = resolve_page_reference(url)
        if page is None:
            raise FormatError(INVALID_URL_MESSAGE)

        logger.info(f"Fetching content for page {page.page_id} in space {page.space_key}")
        raw_content = self.confluence_client.fetch_page_storage(page.page_id)
        content = convert_storage_to_text(raw_content)

        requirement_set = filter_requirements(content)
        if not requirement_set.text:
            raise EmptyResultError("No requirements found in the Confluence page")

        return requirement_set

    def process_requirements(self, url: Optional[str], store: BoundedValueStore) -> ActionResult:
        """Extract requirements from a page URL and store them for analysis"""
        if not url:
            logger.info("Missing URL")
            return ActionResult(success=False, error="Confluence URL is required")

        logger.info(f"Processing requirements from {url}")
        try:
            requirement_set = self.extract_requirements(url.strip())
        except RequirementsAnalyzerError as e:
            logger.error(f"Process requirements error: {e}")
            return ActionResult(success=False, error=f"Failed to process content: {e}")
        except Exception as e:
            logger.error(f"Unexpected error processing requirements: {e}", exc_info=True)
            return ActionResult(success=False, error=f"Failed to process content: {e}")

        logger.info(f"Raw processed content: {requirement_set.text[:500]}...")
        try:
            store.put(ORIGINAL_CONTENT_KEY, requirement_set.text)
            store.put_json(IDENTIFIED_MODULES_KEY, requirement_set.modules)
        except ValueError as e:
            logger.error(f"Failed to store requirements: {e}")
            return ActionResult(success=False, error=f"Failed to process content: {e}")

        return ActionResult(
            success=True,
            data={
                "originalContent": requirement_set.text,
                "modules": requirement_set.modules,
            }
        )

    def process_with_ai(self, store: BoundedValueStore) -> ActionResult:
        """Analyze the stored requirement text and store the three sections"""
        original_content = store.get(ORIGINAL_CONTENT_KEY)
        if not original_content:
            return ActionResult(success=False, error="No content available to process")

        if self.analyzer is None:
            return ActionResult(success=False, error="LLM provider not configured")

        logger.info("Sending to AI for analysis...")
        result = self.analyzer.analyze(original_content)

        if not result.success:
            return ActionResult(success=False, error=result.error or "Failed to analyze requirements")

        sections = result.sections
        logger.info(
            f"AI sections: requirements={len(sections.requirements)} chars, "
            f"testCases={len(sections.test_cases)} chars, summary={len(sections.summary)} chars"
        )

        try:
            store.put(PROCESSED_REQUIREMENTS_KEY, sections.requirements)
            store.put(GENERATED_TEST_CASES_KEY, sections.test_cases)
            store.put(GENERATED_SUMMARIES_KEY, sections.summary)
        except ValueError as e:
            logger.error(f"Failed to store analysis: {e}")
            return ActionResult(success=False, error=f"Failed to store analysis: {e}")

        return ActionResult(success=True, data=sections.to_dict())


def get_original_content(store: BoundedValueStore) -> Optional[str]:
    return store.get(ORIGINAL_CONTENT_KEY)


def get_identified_modules(store: BoundedValueStore) -> Optional[List[str]]:
    modules = store.get_json(IDENTIFIED_MODULES_KEY)
    if not isinstance(modules, list) or not all(isinstance(module, str) for module in modules):
        if modules is not None:
            logger.warning(f"Ignoring malformed {IDENTIFIED_MODULES_KEY} value: {modules!r}")
        return None
    return modules


def get_processed_requirements(store: BoundedValueStore) -> Optional[str]:
    return store.get(PROCESSED_REQUIREMENTS_KEY) or None


def get_generated_test_cases(store: BoundedValueStore) -> Optional[str]:
    return store.get(GENERATED_TEST_CASES_KEY) or None


def get_generated_summaries(store: BoundedValueStore) -> Optional[str]:
    return store.get(GENERATED_SUMMARIES_KEY) or None
