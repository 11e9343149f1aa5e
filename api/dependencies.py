"""
Shared Dependencies
Global clients and configuration shared across all routes
"""
from typing import Optional
from fastapi import Request, Response
from req_analyzer.config import Config
from req_analyzer.confluence_client import ConfluenceClient
from req_analyzer.exceptions import ConfigError
from req_analyzer.llm_client import RequirementsAnalyzer
from req_analyzer.pipeline import RequirementsPipeline
from req_analyzer.session_store import BoundedValueStore, CookieBackend, DEFAULT_MAX_AGE, MAX_VALUE_SIZE
import logging

logger = logging.getLogger(__name__)

# Global variables for clients (initialized on startup)
confluence_client: Optional[ConfluenceClient] = None
analyzer: Optional[RequirementsAnalyzer] = None
pipeline: Optional[RequirementsPipeline] = None
config: Optional[Config] = None


def get_config() -> Config:
    """Get Config instance"""
    if config is None:
        raise RuntimeError("Config not initialized - ensure startup event completed")
    return config


def get_pipeline() -> RequirementsPipeline:
    """Get RequirementsPipeline instance"""
    if pipeline is None:
        raise RuntimeError("Pipeline not initialized - ensure startup event completed")
    return pipeline


def get_session_store(request: Request, response: Response) -> BoundedValueStore:
    """Cookie-backed session store scoped to the current request"""
    max_value_size = config.get_session_max_value_size() if config else MAX_VALUE_SIZE
    max_age = config.get_session_max_age() if config else DEFAULT_MAX_AGE
    return BoundedValueStore(
        CookieBackend(request.cookies, response),
        max_value_size=max_value_size,
        max_age=max_age
    )


def initialize_services(config_path: str = "config.yaml"):
    """Initialize all clients and services"""
    global confluence_client, analyzer, pipeline, config

    try:
        config = Config(config_path)

        for error in config.get_errors():
            logger.warning(f"Configuration incomplete: {error}")

        confluence_client = ConfluenceClient(
            domain=config.confluence.get('domain', ''),
            email=config.confluence.get('email', ''),
            api_token=config.confluence.get('api_token', ''),
            timeout=config.get_confluence_timeout()
        )

        # Extraction still works without an LLM; analysis reports the problem per request
        try:
            analyzer = RequirementsAnalyzer.from_config(config.get_llm_config())
        except (ConfigError, ImportError) as e:
            logger.warning(f"LLM provider not available, analysis disabled: {e}")
            analyzer = None

        pipeline = RequirementsPipeline(confluence_client, analyzer)

        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}")
        raise
