#!/usr/bin/env python3
"""
Requirements Analyzer - Command Line Interface

Extract requirements from a Confluence page and turn them into organized
requirements, QA test cases and backend/frontend summaries with an LLM.
"""

import click
import logging
import sys
from typing import Optional

from req_analyzer.config import Config
from req_analyzer.confluence_client import ConfluenceClient
from req_analyzer.exceptions import ConfigError
from req_analyzer.llm_client import RequirementsAnalyzer
from req_analyzer.pipeline import RequirementsPipeline
from req_analyzer.session_store import BoundedValueStore, InMemoryBackend


def setup_logging(verbose: bool = False):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    console_handler.setFormatter(formatter)

    # Configure root logger
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.addHandler(console_handler)

    # Reduce noise from external libraries
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)


def create_confluence_client(config: Config) -> ConfluenceClient:
    return ConfluenceClient(
        domain=config.confluence.get('domain', ''),
        email=config.confluence.get('email', ''),
        api_token=config.confluence.get('api_token', ''),
        timeout=config.get_confluence_timeout()
    )


def create_store(config: Config) -> BoundedValueStore:
    return BoundedValueStore(
        InMemoryBackend(),
        max_value_size=config.get_session_max_value_size(),
        max_age=config.get_session_max_age()
    )


@click.group()
@click.option('--config', '-c', default='config.yaml', help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """Requirements Analyzer - Confluence requirements to test cases"""
    setup_logging(verbose)

    try:
        ctx.obj = Config(config)
    except Exception as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('url')
@click.pass_context
def extract(ctx, url):
    """Extract requirement lines from a Confluence page"""
    config = ctx.obj
    pipeline = RequirementsPipeline(create_confluence_client(config))

    result = pipeline.process_requirements(url, create_store(config))
    if not result.success:
        click.echo(f"❌ {result.error}", err=True)
        sys.exit(1)

    click.echo(result.data['originalContent'])
    modules = result.data['modules']
    if modules:
        click.echo("\nModules:")
        for module in modules:
            click.echo(f"  - {module}")


@cli.command()
@click.argument('url')
@click.option('--provider', '-p', default=None, help='LLM provider (defaults to llm.provider in config)')
@click.option('--model', '-m', default=None, help='Model name (defaults to the provider model in config)')
@click.pass_context
def analyze(ctx, url, provider: Optional[str], model: Optional[str]):
    """Extract requirements from a page and analyze them with the LLM"""
    config = ctx.obj
    logger = logging.getLogger(__name__)

    try:
        analyzer = RequirementsAnalyzer.from_config(config.get_llm_config(provider, model))
    except (ConfigError, ValueError) as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    pipeline = RequirementsPipeline(create_confluence_client(config), analyzer)
    store = create_store(config)

    extraction = pipeline.process_requirements(url, store)
    if not extraction.success:
        click.echo(f"❌ {extraction.error}", err=True)
        sys.exit(1)
    logger.info(f"Extracted {len(extraction.data['originalContent'])} characters of requirements")

    analysis = pipeline.process_with_ai(store)
    if not analysis.success:
        click.echo(f"❌ {analysis.error}", err=True)
        sys.exit(1)

    for title, key in [("REQUIREMENTS", "requirements"), ("TEST CASES", "testCases"), ("SUMMARY", "summary")]:
        click.echo("=" * 60)
        click.echo(title)
        click.echo("=" * 60)
        click.echo(analysis.data[key] or "(empty)")
        click.echo()


@cli.command()
@click.pass_context
def providers(ctx):
    """List LLM providers and their configured models"""
    config = ctx.obj
    default = config.get_default_provider()
    for name in config.get_supported_providers():
        marker = "*" if name == default else " "
        key_status = "key set" if config.has_api_key(name) else "no key"
        click.echo(f"{marker} {name:<8} {config.get_provider_model(name):<30} {key_status}")


@cli.command('test-connection')
@click.pass_context
def test_connection(ctx):
    """Test Confluence and LLM connections"""
    config = ctx.obj
    logger = logging.getLogger(__name__)

    if not config.validate():
        sys.exit(1)

    ok = True
    if create_confluence_client(config).test_connection():
        logger.info("✅ Confluence connection successful")
    else:
        logger.error("❌ Confluence connection failed")
        ok = False

    try:
        analyzer = RequirementsAnalyzer.from_config(config.get_llm_config())
        if analyzer.test_connection():
            logger.info("✅ LLM connection successful")
        else:
            logger.error("❌ LLM connection failed")
            ok = False
    except ConfigError as e:
        logger.error(f"❌ LLM configuration error: {e}")
        ok = False

    if not ok:
        sys.exit(1)


if __name__ == '__main__':
    cli()
