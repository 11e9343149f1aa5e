import os
import re
import yaml
import logging
from typing import Dict, Any, Optional, List
from dotenv import load_dotenv

from .llm_client import DEFAULT_MAX_TOKENS, DEFAULT_OLLAMA_BASE_URL, DEFAULT_TEMPERATURE, PROVIDERS
from .prompts import Prompts
from .session_store import DEFAULT_MAX_AGE, MAX_VALUE_SIZE

logger = logging.getLogger(__name__)

# provider -> (api key setting, model setting, default model)
PROVIDER_SETTINGS = {
    'openai': ('openai_api_key', 'openai_model', 'gpt-3.5-turbo'),
    'claude': ('anthropic_api_key', 'anthropic_model', 'claude-sonnet-4-5'),
    'gemini': ('google_api_key', 'gemini_model', 'gemini-1.5-flash'),
    'ollama': (None, 'ollama_model', 'llama3'),
}


class Config:
    """Configuration manager for the requirements analyzer"""

    def __init__(self, config_path: str = "config.yaml"):
        load_dotenv()
        self.config_path = config_path
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file with environment variable substitution"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r') as file:
            config_content = file.read()

        config_content = self._substitute_env_vars(config_content)

        return yaml.safe_load(config_content) or {}

    def _substitute_env_vars(self, content: str) -> str:
        """Replace ${VAR_NAME} and ${VAR_NAME:default} with environment variables"""
        def replace_var(match):
            var_expr = match.group(1)
            if ':' in var_expr:
                var_name, default_value = var_expr.split(':', 1)
                return os.getenv(var_name, default_value)
            else:
                return os.getenv(var_expr, '')

        return re.sub(r'\$\{([^}]+)\}', replace_var, content)

    @property
    def confluence(self) -> Dict[str, Any]:
        return self._config.get('confluence') or {}

    @property
    def llm(self) -> Dict[str, Any]:
        return self._config.get('llm') or {}

    @property
    def session(self) -> Dict[str, Any]:
        return self._config.get('session') or {}

    def get_confluence_timeout(self) -> int:
        return int(self.confluence.get('timeout') or 30)

    def get_session_max_value_size(self) -> int:
        return int(self.session.get('max_value_size') or MAX_VALUE_SIZE)

    def get_session_max_age(self) -> int:
        return int(self.session.get('max_age') or DEFAULT_MAX_AGE)

    def get_supported_providers(self) -> List[str]:
        """Get list of supported LLM providers"""
        return list(PROVIDERS)

    def get_default_provider(self) -> str:
        return (self.llm.get('provider') or 'openai').lower()

    def get_provider_model(self, provider: str) -> str:
        """Configured model for a provider, or its built-in default"""
        _, model_setting, default_model = PROVIDER_SETTINGS[provider]
        return self.llm.get(model_setting) or default_model

    def has_api_key(self, provider: str) -> bool:
        key_setting = PROVIDER_SETTINGS[provider][0]
        return key_setting is None or bool(self.llm.get(key_setting))

    def get_llm_config(self, provider: Optional[str] = None, model: Optional[str] = None) -> Dict[str, Any]:
        """Get configuration for the specified or default LLM provider"""
        provider = (provider or self.get_default_provider()).lower()

        if provider not in PROVIDER_SETTINGS:
            raise ValueError(f"Unsupported LLM provider: {provider}. Supported providers: {self.get_supported_providers()}")

        max_tokens_config = self.llm.get('max_tokens')
        max_tokens = DEFAULT_MAX_TOKENS
        if max_tokens_config not in (None, ''):
            try:
                max_tokens = int(max_tokens_config)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid max_tokens config value: {max_tokens_config!r}, using {DEFAULT_MAX_TOKENS}. Error: {e}")

        key_setting = PROVIDER_SETTINGS[provider][0]
        config = {
            'provider': provider,
            'api_key': self.llm.get(key_setting) if key_setting else None,
            'model': model or self.get_provider_model(provider),
            'system_prompt': self.llm.get('system_prompt') or Prompts.get_analysis_system_prompt(),
            'temperature': float(self.llm.get('temperature') if self.llm.get('temperature') not in (None, '') else DEFAULT_TEMPERATURE),
            'max_tokens': max_tokens,
        }

        if provider == 'ollama':
            config['base_url'] = self.llm.get('ollama_base_url') or DEFAULT_OLLAMA_BASE_URL

        return config

    def get_errors(self) -> List[str]:
        """List missing or invalid settings"""
        errors = []

        for field in ['domain', 'email', 'api_token']:
            if not self.confluence.get(field):
                errors.append(f"Missing Confluence configuration: {field}")

        provider = self.get_default_provider()
        if provider not in PROVIDER_SETTINGS:
            errors.append(f"Unsupported LLM provider: {provider}")
        elif not self.has_api_key(provider):
            errors.append(f"Missing API key for LLM provider: {provider}")

        return errors

    def validate(self) -> bool:
        """Validate that all required configuration is present"""
        errors = self.get_errors()
        for error in errors:
            logger.error(f"Configuration Error: {error}")
        return not errors
