from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, Type
import logging

from .exceptions import ConfigError
from .models import AnalysisResult
from .prompts import Prompts
from .section_splitter import split_sections

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 3000
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434/v1"


class LLMProvider(ABC):
    """Abstract base class for completion providers"""

    display_name = "LLM"
    requires_api_key = True

    def __init__(self, api_key: Optional[str], model: str, system_prompt: str,
                 temperature: float = DEFAULT_TEMPERATURE, max_tokens: int = DEFAULT_MAX_TOKENS):
        self.api_key = api_key
        self.model = model
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.max_tokens = max_tokens

    @abstractmethod
    def complete(self, prompt: str) -> Optional[str]:
        """Send the system instruction and prompt, return the reply text"""
        pass


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions provider"""

    display_name = "OpenAI"

    def __init__(self, api_key: Optional[str], model: str, system_prompt: str,
                 temperature: float = DEFAULT_TEMPERATURE, max_tokens: int = DEFAULT_MAX_TOKENS,
                 base_url: Optional[str] = None):
        super().__init__(api_key, model, system_prompt, temperature, max_tokens)
        try:
            from openai import OpenAI
            if base_url:
                self.client = OpenAI(api_key=api_key, base_url=base_url)
            else:
                self.client = OpenAI(api_key=api_key)
        except ImportError:
            raise ImportError("openai package is required for OpenAI provider")

    def complete(self, prompt: str) -> Optional[str]:
        logger.info(f"Calling {self.display_name} model {self.model} with max_tokens={self.max_tokens}")
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt}
            ],
            temperature=self.temperature,
            max_tokens=self.max_tokens
        )

        if not response.choices:
            return None

        finish_reason = response.choices[0].finish_reason
        if finish_reason == 'length':
            logger.warning(f"{self.display_name} response was truncated (finish_reason=length)")
        return response.choices[0].message.content


class OllamaProvider(OpenAIProvider):
    """Local Ollama server through its OpenAI-compatible endpoint"""

    display_name = "Ollama"
    requires_api_key = False

    def __init__(self, api_key: Optional[str], model: str, system_prompt: str,
                 temperature: float = DEFAULT_TEMPERATURE, max_tokens: int = DEFAULT_MAX_TOKENS,
                 base_url: Optional[str] = None):
        # Ollama ignores the key but the OpenAI client refuses an empty one
        super().__init__(api_key or "ollama", model, system_prompt, temperature, max_tokens,
                         base_url=base_url or DEFAULT_OLLAMA_BASE_URL)


class ClaudeProvider(LLMProvider):
    """Anthropic Claude provider"""

    display_name = "Claude"

    def __init__(self, api_key: Optional[str], model: str, system_prompt: str,
                 temperature: float = DEFAULT_TEMPERATURE, max_tokens: int = DEFAULT_MAX_TOKENS):
        super().__init__(api_key, model, system_prompt, temperature, max_tokens)
        try:
            import anthropic
            self.client = anthropic.Anthropic(api_key=api_key)
        except ImportError:
            raise ImportError("anthropic package is required for Claude provider")

    def complete(self, prompt: str) -> Optional[str]:
        logger.info(f"Calling Claude model {self.model} with max_tokens={self.max_tokens}")
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=self.system_prompt,
            messages=[
                {"role": "user", "content": prompt}
            ]
        )

        if response.stop_reason == "max_tokens":
            logger.warning(f"Claude response was truncated due to max_tokens limit ({self.max_tokens})")

        if not response.content:
            return None
        return response.content[0].text


class GeminiProvider(LLMProvider):
    """Google Gemini provider"""

    display_name = "Gemini"

    def __init__(self, api_key: Optional[str], model: str, system_prompt: str,
                 temperature: float = DEFAULT_TEMPERATURE, max_tokens: int = DEFAULT_MAX_TOKENS):
        super().__init__(api_key, model, system_prompt, temperature, max_tokens)
        try:
            import google.generativeai as genai
            genai.configure(api_key=api_key)
            self.generation_config = genai.types.GenerationConfig(
                temperature=self.temperature,
                max_output_tokens=self.max_tokens
            )
            self.client = genai.GenerativeModel(model, generation_config=self.generation_config)
        except ImportError:
            raise ImportError("google-generativeai package is required for Gemini provider")

    def complete(self, prompt: str) -> Optional[str]:
        # Gemini takes the system instruction inline with the user turn
        full_prompt = f"{self.system_prompt}\n\n{prompt}"
        logger.info(f"Calling Gemini model {self.model} with max_output_tokens={self.max_tokens}")
        response = self.client.generate_content(full_prompt)

        # .text raises when the reply has no candidate or the candidate has no parts
        if not response.candidates or not response.candidates[0].content.parts:
            logger.warning(f"Gemini returned no content (prompt_feedback={response.prompt_feedback})")
            return None
        return response.text


PROVIDERS: Dict[str, Type[LLMProvider]] = {
    'openai': OpenAIProvider,
    'claude': ClaudeProvider,
    'gemini': GeminiProvider,
    'ollama': OllamaProvider,
}


def create_provider(config: Dict[str, Any]) -> LLMProvider:
    """Look up and build the provider named in an LLM config dict.

    Raises:
        ConfigError: unknown provider name, or missing API key
    """
    name = (config.get('provider') or '').lower()
    provider_class = PROVIDERS.get(name)
    if provider_class is None:
        raise ConfigError(f"Unsupported LLM provider: {name}. Supported providers: {sorted(PROVIDERS)}")

    api_key = config.get('api_key')
    if provider_class.requires_api_key and not api_key:
        raise ConfigError(f"Missing API key for LLM provider: {name}")

    kwargs = dict(
        api_key=api_key,
        model=config['model'],
        system_prompt=config.get('system_prompt') or Prompts.get_analysis_system_prompt(),
        temperature=float(config.get('temperature', DEFAULT_TEMPERATURE)),
        max_tokens=int(config.get('max_tokens') or DEFAULT_MAX_TOKENS),
    )
    if config.get('base_url') and issubclass(provider_class, OpenAIProvider):
        kwargs['base_url'] = config['base_url']

    logger.info(f"Creating LLM provider: provider={name}, model={kwargs['model']}")
    return provider_class(**kwargs)


class RequirementsAnalyzer:
    """Runs the analysis prompt against a provider and splits the reply"""

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RequirementsAnalyzer":
        return cls(create_provider(config))

    def analyze(self, prompt: str) -> AnalysisResult:
        """Send filtered requirement text for analysis. Single attempt, never raises."""
        try:
            response = self.provider.complete(prompt)
        except Exception as e:
            logger.error(f"{self.provider.display_name} error: {e}")
            return AnalysisResult(success=False, error=str(e) or f"Failed to connect to {self.provider.display_name}")

        if not response:
            logger.error(f"{self.provider.display_name} returned an empty response")
            return AnalysisResult(success=False, error=f"No response from {self.provider.display_name}")

        logger.info(f"Analysis response length: {len(response)} characters")
        logger.debug(f"Analysis response preview:\n{response[:500]}")

        return AnalysisResult(success=True, text=response, sections=split_sections(response))

    def test_connection(self) -> bool:
        """Test if the LLM provider is working"""
        try:
            response = self.provider.complete(Prompts.get_connection_test_prompt())
            return bool(response) and "successful" in response.lower()
        except Exception as e:
            logger.error(f"LLM connection test failed: {e}")
            return False
