"""Factory for creating LLM provider instances."""

from typing import Callable, Dict, Optional
from config import Config
from llm.providers.base import LLMProvider
from llm.providers.openai import OpenAIProvider
from logger import get_logger

logger = get_logger()


def _openai(config: Config) -> LLMProvider:
    if not config.llm_openai_api_key:
        raise ValueError(
            "OpenAI provider selected but llm.openai_api_key is not configured "
            "and OPENAI_API_KEY is not set"
        )
    logger.debug(
        f"Initializing OpenAI provider (model: {config.llm_openai_model or 'prompt default'})"
    )
    return OpenAIProvider(api_key=config.llm_openai_api_key, model=config.llm_openai_model)


PROVIDERS: Dict[str, Callable[[Config], LLMProvider]] = {
    "openai": _openai,
}


def get_llm_provider(config: Config) -> Optional[LLMProvider]:
    """Create the configured LLM provider.

    Args:
        config: Application configuration.

    Returns:
        LLMProvider instance, or None if the assistant is disabled or no
        provider is configured.

    Raises:
        ValueError: If the provider is unknown or its settings are incomplete.
    """
    if not config.llm_enabled:
        logger.info("LLM assistant is disabled")
        return None

    if not config.llm_provider:
        logger.info("No LLM provider configured")
        return None

    build = PROVIDERS.get(config.llm_provider)
    if build is None:
        raise ValueError(
            f"Unknown LLM provider: {config.llm_provider} "
            f"(available: {', '.join(sorted(PROVIDERS))})"
        )
    return build(config)
