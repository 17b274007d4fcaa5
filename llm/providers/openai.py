"""OpenAI provider implementation."""

from typing import Optional
from openai import OpenAI
from llm.providers.base import LLMProvider
from logger import get_logger

logger = get_logger()

DEFAULT_MODEL = "gpt-4o-mini"


class OpenAIProvider(LLMProvider):
    """OpenAI implementation using chat completions."""

    def __init__(self, api_key: str, model: Optional[str] = None):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key.
            model: Model to use (e.g., "gpt-4o-mini"). If None, uses prompt default.
        """
        self.client = OpenAI(api_key=api_key)
        self.model = model

    def generate(
        self,
        system_instruction: str,
        contents: str,
        temperature: float = 0.2,
        model: Optional[str] = None,
    ) -> Optional[str]:
        """Send one payload to OpenAI and return the message text.

        Raises:
            Exception: If the OpenAI API call fails.
        """
        model = self.model or model or DEFAULT_MODEL
        logger.info(f"Calling OpenAI (model: {model})")

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": contents},
                ],
                temperature=temperature,
            )
        except Exception as e:
            logger.error(f"OpenAI API error: {e}")
            raise

        if not response.choices:
            logger.warning("OpenAI returned no choices")
            return None
        return response.choices[0].message.content
