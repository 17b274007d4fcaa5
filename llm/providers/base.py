"""Base provider interface for LLM implementations."""

from abc import ABC, abstractmethod
from typing import Optional


class LLMProvider(ABC):
    """Abstract base class for text-generation providers.

    Providers only move text: the caller builds the JSON payload and is
    responsible for treating the answer as untrusted.
    """

    @abstractmethod
    def generate(
        self,
        system_instruction: str,
        contents: str,
        temperature: float = 0.2,
        model: Optional[str] = None,
    ) -> Optional[str]:
        """Generate a response for a payload.

        Args:
            system_instruction: System prompt describing the modes and formats.
            contents: JSON payload with the mode and its context.
            temperature: Sampling temperature.
            model: Optional model override.

        Returns:
            The response text, or None if the provider returned nothing.

        Raises:
            Exception: If the provider API call fails.
        """
        pass
