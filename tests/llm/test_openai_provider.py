"""Tests for OpenAIProvider with a stubbed client."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from llm.providers.openai import DEFAULT_MODEL, OpenAIProvider


def completion(*contents):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    )


@pytest.fixture
def provider():
    provider = OpenAIProvider(api_key="sk-test")
    provider.client = MagicMock()
    return provider


class TestOpenAIProvider:
    """Tests for OpenAIProvider.generate."""

    def test_returns_first_choice(self, provider):
        provider.client.chat.completions.create.return_value = completion("hello")

        assert provider.generate("system", "user", temperature=0.5) == "hello"

        kwargs = provider.client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == DEFAULT_MODEL
        assert kwargs["temperature"] == 0.5
        assert kwargs["messages"] == [
            {"role": "system", "content": "system"},
            {"role": "user", "content": "user"},
        ]

    def test_configured_model_wins(self, provider):
        provider.model = "gpt-4o"
        provider.client.chat.completions.create.return_value = completion("hi")

        provider.generate("system", "user", model="gpt-4o-mini")

        assert provider.client.chat.completions.create.call_args.kwargs["model"] == "gpt-4o"

    def test_no_choices(self, provider):
        provider.client.chat.completions.create.return_value = completion()

        assert provider.generate("system", "user") is None

    def test_errors_propagate(self, provider):
        provider.client.chat.completions.create.side_effect = RuntimeError("rate limited")

        with pytest.raises(RuntimeError):
            provider.generate("system", "user")
