"""LLM integration: categorization, monthly summaries, insights and Q&A."""

from llm.factory import get_llm_provider

__all__ = ["get_llm_provider"]
