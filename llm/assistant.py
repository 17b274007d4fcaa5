"""Finance assistant built on a text-generation provider.

Each mode sends a JSON payload ``{"mode", "context", ...}`` together with
the assistant system prompt. Provider failures and malformed answers are
logged and turned into neutral results; they never reach the caller as
exceptions and never touch the transaction collection.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

from llm.prompts.loader import PromptManager
from llm.providers.base import LLMProvider
from llm.responses import (
    AssistantSummary,
    CategorizationItem,
    parse_categorizations,
    parse_summary,
)
from models.summary import PeriodSummary
from models.transaction import Transaction
from periods import period_label
from logger import get_logger

logger = get_logger()

INSIGHTS_FALLBACK = "Insights are not available right now."
ANSWER_FALLBACK = "Sorry, I could not process your question."


class AssistantMode(Enum):
    CATEGORIZE_TRANSACTIONS = "CATEGORIZE_TRANSACTIONS"
    SUMMARY_MONTH = "SUMMARY_MONTH"
    INSIGHTS_MONTH = "INSIGHTS_MONTH"
    QNA = "QNA"


class FinanceAssistant:
    """Runs the assistant modes against an LLM provider.

    Args:
        provider: Text-generation provider.
        prompt_manager: Loader for the assistant prompt.
        prompt_name: Prompt file to use.
    """

    def __init__(
        self,
        provider: LLMProvider,
        prompt_manager: Optional[PromptManager] = None,
        prompt_name: str = "assistant",
    ):
        self.provider = provider
        self.prompt_manager = prompt_manager or PromptManager()
        self.prompt_name = prompt_name

    def categorize(
        self,
        transactions: List[Transaction],
        category_names: Optional[List[str]] = None,
    ) -> List[CategorizationItem]:
        """Ask for a category and nature for each transaction.

        Returns:
            Parsed classifications; empty on any failure.
        """
        if not transactions:
            return []

        context: Dict[str, Any] = {"transactions": _serialize(transactions)}
        if category_names:
            context["categories"] = category_names

        text = self._send(AssistantMode.CATEGORIZE_TRANSACTIONS, context)
        items = parse_categorizations(text)
        logger.info(
            f"Assistant categorized {len(items)} of {len(transactions)} transaction(s)"
        )
        return items

    def monthly_summary(
        self, transactions: List[Transaction], month: str
    ) -> Optional[AssistantSummary]:
        """Ask for a commented summary of a month, or None on failure."""
        text = self._send(
            AssistantMode.SUMMARY_MONTH,
            {"transactions": _serialize(transactions), "period": _period(month)},
        )
        return parse_summary(text)

    def insights(self, transactions: List[Transaction], month: str) -> str:
        """Ask for a qualitative analysis of a month."""
        text = self._send(
            AssistantMode.INSIGHTS_MONTH,
            {"transactions": _serialize(transactions), "period": _period(month)},
        )
        return text.strip() if text and text.strip() else INSIGHTS_FALLBACK

    def ask(
        self,
        question: str,
        transactions: List[Transaction],
        summary: Optional[PeriodSummary] = None,
    ) -> str:
        """Answer a free-text question about the user's finances."""
        context: Dict[str, Any] = {"transactions": _serialize(transactions)}
        if summary is not None:
            context["precomputed"] = {"summary": summary.to_dict()}

        text = self._send(AssistantMode.QNA, context, question=question)
        return text.strip() if text and text.strip() else ANSWER_FALLBACK

    def _send(
        self, mode: AssistantMode, context: Dict[str, Any], **extra: Any
    ) -> Optional[str]:
        payload = json.dumps({"mode": mode.value, "context": context, **extra})
        try:
            prompt = self.prompt_manager.render_prompt(
                self.prompt_name, {"payload": payload}
            )
            parameters = prompt["parameters"]
            return self.provider.generate(
                prompt["system_prompt"],
                prompt["user_prompt"],
                temperature=parameters.get("temperature", 0.2),
                model=parameters.get("model"),
            )
        except Exception as e:
            logger.error(f"Assistant request {mode.value} failed: {e}")
            return None


def _serialize(transactions: List[Transaction]) -> List[dict]:
    return [t.to_dict() for t in transactions]


def _period(month: str) -> dict:
    return {"month": month, "label": period_label(month)}
