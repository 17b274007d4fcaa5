"""Auto-categorization of transactions using the LLM assistant.

Categorization can run inline (:func:`auto_categorize`) or in the
background (:func:`request_categorization` + :func:`collect_categorizations`).
Either way results are matched to transactions by id when they are applied,
and results for transactions deleted in the meantime are dropped.
"""

from typing import Collection, List, Optional

from config import Config
from llm import get_llm_provider
from llm.assistant import FinanceAssistant
from llm.responses import CategorizationItem
from llm.tasks import BackgroundTasks
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()

CATEGORIZE_REQUEST = "categorize"


def get_assistant(config: Optional[Config]) -> Optional[FinanceAssistant]:
    """Build the assistant from configuration, or None if the LLM is unavailable."""
    if config is None:
        logger.info("No config provided - assistant unavailable")
        return None

    try:
        provider = get_llm_provider(config)
    except Exception as e:
        logger.error(f"Failed to initialize LLM provider: {e}")
        return None

    if provider is None:
        return None
    return FinanceAssistant(provider)


def uncategorized(transactions: List[Transaction]) -> List[Transaction]:
    """Transactions that still have no category."""
    return [t for t in transactions if not t.category]


def apply_categorizations(ledger, items: List[CategorizationItem]) -> int:
    """Apply assistant classifications to the ledger in one batch.

    Items whose transaction no longer exists are dropped.

    Returns:
        Number of transactions that changed.
    """
    suggestions = {item.id: (item.category, item.nature) for item in items}
    stale = [txn_id for txn_id in suggestions if ledger.find(txn_id) is None]
    if stale:
        logger.info(f"Dropping {len(stale)} categorization(s) for removed transactions")

    return ledger.apply_categories(suggestions)


def auto_categorize(
    ledger,
    assistant: Optional[FinanceAssistant],
    transactions: Optional[List[Transaction]] = None,
) -> int:
    """Categorize transactions synchronously.

    Args:
        ledger: Ledger the results are applied to.
        assistant: Assistant to ask; None skips categorization.
        transactions: Transactions to categorize; defaults to every
            uncategorized transaction of the ledger.

    Returns:
        Number of transactions that changed (0 on any failure).
    """
    if assistant is None:
        logger.info("LLM categorization disabled - skipping")
        return 0

    targets = uncategorized(
        ledger.transactions if transactions is None else transactions
    )
    if not targets:
        logger.info("Nothing to categorize")
        return 0

    category_names = [c.name for c in ledger.user.visible_categories()]
    items = assistant.categorize(targets, category_names)
    return apply_categorizations(ledger, items)


def request_categorization(
    tasks: BackgroundTasks,
    assistant: FinanceAssistant,
    ledger,
    transactions: List[Transaction],
    request_id: str = CATEGORIZE_REQUEST,
) -> str:
    """Start a background categorization of ``transactions``.

    A still-pending request with the same id is cancelled.

    Returns:
        The request id to collect the result under.
    """
    category_names = [c.name for c in ledger.user.visible_categories()]
    return tasks.submit(
        assistant.categorize,
        uncategorized(transactions),
        category_names,
        request_id=request_id,
    )


def collect_categorizations(
    tasks: BackgroundTasks,
    ledger,
    timeout: Optional[float] = 0,
    request_ids: Collection[str] = (CATEGORIZE_REQUEST,),
) -> int:
    """Apply finished background categorizations to the ledger.

    Returns:
        Number of transactions that changed.
    """
    changed = 0
    for result in tasks.collect(timeout=timeout, request_ids=request_ids):
        if result.ok and result.value:
            changed += apply_categorizations(ledger, result.value)
    return changed
