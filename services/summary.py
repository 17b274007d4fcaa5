"""Selected-period view that keeps its summary in step with the ledger."""

from datetime import date
from typing import Optional

from models.summary import PeriodSummary
from periods import current_period, parse_month, shift_period


class PeriodView:
    """Tracks the selected month and the summary of that month.

    The summary is recomputed whenever the ledger applies a mutation or the
    selection changes, and is never persisted.

    Args:
        ledger: Ledger to observe.
        month: Initially selected period, defaults to the current month.
    """

    def __init__(self, ledger, month: Optional[str] = None, today: Optional[date] = None):
        self.ledger = ledger
        self.month = month or current_period(today)
        parse_month(self.month)
        self.summary: PeriodSummary = ledger.summary(self.month)
        self._unsubscribe = ledger.subscribe(self._on_ledger_change)

    def select(self, month: str) -> PeriodSummary:
        """Select a period and recompute its summary."""
        parse_month(month)
        self.month = month
        return self._refresh()

    def shift(self, offset: int) -> PeriodSummary:
        """Move the selection by ``offset`` months (negative goes back)."""
        return self.select(shift_period(self.month, offset))

    def close(self) -> None:
        """Stop observing the ledger."""
        self._unsubscribe()

    def _on_ledger_change(self, ledger) -> None:
        self._refresh()

    def _refresh(self) -> PeriodSummary:
        self.summary = self.ledger.summary(self.month)
        return self.summary
