"""Tests for auto-categorization."""

from datetime import date

import pytest

from categorization import (
    auto_categorize,
    collect_categorizations,
    get_assistant,
    request_categorization,
    uncategorized,
)
from installments import TransactionDraft
from llm.assistant import FinanceAssistant
from llm.tasks import BackgroundTasks
from tests.helpers import FakeProvider, make_transaction


def categorization_response(*pairs):
    items = ", ".join(f'{{"id": "{txn_id}", "category": "{category}"}}' for txn_id, category in pairs)
    return f"```json\n[{items}]\n```"


@pytest.fixture
def tasks():
    pool = BackgroundTasks(max_workers=1)
    yield pool
    pool.shutdown()


def add(ledger, description, category=None):
    return ledger.add(
        TransactionDraft("acc1", description, 1000, date(2024, 1, 5), category=category)
    )[0]


class TestUncategorized:
    """Tests for uncategorized."""

    def test_filters(self):
        transactions = [make_transaction("a", category="Food"), make_transaction("b")]

        assert [t.id for t in uncategorized(transactions)] == ["b"]


class TestAutoCategorize:
    """Tests for auto_categorize."""

    def test_applies_results(self, ledger):
        uber = add(ledger, "Uber")
        add(ledger, "Market", category="Groceries")
        provider = FakeProvider([categorization_response((uber.id, "Transport"))])

        changed = auto_categorize(ledger, FinanceAssistant(provider))

        assert changed == 1
        assert ledger.find(uber.id).category == "Transport"
        # only uncategorized transactions are sent
        sent = provider.requests[0]["contents"]
        assert uber.id in sent and "Market" not in sent

    def test_disabled_assistant(self, ledger):
        add(ledger, "Uber")

        assert auto_categorize(ledger, None) == 0

    def test_nothing_to_categorize(self, ledger):
        add(ledger, "Market", category="Groceries")
        provider = FakeProvider()

        assert auto_categorize(ledger, FinanceAssistant(provider)) == 0
        assert provider.requests == []

    def test_provider_failure_changes_nothing(self, ledger):
        uber = add(ledger, "Uber")
        provider = FakeProvider(error=RuntimeError("down"))

        assert auto_categorize(ledger, FinanceAssistant(provider)) == 0
        assert ledger.find(uber.id).category is None


class TestBackgroundCategorization:
    """Tests for request_categorization and collect_categorizations."""

    def test_result_applied_on_collect(self, ledger, tasks):
        uber = add(ledger, "Uber")
        assistant = FinanceAssistant(
            FakeProvider([categorization_response((uber.id, "Transport"))])
        )

        request_categorization(tasks, assistant, ledger, ledger.transactions)
        changed = collect_categorizations(tasks, ledger, timeout=None)

        assert changed == 1
        assert ledger.find(uber.id).category == "Transport"

    def test_results_for_deleted_transactions_are_dropped(self, ledger, tasks):
        uber = add(ledger, "Uber")
        taxi = add(ledger, "Taxi")
        assistant = FinanceAssistant(
            FakeProvider(
                [categorization_response((uber.id, "Transport"), (taxi.id, "Transport"))]
            )
        )

        request_categorization(tasks, assistant, ledger, ledger.transactions)
        ledger.delete(uber.id)
        changed = collect_categorizations(tasks, ledger, timeout=None)

        assert changed == 1
        assert ledger.find(uber.id) is None
        assert ledger.find(taxi.id).category == "Transport"

    def test_other_requests_left_pending(self, ledger, tasks):
        tasks.submit(lambda: "unrelated", request_id="insights")

        assert collect_categorizations(tasks, ledger, timeout=None) == 0
        assert tasks.pending() == ["insights"]


class TestGetAssistant:
    """Tests for get_assistant."""

    def test_disabled(self, test_config):
        assert get_assistant(test_config) is None
        assert get_assistant(None) is None

    def test_misconfigured(self, test_config):
        test_config.llm_enabled = True
        test_config.llm_openai_api_key = ""

        assert get_assistant(test_config) is None

    def test_enabled(self, test_config):
        test_config.llm_enabled = True
        test_config.llm_openai_api_key = "sk-test"

        assert isinstance(get_assistant(test_config), FinanceAssistant)
