"""Tests for chain description helpers and the chain index."""

from dataclasses import replace
from datetime import date

from installments import ChainIndex, generate_installments
from installments.chain import chain_description, strip_suffix, with_suffix
from tests.helpers import make_transaction


class TestSuffix:
    """Tests for installment description suffixes."""

    def test_strip_suffix(self):
        assert strip_suffix("Laptop (3/12)") == "Laptop"
        assert strip_suffix("Laptop") == "Laptop"
        assert strip_suffix("Rent (June)") == "Rent (June)"

    def test_with_suffix(self):
        assert with_suffix("Laptop (3/12)", 3, 11) == "Laptop (3/11)"
        assert with_suffix("Laptop", 1, 2) == "Laptop (1/2)"

    def test_chain_description(self):
        chain = generate_installments(3000, 3, date(2024, 1, 1), "Bike", "acc1")
        renamed = replace(chain[1], description="Bicycle")

        assert chain_description(renamed) == "Bicycle (2/3)"
        assert chain_description(make_transaction(description="Tea")) == "Tea"


class TestChainIndex:
    """Tests for ChainIndex."""

    def _collection(self, *chains, extra=()):
        return {t.id: t for chain in chains for t in chain} | {t.id: t for t in extra}

    def test_rebuild_groups_and_orders_members(self):
        chain = generate_installments(3000, 3, date(2024, 1, 1), "Bike", "acc1", installment_id="c1")
        standalone = make_transaction()
        transactions = self._collection(list(reversed(chain)), extra=[standalone])

        index = ChainIndex()
        index.rebuild(transactions.values())

        assert index.member_ids("c1") == [t.id for t in chain]
        assert index.chain_ids() == ["c1"]
        assert "c1" in index
        assert len(index) == 1
        assert index.members("c1", transactions) == chain

    def test_unknown_chain(self):
        index = ChainIndex()

        assert index.member_ids("missing") == []
        assert index.members("missing", {}) == []

    def test_refresh_picks_up_new_members(self):
        chain = generate_installments(2000, 2, date(2024, 1, 1), "Bike", "acc1", installment_id="c1")
        transactions = self._collection(chain)
        index = ChainIndex()
        index.rebuild(transactions.values())

        extra = replace(chain[1], id="new", installment_number=3, total_installments=3)
        transactions[extra.id] = extra
        index.refresh("c1", transactions, new_ids=["new"])

        assert index.member_ids("c1") == [chain[0].id, chain[1].id, "new"]

    def test_refresh_drops_removed_members_and_empty_chains(self):
        chain = generate_installments(2000, 2, date(2024, 1, 1), "Bike", "acc1", installment_id="c1")
        transactions = self._collection(chain)
        index = ChainIndex()
        index.rebuild(transactions.values())

        del transactions[chain[0].id]
        index.refresh("c1", transactions)
        assert index.member_ids("c1") == [chain[1].id]

        del transactions[chain[1].id]
        index.refresh("c1", transactions)
        assert "c1" not in index
