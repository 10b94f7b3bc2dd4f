"""
Tests for the dashboard and report flows and the delete confirmation

Integration tests: real store over an in-memory backend, no UI.
"""

from datetime import date

import pytest

from shop_ledger.models.transaction import TransactionType
from shop_ledger.orchestrator import (
    DashboardFlow,
    DeleteConfirmation,
    DeleteState,
    ReportFlow,
    create_app_components,
    describe,
    record_markup,
)
from shop_ledger.services.storage import InMemoryBackend
from shop_ledger.validation import TransactionValidationError


TODAY = date(2024, 3, 15)


class TestDeleteConfirmation:
    """Tests for the delete state machine."""

    def test_request_then_confirm_removes(self, store, make_tx):
        """Test present -> confirm-pending -> removed."""
        tx = make_tx()
        store.add(tx)
        deletion = DeleteConfirmation(store)

        assert deletion.state_of(tx.id) == DeleteState.PRESENT
        deletion.request(tx.id)
        assert deletion.state_of(tx.id) == DeleteState.CONFIRM_PENDING

        assert deletion.confirm() is True
        assert deletion.state_of(tx.id) == DeleteState.REMOVED
        assert deletion.pending_id is None
        assert len(store) == 0

    def test_cancel_has_no_side_effect(self, store, backend, make_tx):
        """Test confirm-pending -> present."""
        tx = make_tx()
        store.add(tx)
        writes = backend.write_count
        deletion = DeleteConfirmation(store)

        deletion.request(tx.id)
        deletion.cancel()

        assert deletion.state_of(tx.id) == DeleteState.PRESENT
        assert store.transactions == (tx,)
        assert backend.write_count == writes

    def test_confirm_without_request(self, store):
        """Test confirming with nothing pending."""
        assert DeleteConfirmation(store).confirm() is False

    def test_new_request_replaces_pending(self, store, make_tx):
        """Test only one delete is pending at a time."""
        first, second = make_tx(), make_tx()
        store.add(first)
        store.add(second)
        deletion = DeleteConfirmation(store)

        deletion.request(first.id)
        deletion.request(second.id)
        deletion.confirm()

        assert store.transactions == (first,)

    def test_confirm_unknown_id_is_noop(self, store, make_tx):
        """Test deleting an id that is not stored."""
        store.add(make_tx())
        deletion = DeleteConfirmation(store)
        deletion.request("ghost")
        assert deletion.confirm() is False
        assert len(store) == 1

    def test_many_deletes_keep_no_per_id_state(self, store, make_tx):
        """Test removed ids are not accumulated by the confirmation."""
        txs = [make_tx() for _ in range(50)]
        for tx in txs:
            store.add(tx)
        deletion = DeleteConfirmation(store)

        for tx in txs:
            deletion.request(tx.id)
            deletion.confirm()

        assert len(store) == 0
        assert vars(deletion).keys() == {"_store", "_audit_logger", "_pending_id"}
        assert all(deletion.state_of(tx.id) == DeleteState.REMOVED for tx in txs)

    def test_state_follows_the_store(self, store, make_tx):
        """Test a record removed outside the flow reads as removed."""
        tx = make_tx()
        store.add(tx)
        deletion = DeleteConfirmation(store)

        store.remove(tx.id)
        assert deletion.state_of(tx.id) == DeleteState.REMOVED

        store.add(tx)
        assert deletion.state_of(tx.id) == DeleteState.PRESENT


class TestDashboardFlow:
    """Tests for DashboardFlow."""

    def test_build_on_empty_store(self, store):
        """Test an empty ledger still yields a dense chart."""
        data = DashboardFlow(store).build(TODAY)
        assert data.is_empty
        assert data.daily.income == 0
        assert data.year_balance == 0
        assert len(data.trend) == 7

    def test_submit_then_build(self, store):
        """Test a submitted record shows up in every dashboard number."""
        flow = DashboardFlow(store)
        flow.submit(type=TransactionType.INCOME, amount="300", category="dine-in", date="2024-03-15")
        flow.submit(type=TransactionType.EXPENSE, amount="120", category="food", date="2024-03-10")

        data = flow.build(TODAY)
        assert data.daily.income == 300
        assert data.daily.expense == 0
        assert data.year_balance == 180
        assert data.recent[0].category == "food"
        assert data.trend[-1].income == 300

    def test_recent_is_capped(self, store, make_tx):
        """Test the recent list limit."""
        for _ in range(5):
            store.add(make_tx())
        data = DashboardFlow(store, recent_limit=3).build(TODAY)
        assert len(data.recent) == 3

    def test_submit_rejected_by_validation(self, validating_store):
        """Test the form path surfaces validation errors."""
        flow = DashboardFlow(validating_store)
        with pytest.raises(TransactionValidationError):
            flow.submit(type=TransactionType.EXPENSE, amount="abc", category="food", date="2024-03-15")
        assert len(validating_store) == 0


class TestReportFlow:
    """Tests for ReportFlow."""

    def test_year_options(self, store):
        """Test current+1 down to current-2."""
        assert ReportFlow(store).year_options(TODAY) == [2025, 2024, 2023, 2022]

    def test_build(self, store, make_tx):
        """Test totals, monthly and both breakdowns."""
        store.add(make_tx(type="income", amount="500", category="dine-in", date="2024-01-05"))
        store.add(make_tx(type="expense", amount="20", category="food", date="2024-03-01"))
        store.add(make_tx(type="expense", amount="100", category="rent", date="2024-03-02"))
        store.add(make_tx(type="expense", amount="30", category="food", date="2024-04-01"))

        report = ReportFlow(store).build(2024)
        assert report.totals.income == 500
        assert report.totals.expense == 150
        assert report.totals.net == 350
        assert report.monthly.expense[2] == 120
        assert report.monthly.income[0] == 500
        assert report.expense_categories == {"food": 50, "rent": 100}
        assert report.income_categories == {"dine-in": 500}
        assert report.message is None

    def test_build_empty_year(self, store):
        """Test a year with no records."""
        report = ReportFlow(store).build(2022)
        assert report.message == "No records for 2022"
        assert report.expense_categories == {}

    def test_views_share_the_store(self, store):
        """Test a dashboard add is visible in the report without reloading."""
        dashboard = DashboardFlow(store)
        report = ReportFlow(store)
        dashboard.submit(type=TransactionType.EXPENSE, amount="50", category="gas", date="2024-03-15")
        assert report.build(2024).totals.expense == 50


class TestDescribe:
    """Tests for the list meta line."""

    def test_date_only(self, make_tx):
        assert describe(make_tx()) == "2024-03-15"

    def test_with_order_and_note(self, make_tx):
        assert describe(make_tx(order_id="A9", note="table 4")) == "2024-03-15 • #A9 • table 4"


class TestRecordMarkup:
    """Tests for the HTML-enabled list entry."""

    def test_plain_record(self, make_tx):
        assert record_markup(make_tx(order_id="A9")) == (
            "**food**  \n<span class='t-meta'>2024-03-15 • #A9</span>"
        )

    def test_user_text_is_escaped(self, make_tx):
        """Test markup typed into category, order or note is shown as text."""
        tx = make_tx(
            category="<b>food</b>",
            order_id="\"><img src=x onerror=alert(1)>",
            note="<script>alert('x')</script>",
        )
        markup = record_markup(tx)
        assert "<script>" not in markup
        assert "<img" not in markup
        assert "<b>" not in markup
        assert "&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt;" in markup
        assert "**&lt;b&gt;food&lt;/b&gt;**" in markup
        assert "#&quot;&gt;&lt;img src=x onerror=alert(1)&gt;" in markup

    def test_missing_category(self, make_tx):
        assert record_markup(make_tx(category="")).startswith("**Uncategorized**")


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_wires_shared_store(self, monkeypatch):
        """Test both flows get the same loaded store."""
        monkeypatch.setenv("RECENT_LIMIT", "5")
        backend = InMemoryBackend()
        dashboard, report, store = create_app_components(backend=backend)

        assert dashboard.store is store
        dashboard.submit(type=TransactionType.INCOME, amount="10", category="x", date="2024-03-15")
        assert report.build(2024).totals.income == 10
        assert backend.get_item("restaurant_transactions") is not None

    def test_validation_can_be_disabled(self, monkeypatch):
        """Test VALIDATE_ON_ADD=false keeps the legacy behaviour."""
        monkeypatch.setenv("VALIDATE_ON_ADD", "false")
        dashboard, _, store = create_app_components(backend=InMemoryBackend())
        dashboard.submit(type=TransactionType.EXPENSE, amount="abc", category="x", date="2024-03-15")
        assert len(store) == 1

    def test_file_backend_from_settings(self, monkeypatch, tmp_path):
        """Test the default backend writes into the configured directory."""
        monkeypatch.setenv("LEDGER_STORAGE_DATA_DIR", str(tmp_path / "ledger"))
        monkeypatch.setenv("LEDGER_STORAGE_STORAGE_KEY", "shop")
        dashboard, _, _ = create_app_components()
        dashboard.submit(type=TransactionType.INCOME, amount="1", category="x", date="2024-03-15")
        assert (tmp_path / "ledger" / "shop.json").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
