"""Tests for activity logging of store changes."""

from decimal import Decimal

from rupeewise.activity import ActivityLogger, configure_logging
from rupeewise.store import RecordStore


class RecordingLogger:
    """Collects info() calls the way a structlog logger receives them."""

    def __init__(self):
        self.calls = []

    def info(self, event, **kwargs):
        self.calls.append((event, kwargs))


class BrokenLogger:
    def info(self, event, **kwargs):
        raise RuntimeError("log sink gone")


class TestActivityLogger:

    def test_logs_one_line_per_change(self):
        recorder = RecordingLogger()
        store = RecordStore()
        activity = ActivityLogger(logger=recorder)
        activity.attach(store)

        store.upsert_budget("Food", Decimal("5000"))
        store.upsert_budget("Food", Decimal("6000"))

        assert activity.event_count == 2
        assert [event for event, _ in recorder.calls] == ["record_changed", "record_changed"]
        _, fields = recorder.calls[-1]
        assert fields["event_type"] == "budget_set"
        assert fields["collections"] == ["budgets"]
        assert fields["entity_id"] == "Food"
        assert fields["details"]["replaced"] is True

    def test_noop_mutations_are_not_logged(self):
        recorder = RecordingLogger()
        store = RecordStore()
        ActivityLogger(logger=recorder).attach(store)

        store.delete_transaction("missing")
        store.toggle_debt_paid("missing")

        assert recorder.calls == []

    def test_logging_failure_does_not_break_mutation(self):
        store = RecordStore()
        ActivityLogger(logger=BrokenLogger()).attach(store)

        budget = store.upsert_budget("Food", Decimal("1"))

        assert store.budgets == [budget]

    def test_detach(self):
        recorder = RecordingLogger()
        store = RecordStore()
        activity = ActivityLogger(logger=recorder)
        activity.attach(store)
        activity.detach()

        store.upsert_budget("Food", Decimal("1"))

        assert recorder.calls == []


class TestConfigureLogging:

    def test_sets_root_level(self):
        import logging

        configure_logging("warning")
        assert logging.getLogger().level == logging.WARNING
        configure_logging("INFO")
        assert logging.getLogger().level == logging.INFO
