"""
Kirana — PosService Tests
===========================
Single-writer submission, snapshots, previews and concurrency.
"""

import threading
from datetime import datetime, timezone
from decimal import Decimal

from core.ids import SequentialIdProvider
from core.primitives.item import InventoryItem
from core.state.snapshot import ActiveView, PosState
from core.config.settings import PosSettings
from core.time.clock import FixedClock
from engines.actions.reducer import NoOpReason, ReducerContext
from engines.actions.services import PosService

NOW = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def _service(**settings):
    return PosService(
        context=ReducerContext(
            settings=PosSettings(**settings),
            clock=FixedClock(NOW),
            ids=SequentialIdProvider(),
        ),
        initial_state=PosState(inventory=(
            InventoryItem("3", "Tata Salt", 20, "kg", Decimal("25")),
            InventoryItem("7", "Bread", 500, "loaf", Decimal("40")),
        )),
    )


class TestSubmit:
    def test_submit_swaps_snapshot(self):
        service = _service()
        before = service.snapshot()
        result = service.submit({"kind": "QUICK_RESTOCK", "names": ["Tata Salt"]})
        assert result.applied
        assert service.snapshot() is result.state
        assert service.snapshot() is not before
        assert before.inventory[0].quantity == 20

    def test_noop_keeps_snapshot(self):
        service = _service()
        before = service.snapshot()
        result = service.submit({"action": "NONE"})
        assert not result.applied
        assert service.snapshot() is before

    def test_malformed_never_raises(self):
        service = _service()
        result = service.submit(b"\x00garbage")
        assert result.reason == NoOpReason.MALFORMED_ACTION

    def test_out_of_range_numbers_never_raise(self):
        service = _service()
        before = service.snapshot()
        result = service.submit({"kind": "RESTOCK", "items": [
            {"name": "Sugar", "quantity": 2, "price": "1e999999"},
            {"name": "Tata Salt", "quantity": "1e999999"},
        ]})
        assert not result.applied
        assert result.reason == NoOpReason.NO_LINES
        assert result.skipped_lines == 2
        assert service.snapshot() is before

    def test_default_view_from_settings(self):
        service = PosService(
            context=ReducerContext(settings=PosSettings(default_view=ActiveView.CHAT)),
        )
        assert service.snapshot().active_view == ActiveView.CHAT

    def test_reset(self):
        service = _service()
        service.submit({"kind": "QUICK_RESTOCK", "names": ["Tata Salt"]})
        service.reset()
        assert service.snapshot().inventory == ()


class TestPreview:
    def test_preview_does_not_mutate(self):
        service = _service()
        before = service.snapshot()
        preview = service.preview({"items": [{"name": "bread", "quantity": 2}]})
        assert preview.total_amount == Decimal("80")
        assert service.snapshot() is before

    def test_preview_of_malformed_payload_is_empty(self):
        preview = _service().preview("two breads")
        assert preview.items == ()
        assert preview.total_amount == 0


class TestConcurrency:
    def test_concurrent_sales_lose_no_update(self):
        service = _service()
        workers = 8
        per_worker = 25

        def sell():
            for _ in range(per_worker):
                service.submit({"kind": "RECORD_SALE", "items": [
                    {"name": "Bread", "quantity": 1},
                ]})

        threads = [threading.Thread(target=sell) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        state = service.snapshot()
        assert len(state.sales) == workers * per_worker
        assert state.find_item("7").quantity == 500 - workers * per_worker
        assert len({s.sale_id for s in state.sales}) == workers * per_worker
