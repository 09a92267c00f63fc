"""
Tests — Django HTTP Adapter
=============================
Routing, JSON decoding, method checks and demo wiring over the
Django test client.
"""

from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pytest

from adapters.django_api import build_dependencies, demo_inventory, reset_dependencies
from core.config.settings import PosSettings
from core.http_api.dependencies import HttpApiDependencies
from core.ids import SequentialIdProvider
from core.state.snapshot import PosState
from core.time.clock import FixedClock
from engines.actions.reducer import ReducerContext
from engines.actions.services import PosService

NOW = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def shop():
    clock = FixedClock(NOW)
    settings = PosSettings()
    service = PosService(
        context=ReducerContext(
            settings=settings, clock=clock, ids=SequentialIdProvider(),
        ),
        initial_state=PosState(inventory=demo_inventory(NOW.date())),
    )
    deps = HttpApiDependencies(service=service, clock=clock, settings=settings)
    reset_dependencies(deps)
    yield deps
    reset_dependencies()


def _post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


# ══════════════════════════════════════════════════════════════
# ROUTES
# ══════════════════════════════════════════════════════════════


class TestStateAndActions:
    def test_state_lists_demo_shelf(self, client, shop):
        response = client.get("/v1/state")
        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert len(body["data"]["inventory"]) == 7
        assert body["data"]["inventory"][0]["name"] == "Marie Gold Biscuits"

    def test_action_round_trip(self, client, shop):
        response = _post(client, "/v1/actions", {
            "action": "ADD_TO_CART",
            "data": {"items": [{"name": "bread", "quantity": 2}]},
        })
        assert response.status_code == 200
        body = response.json()
        assert body["data"]["result"]["applied"] is True
        assert body["data"]["state"]["cart"] == [
            {"name": "Bread", "quantity": 2, "price": "40"},
        ]

        response = _post(client, "/v1/actions", {"kind": "CHECKOUT"})
        sale = response.json()["data"]["result"]["sale"]
        assert sale["total_amount"] == "80"
        assert shop.service.snapshot().find_item("7").quantity == 3

    def test_malformed_action_is_200_unapplied(self, client, shop):
        response = _post(client, "/v1/actions", "RESTOCK everything")
        assert response.status_code == 200
        result = response.json()["data"]["result"]
        assert result["applied"] is False
        assert result["reason"] == "MALFORMED_ACTION"

    def test_bill_preview(self, client, shop):
        response = _post(client, "/v1/bill/preview", {
            "items": [{"name": "Tata Salt", "quantity": 2}],
        })
        assert response.status_code == 200
        assert response.json()["data"]["total_amount"] == "50"

    def test_insights(self, client, shop):
        response = client.get("/v1/insights")
        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["generated_at"] == NOW.isoformat()
        names = [i["name"] for i in body["data"]["restock_needed"]]
        assert names == ["Maggi Noodles", "Red Label Tea", "Amul Milk", "Bread"]


class TestTransportErrors:
    def test_invalid_json_is_400(self, client, shop):
        response = client.post(
            "/v1/actions", data="{not json", content_type="application/json",
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_JSON"

    def test_empty_body_is_unknown_kind(self, client, shop):
        response = client.post("/v1/actions", data="", content_type="application/json")
        assert response.status_code == 200
        assert response.json()["data"]["result"]["reason"] == "UNKNOWN_KIND"

    @pytest.mark.parametrize("method,url", [
        ("get", "/v1/actions"),
        ("get", "/v1/bill/preview"),
        ("post", "/v1/state"),
        ("delete", "/v1/insights"),
    ])
    def test_wrong_method_is_405(self, client, shop, method, url):
        response = getattr(client, method)(url)
        assert response.status_code == 405
        assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


# ══════════════════════════════════════════════════════════════
# WIRING
# ══════════════════════════════════════════════════════════════


class TestWiring:
    def test_demo_inventory_expiry_offsets(self):
        today = date(2026, 3, 1)
        items = demo_inventory(today)
        assert [i.item_id for i in items] == ["1", "2", "3", "4", "5", "6", "7"]
        assert items[5].name == "Amul Milk"
        assert (items[5].expiry_date - today).days == 1

    def test_build_dependencies_is_singleton(self, settings):
        settings.KIRANA_SEED_DEMO = False
        settings.KIRANA_QUICK_RESTOCK_UNITS = "5"
        reset_dependencies()
        try:
            first = build_dependencies()
            assert build_dependencies() is first
            assert first.settings.quick_restock_units == 5
            assert first.service.snapshot().inventory == ()
        finally:
            reset_dependencies()
