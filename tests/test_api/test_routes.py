"""Tests for the HTTP API."""

from datetime import datetime, timezone
from typing import Callable

import pytest
from httpx import ASGITransport, AsyncClient

from kitchen_ops.main import create_app
from kitchen_ops.models.inventory import StockSnapshot
from kitchen_ops.models.order import Order, OrderStatus
from kitchen_ops.services.container import ServiceContainer
from kitchen_ops.state import PersistenceError

API = "/api/v1"

CHAMP_ORDER = {
    "customerName": "Thandi",
    "platform": "Uber Eats",
    "pizzas": [{"pizzaType": "THE CHAMP", "quantity": 2}],
}


@pytest.mark.asyncio
async def test_health(test_client: AsyncClient) -> None:
    response = await test_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "kitchen-ops"}


@pytest.mark.asyncio
async def test_services_not_running() -> None:
    app = create_app()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get(f"{API}/inventory")

    assert response.status_code == 503


# Inventory


@pytest.mark.asyncio
async def test_get_inventory(test_client: AsyncClient) -> None:
    response = await test_client.get(f"{API}/inventory")

    assert response.status_code == 200
    assert response.json()["shredded_mozzarella"]["amount"] == 500


@pytest.mark.asyncio
async def test_adjust_inventory(test_client: AsyncClient) -> None:
    response = await test_client.put(
        f"{API}/inventory/pepperoni", json={"quantity": 1500, "operation": "add"}
    )

    assert response.status_code == 200
    assert response.json()["amount"] == 1500

    inventory = (await test_client.get(f"{API}/inventory")).json()
    assert inventory["pepperoni"]["amount"] == 1500


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [{"quantity": -1}, {"quantity": 5, "operation": "divide"}],
)
async def test_adjust_inventory_rejects_bad_input(test_client: AsyncClient, body: dict) -> None:
    response = await test_client.put(f"{API}/inventory/pepperoni", json=body)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_usage(test_client: AsyncClient) -> None:
    response = await test_client.post(f"{API}/inventory/usage", json={"orders": [CHAMP_ORDER]})

    assert response.status_code == 200
    assert response.json()["shredded_mozzarella"]["used"] == 188


@pytest.mark.asyncio
async def test_deduction_preview_saves_nothing(test_client: AsyncClient) -> None:
    response = await test_client.post(
        f"{API}/inventory/deduction-preview", json={"orders": [CHAMP_ORDER]}
    )

    preview = response.json()
    assert preview["updated_snapshot"]["shredded_mozzarella"]["amount"] == 312
    assert preview["changes"][0]["name"] == "shredded_mozzarella"
    assert {alert["ingredient"] for alert in preview["alerts"]} >= {"pepperoni", "parmesan"}

    inventory = (await test_client.get(f"{API}/inventory")).json()
    assert inventory["shredded_mozzarella"]["amount"] == 500


@pytest.mark.asyncio
async def test_end_of_day_with_explicit_orders(test_client: AsyncClient) -> None:
    order = {
        **CHAMP_ORDER,
        "pizzas": [{"pizzaType": "THE CHAMP", "quantity": 2}, {"pizzaType": "Margherita"}],
    }

    response = await test_client.post(f"{API}/inventory/end-of-day", json={"orders": [order]})

    assert response.status_code == 200
    assert response.json()["success"]
    inventory = (await test_client.get(f"{API}/inventory")).json()
    assert inventory["shredded_mozzarella"]["amount"] == 218


@pytest.mark.asyncio
async def test_end_of_day_uses_cooked_active_orders(
    test_client: AsyncClient,
    container: ServiceContainer,
    make_order: Callable[..., Order],
) -> None:
    await container.orders.save(make_order(("MARGIE", 1), status=OrderStatus.READY))
    await container.orders.save(make_order(("MARGIE", 1)))

    response = await test_client.post(f"{API}/inventory/end-of-day", json={})

    assert response.json()["orders_processed"] == 1
    inventory = (await test_client.get(f"{API}/inventory")).json()
    assert inventory["shredded_mozzarella"]["amount"] == 406


@pytest.mark.asyncio
async def test_end_of_day_retry_does_not_deduct_twice(
    test_client: AsyncClient,
    container: ServiceContainer,
    make_order: Callable[..., Order],
) -> None:
    await container.orders.save(make_order(("MARGIE", 1), status=OrderStatus.READY))

    first = await test_client.post(f"{API}/inventory/end-of-day", json={})
    second = await test_client.post(f"{API}/inventory/end-of-day", json={})

    assert first.json()["orders_processed"] == 1
    assert second.status_code == 200
    assert second.json()["orders_processed"] == 0
    assert second.json()["orders_skipped"] == 1
    inventory = (await test_client.get(f"{API}/inventory")).json()
    assert inventory["shredded_mozzarella"]["amount"] == 406


@pytest.mark.asyncio
async def test_alerts_and_notification(test_client: AsyncClient) -> None:
    alerts = (await test_client.get(f"{API}/inventory/alerts")).json()
    notification = (await test_client.get(f"{API}/inventory/notification")).json()

    assert [alert["ingredient"] for alert in alerts] == ["pepperoni", "fresh_basil"]
    assert notification["critical_count"] == 1
    assert notification["message"].startswith("Daily Inventory Update:")


@pytest.mark.asyncio
async def test_daily_report(test_client: AsyncClient, container: ServiceContainer) -> None:
    response = await test_client.get(f"{API}/inventory/daily-report")

    assert response.status_code == 200
    assert response.json()["efficiency_score"] == 70
    assert await container.notifications.recent() == []


@pytest.mark.asyncio
async def test_scheduled_report_still_due_after_reading_it(
    test_client: AsyncClient, container: ServiceContainer
) -> None:
    await test_client.get(f"{API}/inventory/daily-report")

    late = datetime.now(timezone.utc).replace(hour=23, minute=0, second=0, microsecond=0)
    report = await container.end_of_day.report_if_due([], now=late)

    assert report is not None
    assert len(await container.notifications.recent()) == 1


@pytest.mark.asyncio
async def test_send_daily_report(test_client: AsyncClient, container: ServiceContainer) -> None:
    response = await test_client.post(f"{API}/inventory/daily-report/send")

    assert response.status_code == 200
    entries = await container.notifications.recent()
    assert len(entries) == 1
    assert entries[0].recipient == container.settings.manager_email


# Queue and orders


@pytest.mark.asyncio
async def test_window_order_is_quoted_and_tracked(
    test_client: AsyncClient, container: ServiceContainer
) -> None:
    response = await test_client.post(
        f"{API}/orders",
        json={
            "customer_name": "Sam",
            "platform": "Window",
            "pizzas": [{"pizza_type": "MARGIE", "quantity": 4}],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["window_estimate"]["estimated_prep_time"] == 20
    assert body["window_estimate"]["your_pizzas"] == 4
    assert body["order"]["id"] in container.queue.tracked

    queue = (await test_client.get(f"{API}/queue")).json()
    assert queue["total_pizzas_in_queue"] == 4
    assert queue["window_orders_tracked"] == 1


@pytest.mark.asyncio
async def test_delivery_order_is_not_tracked(
    test_client: AsyncClient, container: ServiceContainer
) -> None:
    response = await test_client.post(f"{API}/orders", json=CHAMP_ORDER)

    assert response.status_code == 201
    assert response.json()["window_estimate"] is None
    assert container.queue.tracked == {}


@pytest.mark.asyncio
async def test_duplicate_order_rejected(test_client: AsyncClient) -> None:
    order = {**CHAMP_ORDER, "id": "order-1"}

    assert (await test_client.post(f"{API}/orders", json=order)).status_code == 201
    assert (await test_client.post(f"{API}/orders", json=order)).status_code == 400


@pytest.mark.asyncio
async def test_queue_estimates(test_client: AsyncClient) -> None:
    await test_client.post(f"{API}/orders", json={**CHAMP_ORDER, "id": "a"})

    estimate = (await test_client.get(f"{API}/queue/estimate", params={"extra_pizzas": 2})).json()
    assert estimate == {"estimated_prep_time": 20, "pizzas_in_queue": 2}

    position = (await test_client.get(f"{API}/queue/orders/a")).json()
    assert position["position"] == 1
    assert position["pizzas_ahead"] == 0

    window = await test_client.get(f"{API}/queue/window-estimate", params={"pizzas": 1})
    assert window.json()["current_queue"] == 2

    assert (await test_client.get(f"{API}/queue/orders/nope")).status_code == 404
    assert (
        await test_client.get(f"{API}/queue/estimate", params={"extra_pizzas": -1})
    ).status_code == 400
    assert (
        await test_client.get(f"{API}/queue/window-estimate", params={"pizzas": -1})
    ).status_code == 400


@pytest.mark.asyncio
async def test_order_progress_and_archive(test_client: AsyncClient) -> None:
    await test_client.post(f"{API}/orders", json={**CHAMP_ORDER, "id": "b"})

    cooked = await test_client.post(f"{API}/orders/b/pizzas/0/cooked", json={"cooked": True})
    assert cooked.json()["status"] == "ready"
    assert (await test_client.post(f"{API}/orders/b/pizzas/5/cooked")).status_code == 400

    # Ready orders are not archivable yet
    assert (await test_client.post(f"{API}/orders/b/archive")).status_code == 400

    patched = await test_client.patch(
        f"{API}/orders/b",
        json={"update": {"kind": "set_status", "status": "delivered"}},
    )
    assert patched.json()["status"] == "delivered"

    archived = await test_client.post(f"{API}/orders/b/archive")
    assert archived.status_code == 200
    assert (await test_client.get(f"{API}/orders")).json() == []
    archive = await test_client.get(f"{API}/orders", params={"archived": True})
    assert [o["id"] for o in archive.json()] == ["b"]
    assert (await test_client.get(f"{API}/orders/b")).json()["status"] == "delivered"


@pytest.mark.asyncio
async def test_patch_protected_field(test_client: AsyncClient) -> None:
    await test_client.post(f"{API}/orders", json={**CHAMP_ORDER, "id": "c"})

    response = await test_client.patch(
        f"{API}/orders/c",
        json={"update": {"kind": "patch_fields", "fields": {"id": "d"}}},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_order(test_client: AsyncClient) -> None:
    assert (await test_client.get(f"{API}/orders/nope")).status_code == 404
    assert (
        await test_client.patch(
            f"{API}/orders/nope", json={"update": {"kind": "set_completion", "completed": True}}
        )
    ).status_code == 404


# Waste


@pytest.mark.asyncio
async def test_waste_pizzas_then_end_of_day(
    test_client: AsyncClient,
    container: ServiceContainer,
    make_order: Callable[..., Order],
) -> None:
    order = make_order(("THE CHAMP", 1), ("MARGIE", 1), status=OrderStatus.READY)
    await container.orders.save(order)

    response = await test_client.post(
        f"{API}/orders/{order.id}/pizzas/waste",
        json={"indexes": [1], "reason": "Burnt", "wasted_by": "Alex"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["record"]["waste_type"] == "partial_pizzas"
    assert body["record"]["wasted_by"] == "Alex"
    assert [p["pizza_type"] for p in body["remaining_order"]["pizzas"]] == ["THE CHAMP"]

    # The kept Champ and the wasted Margie both come off stock, once
    await test_client.post(f"{API}/inventory/end-of-day", json={})
    retry = await test_client.post(f"{API}/inventory/end-of-day", json={})
    assert retry.json()["waste_records_processed"] == 0
    inventory = (await test_client.get(f"{API}/inventory")).json()
    assert inventory["shredded_mozzarella"]["amount"] == 500 - 94 - 94


@pytest.mark.asyncio
async def test_waste_whole_order(test_client: AsyncClient, container: ServiceContainer) -> None:
    created = (await test_client.post(f"{API}/orders", json=CHAMP_ORDER)).json()["order"]

    response = await test_client.post(
        f"{API}/orders/{created['id']}/waste", json={"reason": "Customer cancelled"}
    )

    assert response.status_code == 200
    assert response.json()["remaining_order"] is None
    assert await container.orders.list_active() == []

    records = (await test_client.get(f"{API}/waste")).json()
    assert [r["original_order_id"] for r in records] == [created["id"]]

    analytics = (await test_client.get(f"{API}/waste/analytics", params={"period": "all"})).json()
    assert analytics["total_wasted_items"] == 1
    assert analytics["waste_by_reason"]["Customer cancelled"]["count"] == 1


@pytest.mark.asyncio
async def test_waste_rejects_bad_requests(
    test_client: AsyncClient,
    container: ServiceContainer,
    make_order: Callable[..., Order],
) -> None:
    order = make_order(("MARGIE", 1))
    await container.orders.save(order)

    missing = await test_client.post(f"{API}/orders/nope/waste", json={"reason": "Burnt"})
    no_reason = await test_client.post(f"{API}/orders/{order.id}/waste", json={"reason": " "})
    none_selected = await test_client.post(
        f"{API}/orders/{order.id}/pizzas/waste", json={"indexes": [], "reason": "Burnt"}
    )
    out_of_range = await test_client.post(
        f"{API}/orders/{order.id}/pizzas/waste", json={"indexes": [3], "reason": "Burnt"}
    )
    bad_period = await test_client.get(f"{API}/waste/analytics", params={"period": "year"})

    assert missing.status_code == 404
    assert no_reason.status_code == 422
    assert none_selected.status_code == 400
    assert out_of_range.status_code == 400
    assert bad_period.status_code == 422


# Kitchen settings


@pytest.mark.asyncio
async def test_kitchen_settings(test_client: AsyncClient) -> None:
    settings = (await test_client.get(f"{API}/kitchen/settings")).json()
    assert settings["batch_capacity"] == 3

    updated = await test_client.patch(f"{API}/kitchen/settings", json={"batch_capacity": 99})
    assert updated.json()["batch_capacity"] == 10

    unknown = await test_client.patch(f"{API}/kitchen/settings", json={"ovens": 2})
    assert unknown.status_code == 400


@pytest.mark.asyncio
async def test_presets(test_client: AsyncClient) -> None:
    presets = (await test_client.get(f"{API}/kitchen/settings/presets")).json()
    assert set(presets) == {"minimal", "normal", "busy", "rush"}

    applied = await test_client.post(f"{API}/kitchen/settings/presets/minimal")
    assert applied.json()["batch_capacity"] == 2

    assert (await test_client.post(f"{API}/kitchen/settings/presets/party")).status_code == 404


# Storage failures


class BrokenStock:
    """Stock repository whose backend is down."""

    async def load(self) -> StockSnapshot:
        raise PersistenceError("stock.load")


@pytest.mark.asyncio
async def test_storage_failure_is_503(
    test_client: AsyncClient, container: ServiceContainer
) -> None:
    container.stock = BrokenStock()

    response = await test_client.get(f"{API}/inventory")

    assert response.status_code == 503
    assert response.json() == {"detail": "Storage backend unavailable"}
