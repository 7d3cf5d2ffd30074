"""API routes for inventory, the kitchen queue and orders."""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from kitchen_ops.models.inventory import (
    Alert,
    StockAdjustment,
    StockEntry,
    UsageEntry,
)
from kitchen_ops.models.kitchen import (
    PRESETS,
    KitchenSettings,
    OrderEstimate,
    QueueOverview,
    SettingsPreset,
    WindowEstimate,
)
from kitchen_ops.models.order import Order, OrderUpdate
from kitchen_ops.models.report import (
    DailyReport,
    EndOfDayResult,
    StockChange,
    StockNotification,
)
from kitchen_ops.models.waste import WasteAnalytics, WasteRecord, WasteRequest, WasteResult
from kitchen_ops.services.alerts import alerts_for, stock_notification
from kitchen_ops.services.container import ServiceContainer
from kitchen_ops.services.deduction import adjust, deduct, diff
from kitchen_ops.services.orders import apply_update, is_archivable, mark_pizza_cooked
from kitchen_ops.services.usage import is_cooked
from kitchen_ops.services.waste import WastePeriod
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


# Request/Response Models


class OrdersRequest(BaseModel):
    """A batch of raw orders to calculate against."""

    orders: list[dict[str, Any]] = Field(default_factory=list)
    only_cooked: bool = False


class EndOfDayRequest(BaseModel):
    """Orders to deduct; the cooked active orders when omitted."""

    orders: list[dict[str, Any]] | None = None


class DeductionPreview(BaseModel):
    """What an end-of-day run would do, without saving anything."""

    usage: dict[str, UsageEntry]
    updated_snapshot: dict[str, StockEntry]
    changes: list[StockChange]
    alerts: list[Alert]


class PrepTimeResponse(BaseModel):
    estimated_prep_time: int
    pizzas_in_queue: int


class OrderUpdateRequest(BaseModel):
    """Tagged order update, e.g. {"update": {"kind": "set_status", "status": "ready"}}."""

    update: OrderUpdate


class CookedRequest(BaseModel):
    cooked: bool = True


class PizzaWasteRequest(WasteRequest):
    """Pizza lines to throw away, by position in the order."""

    indexes: list[int] = Field(default_factory=list)


class CreateOrderResponse(BaseModel):
    order: Order
    window_estimate: WindowEstimate | None = None


# Dependency to get the service container


def get_container(request: Request) -> ServiceContainer:
    """Services built at startup."""
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Services are not running",
        )
    return container


async def _get_order(container: ServiceContainer, order_id: str) -> Order:
    order = await container.orders.get(order_id)
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )
    return order


# Inventory


@router.get("/inventory", response_model=dict[str, StockEntry])
async def get_inventory(
    container: ServiceContainer = Depends(get_container),
) -> dict[str, StockEntry]:
    """Current stock levels."""
    return await container.stock.load()


@router.put("/inventory/{ingredient}", response_model=StockEntry)
async def adjust_inventory(
    ingredient: str,
    request: StockAdjustment,
    container: ServiceContainer = Depends(get_container),
) -> StockEntry:
    """
    Apply a manual stock change.

    Operations are set, add and subtract. Unknown ingredients are created.
    """
    snapshot = await container.stock.load()
    try:
        updated = adjust(
            snapshot,
            ingredient,
            request.quantity,
            request.operation,
            unit=request.unit,
            category=request.category,
            threshold=request.threshold,
            default_threshold=container.settings.default_low_stock_threshold,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await container.stock.save(updated)
    return updated[ingredient]


@router.post("/inventory/usage", response_model=dict[str, UsageEntry])
async def calculate_usage(
    request: OrdersRequest,
    container: ServiceContainer = Depends(get_container),
) -> dict[str, UsageEntry]:
    """Ingredient usage for a batch of orders."""
    return container.calculator.usage_for_orders(
        request.orders, only_cooked=request.only_cooked
    )


@router.post("/inventory/deduction-preview", response_model=DeductionPreview)
async def preview_deduction(
    request: OrdersRequest,
    container: ServiceContainer = Depends(get_container),
) -> DeductionPreview:
    """Show the effect of deducting a batch of orders without saving it."""
    snapshot = await container.stock.load()
    usage = container.calculator.usage_for_orders(
        request.orders, only_cooked=request.only_cooked
    )
    updated = deduct(
        usage, snapshot, default_threshold=container.settings.default_low_stock_threshold
    )
    return DeductionPreview(
        usage=usage,
        updated_snapshot=updated,
        changes=diff(snapshot, updated),
        alerts=alerts_for(updated),
    )


@router.post("/inventory/end-of-day", response_model=EndOfDayResult)
async def run_end_of_day(
    request: EndOfDayRequest = EndOfDayRequest(),
    container: ServiceContainer = Depends(get_container),
) -> EndOfDayResult:
    """
    Deduct the day's usage from stock.

    Without explicit orders, the cooked active orders are used. Orders
    taken off stock by an earlier run are skipped, so a retry is safe.
    """
    if request.orders is not None:
        orders: list[Any] = request.orders
    else:
        orders = [o for o in await container.orders.list_active() if is_cooked(o)]

    result = await container.end_of_day.run(orders)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=result.error or "End-of-day processing failed",
        )
    return result


@router.get("/inventory/alerts", response_model=list[Alert])
async def get_alerts(
    container: ServiceContainer = Depends(get_container),
) -> list[Alert]:
    """Low-stock alerts, most urgent first."""
    return alerts_for(await container.stock.load())


@router.get("/inventory/notification", response_model=StockNotification)
async def get_stock_notification(
    container: ServiceContainer = Depends(get_container),
) -> StockNotification:
    """Management summary of low stock."""
    return stock_notification(await container.stock.load())


async def _todays_orders(container: ServiceContainer) -> list[Order]:
    today = datetime.now(timezone.utc).date()
    candidates = await container.orders.list_active()
    candidates += await container.orders.list_archived(limit=500)
    return [o for o in candidates if o.created_at.astimezone(timezone.utc).date() == today]


@router.get("/inventory/daily-report", response_model=DailyReport)
async def get_daily_report(
    container: ServiceContainer = Depends(get_container),
) -> DailyReport:
    """
    Build today's stock report.

    Covers orders created today (UTC), active and archived. Reading the
    report does not mark it as sent.
    """
    return await container.end_of_day.daily_report(await _todays_orders(container))


@router.post("/inventory/daily-report/send", response_model=DailyReport)
async def send_daily_report(
    container: ServiceContainer = Depends(get_container),
) -> DailyReport:
    """Build today's report and record it in the notification log."""
    return await container.end_of_day.send_daily_report(await _todays_orders(container))


# Queue


@router.get("/queue", response_model=QueueOverview)
async def get_queue_overview(
    container: ServiceContainer = Depends(get_container),
) -> QueueOverview:
    """Queue totals, wait time and rush information."""
    return container.queue.overview()


@router.get("/queue/estimate", response_model=PrepTimeResponse)
async def get_prep_estimate(
    extra_pizzas: int = 0,
    container: ServiceContainer = Depends(get_container),
) -> PrepTimeResponse:
    """Minutes until an order of `extra_pizzas` would be ready."""
    if extra_pizzas < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="extra_pizzas cannot be negative",
        )
    return PrepTimeResponse(
        estimated_prep_time=container.queue.estimate_prep_time(extra_pizzas),
        pizzas_in_queue=container.queue.pizzas_in_queue(),
    )


@router.get("/queue/orders/{order_id}", response_model=OrderEstimate)
async def get_order_position(
    order_id: str,
    container: ServiceContainer = Depends(get_container),
) -> OrderEstimate:
    """Where an order sits in the queue."""
    estimate = container.queue.position_estimate(order_id)
    if estimate is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not in queue",
        )
    return estimate


@router.get("/queue/window-estimate", response_model=WindowEstimate)
async def get_window_estimate(
    pizzas: int = 1,
    container: ServiceContainer = Depends(get_container),
) -> WindowEstimate:
    """Estimate to quote a walk-in customer."""
    try:
        return container.queue.window_estimate(pizzas)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


# Orders


@router.post(
    "/orders",
    response_model=CreateOrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_order(
    order: Order,
    container: ServiceContainer = Depends(get_container),
) -> CreateOrderResponse:
    """
    Add an order to the kitchen queue.

    Walk-in (Window) orders are quoted an estimate and tracked for delays.
    """
    existing = await container.orders.get(order.id)
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order already exists",
        )

    window = None
    if order.platform.lower() == "window":
        pizzas = sum(max(line.quantity, 0) for line in order.pizzas)
        window = container.queue.window_estimate(pizzas)

    await container.orders.save(order)

    if window is not None:
        container.queue.track_window_order(
            order.id, order.customer_name, window.estimated_prep_time
        )

    logger.info(
        "order_created",
        order_id=order.id,
        platform=order.platform,
        pizzas=len(order.pizzas),
    )
    return CreateOrderResponse(order=order, window_estimate=window)


@router.get("/orders", response_model=list[Order])
async def list_orders(
    archived: bool = False,
    limit: int = 100,
    container: ServiceContainer = Depends(get_container),
) -> list[Order]:
    """Active orders oldest first, or archived orders newest first."""
    if archived:
        return await container.orders.list_archived(limit=limit)
    return await container.orders.list_active()


@router.get("/orders/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    container: ServiceContainer = Depends(get_container),
) -> Order:
    return await _get_order(container, order_id)


@router.patch("/orders/{order_id}", response_model=Order)
async def update_order(
    order_id: str,
    request: OrderUpdateRequest,
    container: ServiceContainer = Depends(get_container),
) -> Order:
    """Apply a status change, completion toggle or field patch."""
    order = await _get_order(container, order_id)
    try:
        updated = apply_update(order, request.update)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await container.orders.save(updated)
    return updated


@router.post("/orders/{order_id}/pizzas/{index}/cooked", response_model=Order)
async def mark_cooked(
    order_id: str,
    index: int,
    request: CookedRequest = CookedRequest(),
    container: ServiceContainer = Depends(get_container),
) -> Order:
    """Tick off one pizza line on the kitchen display."""
    order = await _get_order(container, order_id)
    try:
        updated = mark_pizza_cooked(order, index, request.cooked)
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    await container.orders.save(updated)
    return updated


@router.post("/orders/{order_id}/archive", response_model=Order)
async def archive_order(
    order_id: str,
    container: ServiceContainer = Depends(get_container),
) -> Order:
    """Move a completed or delivered order out of the active list."""
    order = await _get_order(container, order_id)
    if not is_archivable(order):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Only completed or delivered orders can be archived (status: {order.status.value})",
        )
    try:
        return await container.orders.archive(order_id)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order is not active",
        )


# Waste


@router.post("/orders/{order_id}/waste", response_model=WasteResult)
async def waste_order(
    order_id: str,
    request: WasteRequest,
    container: ServiceContainer = Depends(get_container),
) -> WasteResult:
    """Throw away a whole order and remove it from the queue."""
    try:
        return await container.waste_tracker.mark_order_wasted(order_id, request)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order is not active",
        )


@router.post("/orders/{order_id}/pizzas/waste", response_model=WasteResult)
async def waste_pizzas(
    order_id: str,
    request: PizzaWasteRequest,
    container: ServiceContainer = Depends(get_container),
) -> WasteResult:
    """
    Throw away some pizzas of an order.

    The rest of the order stays in the queue; an order with nothing left
    is removed.
    """
    waste = WasteRequest(
        reason=request.reason, details=request.details, wasted_by=request.wasted_by
    )
    try:
        return await container.waste_tracker.mark_pizzas_wasted(
            order_id, request.indexes, waste
        )
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order is not active",
        )
    except (ValueError, IndexError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/waste", response_model=list[WasteRecord])
async def list_waste(
    limit: int = 50,
    container: ServiceContainer = Depends(get_container),
) -> list[WasteRecord]:
    """Waste records, newest first."""
    return await container.waste.recent(limit=limit)


@router.get("/waste/analytics", response_model=WasteAnalytics)
async def get_waste_analytics(
    period: WastePeriod = "today",
    container: ServiceContainer = Depends(get_container),
) -> WasteAnalytics:
    """Waste totals by reason and by day for today, the week, the month or all time."""
    return await container.waste_tracker.analytics(period)


# Kitchen settings


@router.get("/kitchen/settings", response_model=KitchenSettings)
async def get_kitchen_settings(
    container: ServiceContainer = Depends(get_container),
) -> KitchenSettings:
    return container.queue.settings


@router.patch("/kitchen/settings", response_model=KitchenSettings)
async def update_kitchen_settings(
    changes: dict[str, Any],
    container: ServiceContainer = Depends(get_container),
) -> KitchenSettings:
    """Merge settings changes; out-of-range values are clamped."""
    unknown = set(changes) - set(KitchenSettings.model_fields)
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown settings: {', '.join(sorted(unknown))}",
        )
    try:
        return await container.queue.update_settings(changes)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/kitchen/settings/presets", response_model=dict[str, SettingsPreset])
async def list_presets() -> dict[str, SettingsPreset]:
    return PRESETS


@router.post("/kitchen/settings/presets/{name}", response_model=KitchenSettings)
async def apply_preset(
    name: str,
    container: ServiceContainer = Depends(get_container),
) -> KitchenSettings:
    """Switch to a staffing preset (minimal, normal, busy, rush)."""
    try:
        return await container.queue.apply_preset(name)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown preset '{name}'",
        )
