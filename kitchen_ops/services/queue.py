"""Kitchen queue depth and prep-time estimates."""

import math
from datetime import datetime, timedelta
from typing import Any, Callable, Protocol

from kitchen_ops.catalog import RecipeCatalog, default_catalog
from kitchen_ops.models.kitchen import (
    PRESETS,
    DelayedOrder,
    HistoricalPatterns,
    KitchenSettings,
    OrderEstimate,
    Prediction,
    QueueOverview,
    RushInfo,
    TimeSlot,
    TrackedWindowOrder,
    WindowEstimate,
)
from kitchen_ops.models.order import Order
from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_DELAY_THRESHOLD = 15

# Share of next hour's expected pizzas counted as already queued
HIGH_CONFIDENCE_SHARE = 0.3
LOW_CONFIDENCE_SHARE = 0.1

QueueCallback = Callable[[QueueOverview], Any]
Unsubscribe = Callable[[], None]


class OrderSource(Protocol):
    """Anything that pushes the full active order list to a callback."""

    def subscribe(self, callback: Callable[[list[Order]], Any]) -> Unsubscribe: ...


class SettingsStore(Protocol):
    """Persistence for kitchen settings and historical patterns."""

    async def load(self) -> KitchenSettings | None: ...

    async def save(self, settings: KitchenSettings) -> None: ...

    async def load_patterns(self) -> HistoricalPatterns | None: ...


def round_half_up(value: float) -> int:
    """Round .5 away from zero for the non-negative values used here."""
    return math.floor(value + 0.5)


def local_now() -> datetime:
    """Wall-clock time in the server's timezone."""
    return datetime.now().astimezone()


class QueueEstimator:
    """Estimates kitchen wait times from the live order list.

    The estimator only knows the orders its source last pushed. Call
    `start()` to load settings and begin receiving orders, and `stop()` to
    detach. Subscribers get a fresh `QueueOverview` whenever orders or
    settings change.
    """

    def __init__(
        self,
        order_source: OrderSource,
        settings_repository: SettingsStore,
        patterns: HistoricalPatterns | None = None,
        clock: Callable[[], datetime] = local_now,
        catalog: RecipeCatalog | None = None,
        default_settings: KitchenSettings | None = None,
        delay_threshold: int = DEFAULT_DELAY_THRESHOLD,
    ):
        self.order_source = order_source
        self.settings_repository = settings_repository
        self.patterns = patterns or HistoricalPatterns.default()
        self.clock = clock
        self.catalog = catalog or default_catalog()
        self.settings = default_settings or KitchenSettings()
        self.delay_threshold = delay_threshold

        self.orders: list[Order] = []
        self.tracked: dict[str, TrackedWindowOrder] = {}
        # Result of the delay check on the latest order push
        self.delayed_orders: list[DelayedOrder] = []
        self._subscribers: list[QueueCallback] = []
        self._unsubscribe_orders: Unsubscribe | None = None

    # Lifecycle

    @property
    def started(self) -> bool:
        return self._unsubscribe_orders is not None

    async def start(self) -> None:
        """Load persisted settings and patterns, then follow the order feed."""
        if self.started:
            return

        saved = await self.settings_repository.load()
        if saved is not None:
            self.settings = saved
        patterns = await self.settings_repository.load_patterns()
        if patterns is not None:
            self.patterns = patterns

        self._unsubscribe_orders = self.order_source.subscribe(self._on_orders)
        logger.info(
            "queue_estimator_started",
            base_prep_minutes=self.settings.base_prep_minutes,
            batch_capacity=self.settings.batch_capacity,
        )

    def stop(self) -> None:
        """Detach from the order feed and drop all subscribers."""
        if self._unsubscribe_orders is not None:
            self._unsubscribe_orders()
            self._unsubscribe_orders = None
        self._subscribers.clear()
        logger.info("queue_estimator_stopped")

    def _on_orders(self, orders: list[Order]) -> None:
        self.orders = list(orders or [])
        self.delayed_orders = self.check_for_delayed_orders()
        logger.debug("queue_orders_updated", count=len(self.orders))
        self._notify()

    # Subscriptions

    def subscribe(self, callback: QueueCallback) -> Unsubscribe:
        """Register for overview updates.

        When the estimator is running the callback fires straight away with
        the current overview.
        """
        self._subscribers.append(callback)
        if self.started:
            self._deliver(callback, self.overview())

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _deliver(self, callback: QueueCallback, overview: QueueOverview) -> None:
        try:
            callback(overview)
        except Exception as e:
            logger.error("queue_subscriber_failed", error=str(e))

    def _notify(self) -> None:
        if not self._subscribers:
            return
        overview = self.overview()
        for callback in list(self._subscribers):
            self._deliver(callback, overview)

    # Queue depth

    def active_orders(self) -> list[Order]:
        """Orders still waiting on the kitchen."""
        return [order for order in self.orders if order.is_active]

    def _uncooked_pizzas(self, order: Order) -> int:
        total = 0
        for line in order.uncooked_lines():
            if line.quantity <= 0:
                continue
            recipe = self.catalog.lookup(line.pizza_type)
            if self.catalog.is_non_pizza(line.pizza_type, recipe):
                continue
            total += line.quantity
        return total

    def pizzas_in_queue(self) -> int:
        """Uncooked pizzas across active orders, sides excluded."""
        return sum(self._uncooked_pizzas(order) for order in self.active_orders())

    # Predictions

    def time_slot(self) -> TimeSlot:
        """Where the clock currently sits in the trading week."""
        now = self.clock()
        pattern = self.patterns.hourly_patterns.get(now.hour)
        return TimeSlot(
            hour=now.hour,
            is_friday=now.weekday() == 4,
            is_weekend=now.weekday() in (5, 6),
            is_rush_period=bool(pattern and pattern.rush_period),
        )

    def predict_next_hour(self) -> Prediction:
        """Expected demand for the current hour from historical patterns."""
        slot = self.time_slot()
        pattern = self.patterns.hourly_patterns.get(slot.hour)
        if pattern is None:
            return Prediction(hour=slot.hour, confidence="low")

        multiplier = 1.0
        if slot.is_friday:
            multiplier = self.patterns.friday_multiplier
        elif slot.is_weekend:
            multiplier = self.patterns.weekend_multiplier

        return Prediction(
            expected_orders=round_half_up(pattern.avg_orders * multiplier),
            expected_pizzas=round_half_up(pattern.avg_pizzas * multiplier),
            confidence="high",
            hour=slot.hour,
            is_rush_period=slot.is_rush_period,
        )

    # Estimates

    def estimate_prep_time(self, extra_pizzas: int = 0) -> int:
        """Minutes until a new order of `extra_pizzas` would be ready."""
        settings = self.settings
        queued = self.pizzas_in_queue() + extra_pizzas
        if queued <= 0:
            return settings.base_prep_minutes

        predicted = 0
        if settings.predictive_enabled:
            prediction = self.predict_next_hour()
            share = (
                HIGH_CONFIDENCE_SHARE
                if prediction.confidence == "high"
                else LOW_CONFIDENCE_SHARE
            )
            predicted = round_half_up(prediction.expected_pizzas * share)

        batches = math.ceil((queued + predicted) / settings.batch_capacity)
        minutes = float(batches * settings.base_prep_minutes)

        if settings.predictive_enabled and self.time_slot().is_rush_period:
            minutes *= settings.rush_hour_multiplier
        if settings.rush_mode_enabled:
            minutes *= settings.rush_multiplier

        return round_half_up(minutes)

    def _find(self, order_id: str) -> Order | None:
        return next((order for order in self.orders if order.id == order_id), None)

    def position_estimate(self, order_id: str) -> OrderEstimate | None:
        """Queue position of an existing order, or None if it is unknown."""
        order = self._find(order_id)
        if order is None:
            return None

        active = self.active_orders()
        pizzas_ahead = sum(
            self._uncooked_pizzas(other)
            for other in active
            if other.id != order.id and other.created_at < order.created_at
        )
        position = sum(1 for other in active if other.created_at <= order.created_at)

        return OrderEstimate(
            order_id=order.id,
            pizzas_ahead=pizzas_ahead,
            position=position,
            estimated_prep_time=self.estimate_prep_time(0),
        )

    def window_estimate(self, order_pizzas: int = 1) -> WindowEstimate:
        """Estimate and breakdown to quote a walk-in customer."""
        if order_pizzas < 0:
            raise ValueError("order_pizzas cannot be negative")
        slot = self.time_slot()
        prediction = self.predict_next_hour()
        return WindowEstimate(
            estimated_prep_time=self.estimate_prep_time(order_pizzas),
            current_queue=self.pizzas_in_queue(),
            your_pizzas=order_pizzas,
            expected_incoming_pizzas=prediction.expected_pizzas,
            is_rush_period=slot.is_rush_period,
            is_friday_rush=slot.is_friday and self.settings.rush_mode_enabled,
            confidence=prediction.confidence,
            time_slot=slot.label,
        )

    # Window order delay tracking

    def track_window_order(
        self,
        order_id: str,
        customer_name: str | None,
        estimate: int,
    ) -> TrackedWindowOrder:
        """Remember the estimate a walk-in customer was quoted."""
        now = self.clock()
        tracked = TrackedWindowOrder(
            order_id=order_id,
            customer_name=customer_name,
            original_estimate=estimate,
            current_estimate=estimate,
            order_time=now,
            estimated_ready_time=now + timedelta(minutes=estimate),
        )
        self.tracked[order_id] = tracked
        logger.info("window_order_tracked", order_id=order_id, estimate=estimate)
        return tracked

    def delay_reason(self) -> str:
        """Most likely explanation for the kitchen running behind."""
        slot = self.time_slot()
        if slot.is_rush_period:
            return f"Rush period ({slot.label}) - higher than normal order volume"
        if slot.is_friday and self.settings.rush_mode_enabled:
            return "Friday rush mode - increased order volume"
        if self.pizzas_in_queue() > self.settings.batch_capacity * 3:
            return "High order volume - kitchen at capacity"
        return "Unexpected order volume increase"

    def check_for_delayed_orders(self) -> list[DelayedOrder]:
        """Tracked orders whose estimate grew by at least the delay threshold.

        Each delay level is reported once per order. Orders that are gone or
        no longer active stop being tracked.
        Runs on every order push; `overview()` reports the stored result.
        """
        delayed = []
        for order_id, tracked in list(self.tracked.items()):
            order = self._find(order_id)
            if order is None or not order.is_active:
                del self.tracked[order_id]
                continue

            estimate = self.position_estimate(order_id)
            delay = estimate.estimated_prep_time - tracked.original_estimate
            if delay < self.delay_threshold:
                continue

            key = f"delay_{delay}"
            if key in tracked.notifications_sent:
                continue

            tracked.notifications_sent.append(key)
            tracked.current_estimate = estimate.estimated_prep_time
            delayed.append(
                DelayedOrder(
                    order_id=order_id,
                    customer_name=tracked.customer_name,
                    original_estimate=tracked.original_estimate,
                    new_estimate=estimate.estimated_prep_time,
                    delay_minutes=delay,
                    order_time=tracked.order_time,
                    reason=self.delay_reason(),
                )
            )
            logger.warning(
                "window_order_delayed",
                order_id=order_id,
                delay_minutes=delay,
            )
        return delayed

    def overview(self) -> QueueOverview:
        """Snapshot of the queue for the kitchen display.

        Reading it has no side effects, so every subscriber sees the same
        delayed orders until the next order push.
        """
        slot = self.time_slot()
        prediction = self.predict_next_hour()
        return QueueOverview(
            total_pizzas_in_queue=self.pizzas_in_queue(),
            active_orders_count=len(self.active_orders()),
            estimated_wait_time=self.estimate_prep_time(),
            settings=self.settings.model_copy(),
            rush_info=RushInfo(
                is_rush_period=slot.is_rush_period,
                is_friday_rush=slot.is_friday and self.settings.rush_mode_enabled,
                time_slot=slot.label,
                expected_orders=prediction.expected_orders,
                expected_pizzas=prediction.expected_pizzas,
                confidence=prediction.confidence,
            ),
            delayed_orders=list(self.delayed_orders),
            window_orders_tracked=len(self.tracked),
            last_updated=self.clock(),
        )

    # Settings

    async def update_settings(self, changes: dict[str, Any]) -> KitchenSettings:
        """Merge, clamp and persist settings changes, then notify subscribers."""
        self.settings = self.settings.merged(changes)
        await self.settings_repository.save(self.settings)
        logger.info("kitchen_settings_updated", changes=sorted(changes))
        self._notify()
        return self.settings

    async def apply_preset(self, name: str) -> KitchenSettings:
        """Switch to a staffing preset.

        Raises:
            KeyError: unknown preset name
        """
        if name not in PRESETS:
            raise KeyError(name)
        preset = PRESETS[name]
        return await self.update_settings(
            preset.model_dump(include={"base_prep_minutes", "batch_capacity", "rush_mode_enabled"})
        )
