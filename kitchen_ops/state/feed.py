"""Push feed of full replacement snapshots."""

from typing import Callable, Generic, TypeVar

from kitchen_ops.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SnapshotFeed(Generic[T]):
    """Delivers the latest snapshot to every subscriber.

    A new subscriber receives the current snapshot straight away when one
    has been published. Unsubscribing is the only way to stop delivery.
    """

    def __init__(self, name: str):
        self.name = name
        self._subscribers: list[Callable[[T], object]] = []
        self._latest: T | None = None
        self._has_value = False

    @property
    def latest(self) -> T | None:
        return self._latest

    def subscribe(self, callback: Callable[[T], object]) -> Callable[[], None]:
        """Register a callback and return its unsubscribe function."""
        self._subscribers.append(callback)
        logger.debug("feed_subscribed", feed=self.name, subscribers=len(self._subscribers))
        if self._has_value:
            self._deliver(callback, self._latest)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
                logger.debug("feed_unsubscribed", feed=self.name)

        return unsubscribe

    def publish(self, snapshot: T) -> None:
        """Replace the current snapshot and push it to subscribers."""
        self._latest = snapshot
        self._has_value = True
        for callback in list(self._subscribers):
            self._deliver(callback, snapshot)

    def _deliver(self, callback: Callable[[T], object], snapshot: T) -> None:
        try:
            callback(snapshot)
        except Exception as e:
            logger.error("feed_callback_failed", feed=self.name, error=str(e))
