"""Structured logging configuration."""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from kitchen_ops.config import get_settings


def setup_logging() -> None:
    """Configure structured logging for the application."""
    settings = get_settings()

    log_level = getattr(logging, settings.log_level)

    if settings.log_format == "json":
        # JSON logging for production
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
        handler.setFormatter(formatter)
    else:
        # Human-readable logging for development
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class StockLogger:
    """Logger for stock movements, keyed by the operation that caused them."""

    def __init__(self, operation: str):
        self.operation = operation
        self.logger = get_logger(f"stock.{operation}")

    def log_movement(
        self,
        ingredient: str,
        before: float,
        after: float,
        unit: str,
        **kwargs: Any,
    ) -> None:
        """Log a single ingredient amount change."""
        self.logger.info(
            "stock_movement",
            operation=self.operation,
            ingredient=ingredient,
            before=before,
            after=after,
            delta=after - before,
            unit=unit,
            **kwargs,
        )

    def log_created(self, ingredient: str, unit: str, threshold: float) -> None:
        """Log an ingredient that was used but not tracked yet."""
        self.logger.warning(
            "stock_entry_created",
            operation=self.operation,
            ingredient=ingredient,
            unit=unit,
            threshold=threshold,
        )

    def log_batch(self, ingredients_updated: int, **kwargs: Any) -> None:
        """Log the summary of a batch of movements."""
        self.logger.info(
            "stock_batch_applied",
            operation=self.operation,
            ingredients_updated=ingredients_updated,
            **kwargs,
        )
