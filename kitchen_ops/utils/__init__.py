"""Utility modules."""

from kitchen_ops.utils.logging import StockLogger, get_logger, setup_logging

__all__ = ["setup_logging", "get_logger", "StockLogger"]
