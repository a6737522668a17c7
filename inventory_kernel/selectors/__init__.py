"""Selectors for the inventory kernel (read side)."""

from inventory_kernel.selectors.analytics_selector import AnalyticsSelector
from inventory_kernel.selectors.base import BaseSelector

__all__ = [
    "AnalyticsSelector",
    "BaseSelector",
]
