"""
inventory_services -- API boundary over the inventory kernel.

Resolves tenant and role from header values, gates roles, and returns
``{success, data|error, message}`` envelopes.
"""

from inventory_services.api import InventoryApi
from inventory_services.responses import ApiResponse

__all__ = [
    "ApiResponse",
    "InventoryApi",
]
