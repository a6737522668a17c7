"""
BaseService -- common constructor for kernel components.

Responsibility:
    Every kernel component receives the StorageHandle and a Clock through
    its constructor.  Each public operation opens exactly one atomic unit
    with ``self.storage.atomic(...)`` and returns DTOs built inside it.

Invariants enforced:
    - No component keeps rows, counters or locks between calls; the
      storage handle reference is the only shared state.
    - No component reaches into ambient request state; tenant and plan
      arrive as an explicit TenantContext argument.
"""

from abc import ABC

from inventory_kernel.db.engine import StorageHandle
from inventory_kernel.domain.clock import Clock, SystemClock


class BaseService(ABC):
    """Abstract base class for kernel components."""

    def __init__(self, storage: StorageHandle, clock: Clock | None = None):
        self.storage = storage
        self.clock = clock or SystemClock()
