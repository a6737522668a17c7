"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

The boundary layer turns kernel failures into transport responses. It must
do that by TYPE and CODE, never by parsing message strings:

    try:
        ledger.create_transaction(ctx, material_id, "OUT", 50)
    except InsufficientStockError as e:
        respond(409, code=e.code, current=e.current_stock,
                requested=e.requested_quantity)

Every exception:
  1. Has a ``code`` class attribute (machine-readable, API-safe).
  2. Stores its context as attributes (survives logging and serialization).
  3. Has a message safe to show a caller (no SQL, no stack internals).

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- ValidationError
    |
    +-- NotFoundError
    |   +-- TenantNotFoundError
    |   +-- MaterialNotFoundError
    |
    +-- PlanError
    |   +-- QuotaExceededError
    |   +-- PlanRestrictedError
    |
    +-- StockError
    |   +-- InsufficientStockError
    |
    +-- ConcurrencyError
    |   +-- StorageConflictError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                   | When Raised
-------------|------------------------|----------------------------------------
Validation   | VALIDATION_ERROR       | Malformed or missing input field
-------------|------------------------|----------------------------------------
Not found    | TENANT_NOT_FOUND       | Tenant ID doesn't exist
             | MATERIAL_NOT_FOUND     | Material absent, soft-deleted, or owned
             |                        | by another tenant (never distinguished)
-------------|------------------------|----------------------------------------
Plan         | QUOTA_EXCEEDED         | FREE plan material limit reached
             | PLAN_RESTRICTED        | Feature requires a higher plan
-------------|------------------------|----------------------------------------
Stock        | INSUFFICIENT_STOCK     | OUT would drive stock below zero
-------------|------------------------|----------------------------------------
Concurrency  | STORAGE_CONFLICT       | Atomic unit could not commit (lock
             |                        | timeout, deadlock, serialization
             |                        | failure, lost connection) - retryable
-------------|------------------------|----------------------------------------
Immutability | IMMUTABILITY_VIOLATION | Update/delete of an append-only row

===============================================================================
HANDLING PATTERNS
===============================================================================

1. NotFound never leaks existence. A material owned by tenant B looked up
   by tenant A raises MaterialNotFoundError with exactly the same message
   as a material that never existed.

2. StorageConflictError is the only retryable kernel error. Retrying means
   re-running the WHOLE atomic unit; see ``inventory_kernel.db.retry``.

3. Caller-fault errors (ValidationError, NotFoundError, PlanError,
   StockError) are never retried automatically.
"""


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must define a ``code`` class attribute.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Validation


class ValidationError(InventoryKernelError):
    """Input failed a kernel-level check."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


# Not found


class NotFoundError(InventoryKernelError):
    """Base exception for entities absent or invisible under tenant scoping."""

    code: str = "NOT_FOUND"


class TenantNotFoundError(NotFoundError):
    """Tenant with given ID was not found."""

    code: str = "TENANT_NOT_FOUND"

    def __init__(self, tenant_id: str):
        self.tenant_id = tenant_id
        super().__init__(f"Tenant not found: {tenant_id}")


class MaterialNotFoundError(NotFoundError):
    """
    Material was not found for the requesting tenant.

    Raised identically whether the material never existed, was soft-deleted,
    or belongs to another tenant.
    """

    code: str = "MATERIAL_NOT_FOUND"

    def __init__(self, material_id: str):
        self.material_id = material_id
        super().__init__(f"Material not found: {material_id}")


# Plan


class PlanError(InventoryKernelError):
    """Base exception for plan-tier restrictions."""

    code: str = "PLAN_ERROR"


class QuotaExceededError(PlanError):
    """Tenant has reached the active-material limit of its plan."""

    code: str = "QUOTA_EXCEEDED"

    def __init__(self, plan: str, limit: int, current_count: int):
        self.plan = plan
        self.limit = limit
        self.current_count = current_count
        super().__init__(
            f"{plan} plan allows maximum {limit} materials "
            f"(currently {current_count}). Upgrade the plan or delete a material."
        )


class PlanRestrictedError(PlanError):
    """Feature is not available on the tenant's plan."""

    code: str = "PLAN_RESTRICTED"

    def __init__(self, plan: str, feature: str):
        self.plan = plan
        self.feature = feature
        super().__init__(
            f"{feature} is not available on the {plan} plan. Please upgrade your plan."
        )


# Stock


class StockError(InventoryKernelError):
    """Base exception for stock mutation errors."""

    code: str = "STOCK_ERROR"


class InsufficientStockError(StockError):
    """An OUT transaction would drive stock negative."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, material_id: str, current_stock: int, requested_quantity: int):
        self.material_id = material_id
        self.current_stock = current_stock
        self.requested_quantity = requested_quantity
        super().__init__(
            f"Insufficient stock. Current stock: {current_stock}, "
            f"requested: {requested_quantity}"
        )


# Concurrency


class ConcurrencyError(InventoryKernelError):
    """Base exception for concurrency-related errors."""

    code: str = "CONCURRENCY_ERROR"


class StorageConflictError(ConcurrencyError):
    """
    Atomic unit could not commit.

    Covers lock contention, deadlock victims, serialization failures,
    pool timeouts and dropped connections. No partial effects survive.
    """

    code: str = "STORAGE_CONFLICT"

    def __init__(self, operation: str, retryable: bool = True):
        self.operation = operation
        self.retryable = retryable
        super().__init__(
            f"Storage conflict during {operation}; the operation was rolled back"
        )


# Immutability


class ImmutabilityError(InventoryKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """Attempted to modify or delete an append-only record."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Cannot modify {entity_type} {entity_id}: {reason}"
        )
