"""
Kernel-side input checks.

Request-shape validation belongs to the boundary.  The kernel re-checks
only what its invariants depend on: non-empty trimmed names, length
limits, non-negative opening stock, positive integer quantities and the
IN/OUT enumeration.  All failures raise ValidationError.
"""

from typing import Any
from uuid import UUID

from inventory_kernel.exceptions import ValidationError
from inventory_kernel.models.material import NAME_MAX_LENGTH, UNIT_MAX_LENGTH
from inventory_kernel.models.tenant import Plan
from inventory_kernel.models.transaction import TransactionType


def require_text(field: str, value: Any, max_length: int | None = None) -> str:
    """Return ``value`` trimmed; reject non-strings, blanks and overlong text."""
    if not isinstance(value, str):
        raise ValidationError(field, "is required")
    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(field, "is required")
    if max_length is not None and len(trimmed) > max_length:
        raise ValidationError(field, f"must not exceed {max_length} characters")
    return trimmed


def is_strict_int(value: Any) -> bool:
    # bool is an int subclass; True must not pass as quantity 1
    return isinstance(value, int) and not isinstance(value, bool)


def validate_material_fields(name: Any, unit: Any, current_stock: Any) -> tuple[str, str, int]:
    """Normalize the fields of a new material."""
    clean_name = require_text("name", name, NAME_MAX_LENGTH)
    clean_unit = require_text("unit", unit, UNIT_MAX_LENGTH)
    if current_stock is None:
        current_stock = 0
    if not is_strict_int(current_stock):
        raise ValidationError("current_stock", "must be an integer")
    if current_stock < 0:
        raise ValidationError("current_stock", "cannot be negative")
    return clean_name, clean_unit, current_stock


def parse_transaction_type(value: Any) -> TransactionType:
    if isinstance(value, TransactionType):
        return value
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError("type", "must be either IN or OUT") from None


def validate_quantity(value: Any) -> int:
    if not is_strict_int(value):
        raise ValidationError("quantity", "must be an integer")
    if value <= 0:
        raise ValidationError("quantity", "must be greater than 0")
    return value


def parse_plan(value: Any) -> Plan:
    if value is None:
        return Plan.FREE
    try:
        return Plan(value)
    except ValueError:
        raise ValidationError("plan", "must be either FREE or PRO") from None


def parse_identifier(value: Any) -> UUID | None:
    """
    Coerce an id to UUID, returning None when it cannot name any row.

    Callers turn None into the same NotFound they raise for a missing row,
    so a malformed id reveals nothing.
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def validate_page(field: str, value: Any) -> int:
    if not is_strict_int(value) or value < 1:
        raise ValidationError(field, "must be a positive integer")
    return value
