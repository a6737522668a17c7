"""
Response envelopes for the API boundary.

Every response body is ``{"success": true, "data": ..., "message"?: ...}``
or ``{"success": false, "error": CODE, "message": ...}``.  Kernel DTOs
are serialized with camelCase keys; UUIDs and datetimes become strings.
"""

from __future__ import annotations

import dataclasses
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from inventory_kernel.exceptions import InventoryKernelError

STATUS_BY_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "NOT_FOUND": 404,
    "TENANT_NOT_FOUND": 404,
    "MATERIAL_NOT_FOUND": 404,
    "QUOTA_EXCEEDED": 403,
    "PLAN_RESTRICTED": 403,
    "INSUFFICIENT_STOCK": 409,
    "STORAGE_CONFLICT": 503,
}

INTERNAL_ERROR_CODE = "INTERNAL_ERROR"
INTERNAL_ERROR_MESSAGE = "Something went wrong"


@dataclasses.dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def serialize(value: Any) -> Any:
    """Convert DTOs and containers into JSON-ready values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            to_camel(f.name): serialize(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {to_camel(str(k)): serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    return value


def success_response(
    status_code: int,
    data: Any,
    message: str | None = None,
    **extra: Any,
) -> ApiResponse:
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body["data"] = serialize(data)
    for key, val in extra.items():
        body[to_camel(key)] = serialize(val)
    return ApiResponse(status_code, body)


def error_response(status_code: int, error: str, message: str) -> ApiResponse:
    return ApiResponse(status_code, {"success": False, "error": error, "message": message})


def status_for(exc: InventoryKernelError) -> int:
    return STATUS_BY_CODE.get(exc.code, 500)


def from_exception(exc: InventoryKernelError) -> ApiResponse:
    """Map a kernel error to its envelope. Unmapped codes become a bare 500."""
    status = status_for(exc)
    if status == 500:
        return internal_error_response()
    return error_response(status, exc.code, str(exc))


def internal_error_response() -> ApiResponse:
    return error_response(500, INTERNAL_ERROR_CODE, INTERNAL_ERROR_MESSAGE)
