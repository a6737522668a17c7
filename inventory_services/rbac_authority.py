"""
inventory_services.rbac_authority -- Role gate at the API boundary.

Responsibility:
    Decide whether a caller's asserted role may perform an action.  Roles
    arrive from the upstream identity layer in the ``x-user-role`` header
    and are trusted as given.

Invariants:
    - The kernel remains role-agnostic; every check happens here, before
      the kernel is called.
    - Unknown actions are denied.
"""

from __future__ import annotations

from inventory_kernel.domain.context import UserRole

_ANY_ROLE = frozenset({UserRole.ADMIN, UserRole.USER})
_ADMIN_ONLY = frozenset({UserRole.ADMIN})

# action -> roles allowed to perform it
ACTION_ROLES: dict[str, frozenset[UserRole]] = {
    "material.create": _ADMIN_ONLY,
    "material.list": _ANY_ROLE,
    "material.get": _ANY_ROLE,
    "material.delete": _ADMIN_ONLY,
    "transaction.create": _ANY_ROLE,
    "transaction.list": _ANY_ROLE,
    "analytics.summary": _ANY_ROLE,
}


def parse_role(raw_role: str | None) -> UserRole | None:
    """Return the UserRole named by the header value, or None if invalid."""
    if raw_role is None:
        return None
    try:
        return UserRole(raw_role.strip())
    except ValueError:
        return None


def get_allowed_roles(action: str) -> frozenset[UserRole]:
    return ACTION_ROLES.get(action, frozenset())


def check_role(role: UserRole, action: str) -> tuple[bool, str]:
    """Check whether ``role`` may perform ``action``.

    Returns:
        (allowed, reason). reason is empty when allowed, or a short message
        naming the roles the action requires.
    """
    allowed = get_allowed_roles(action)
    if not allowed:
        return (False, f"Unknown action '{action}'")
    if role not in allowed:
        names = ", ".join(r.value for r in sorted(allowed, key=lambda r: r.value))
        return (False, f"This action requires one of the following roles: {names}")
    return (True, "")
